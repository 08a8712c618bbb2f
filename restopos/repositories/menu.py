"""
Repositories pour MenuItem et MenuCategory.
"""
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from restopos.models.menu import MenuCategory, MenuItem, RecipeLine
from restopos.repositories.base import BaseRepository


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository pour les articles du menu."""

    model = MenuItem

    def get_with_recipe(self, menu_item_id: int) -> Optional[MenuItem]:
        """Recupere un article avec ses lignes de recette."""
        stmt = (
            select(MenuItem)
            .options(selectinload(MenuItem.recipe))
            .where(MenuItem.id == menu_item_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_many_with_recipe(self, menu_item_ids: List[int]) -> List[MenuItem]:
        """Recupere plusieurs articles avec leurs recettes."""
        if not menu_item_ids:
            return []
        stmt = (
            select(MenuItem)
            .options(selectinload(MenuItem.recipe))
            .where(MenuItem.id.in_(menu_item_ids))
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_all(
        self,
        category_id: Optional[int] = None,
        available_only: bool = False,
    ) -> List[MenuItem]:
        """Liste les articles, filtres par categorie et disponibilite."""
        stmt = select(MenuItem).options(selectinload(MenuItem.recipe))
        if category_id is not None:
            stmt = stmt.where(MenuItem.category_id == category_id)
        if available_only:
            stmt = stmt.where(MenuItem.is_available == True)
        stmt = stmt.order_by(MenuItem.name)
        return list(self.session.execute(stmt).scalars().all())

    def get_using_ingredient(self, ingredient_id: int) -> List[MenuItem]:
        """Articles dont la recette utilise l'ingredient."""
        stmt = (
            select(MenuItem)
            .join(RecipeLine, RecipeLine.menu_item_id == MenuItem.id)
            .where(RecipeLine.ingredient_id == ingredient_id)
            .distinct()
        )
        return list(self.session.execute(stmt).scalars().all())


class MenuCategoryRepository(BaseRepository[MenuCategory]):
    """Repository pour les categories du menu."""

    model = MenuCategory

    def list_all(self) -> List[MenuCategory]:
        stmt = select(MenuCategory).order_by(MenuCategory.sort_order, MenuCategory.name)
        return list(self.session.execute(stmt).scalars().all())

    def count_items(self, category_id: int) -> int:
        stmt = select(func.count()).select_from(MenuItem).where(MenuItem.category_id == category_id)
        return self.session.execute(stmt).scalar() or 0
