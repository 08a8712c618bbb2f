"""
Repositories pour Ingredient et IngredientCategory.
"""
from typing import List, Optional

from sqlalchemy import func, select

from restopos.models.ingredient import Ingredient, IngredientCategory
from restopos.models.menu import RecipeLine
from restopos.models.stock import (
    OrderStockMovement,
    StockPurchase,
    StockRemoval,
    StockSale,
    StockTransfer,
)
from restopos.repositories.base import BaseRepository


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository pour les ingredients."""

    model = Ingredient

    def get_for_update(self, ingredient_id: int) -> Optional[Ingredient]:
        """
        Recupere un ingredient en posant un verrou de ligne (SELECT ... FOR UPDATE).

        Sous SQLite la clause est ignoree; le version_id reste le garde-fou.
        """
        stmt = (
            select(Ingredient)
            .where(Ingredient.id == ingredient_id)
            .with_for_update()
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_many(self, ingredient_ids: List[int]) -> List[Ingredient]:
        """Recupere plusieurs ingredients par ID."""
        if not ingredient_ids:
            return []
        stmt = select(Ingredient).where(Ingredient.id.in_(ingredient_ids))
        return list(self.session.execute(stmt).scalars().all())

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        """Recupere un ingredient par nom (exact, insensible a la casse)."""
        stmt = select(Ingredient).where(func.lower(Ingredient.name) == name.strip().lower())
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self, category_id: Optional[int] = None) -> List[Ingredient]:
        """Liste les ingredients, optionnellement filtres par categorie."""
        stmt = select(Ingredient)
        if category_id is not None:
            stmt = stmt.where(Ingredient.category_id == category_id)
        stmt = stmt.order_by(Ingredient.name)
        return list(self.session.execute(stmt).scalars().all())

    def search_by_name(self, query: str) -> List[Ingredient]:
        """Recherche ingredients par nom (like)."""
        stmt = (
            select(Ingredient)
            .where(Ingredient.name.ilike(f"%{query}%"))
            .order_by(Ingredient.name)
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_menu_item_ids_using(self, ingredient_id: int) -> List[int]:
        """IDs des menu items dont la recette reference l'ingredient."""
        stmt = (
            select(RecipeLine.menu_item_id)
            .where(RecipeLine.ingredient_id == ingredient_id)
            .distinct()
            .order_by(RecipeLine.menu_item_id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def count_ledger_records(self, ingredient_id: int) -> int:
        """Nombre d'enregistrements du journal de stock rattaches a l'ingredient."""
        total = 0
        for record in (StockPurchase, StockTransfer, StockRemoval, StockSale, OrderStockMovement):
            stmt = select(func.count()).select_from(record).where(record.ingredient_id == ingredient_id)
            total += self.session.execute(stmt).scalar() or 0
        return total

    def count_in_category(self, category_id: int) -> int:
        stmt = select(func.count()).select_from(Ingredient).where(Ingredient.category_id == category_id)
        return self.session.execute(stmt).scalar() or 0


class IngredientCategoryRepository(BaseRepository[IngredientCategory]):
    """Repository pour les categories d'ingredients."""

    model = IngredientCategory

    def get_by_name(self, name: str) -> Optional[IngredientCategory]:
        stmt = select(IngredientCategory).where(IngredientCategory.name == name)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> List[IngredientCategory]:
        stmt = select(IngredientCategory).order_by(IngredientCategory.name)
        return list(self.session.execute(stmt).scalars().all())
