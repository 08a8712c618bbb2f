"""
Service du catalogue: articles du menu, recettes et categories.

recipe_cost et profit_margin sont recalcules a chaque modification du
prix ou de la recette.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from restopos.core.exceptions import (
    CategoryInUse,
    CategoryNotFound,
    IngredientNotFound,
    InvalidInput,
    MenuItemNotFound,
)
from restopos.core.numbers import positive_quantity, quantize_money, to_decimal
from restopos.models.menu import MenuCategory, MenuItem, RecipeLine
from restopos.repositories.ingredient import IngredientRepository
from restopos.repositories.menu import MenuCategoryRepository, MenuItemRepository
from restopos.services.costing import RecipeCost, profit_margin, recipe_cost
from restopos.services.events import TOPIC_MENU, mark_changed

logger = logging.getLogger(__name__)

ITEM_FIELDS = {"name", "description", "price", "category_id", "is_available"}
CATEGORY_FIELDS = {"name", "icon", "color", "sort_order"}


@dataclass(frozen=True)
class RecipeLineInput:
    """Ligne de recette saisie: quantite d'ingredient par unite vendue."""
    ingredient_id: int
    quantity: Decimal


def _price(value) -> Decimal:
    price = to_decimal(value, "price")
    if price < 0:
        raise InvalidInput("price must be >= 0")
    return quantize_money(price)


def _line(raw: Any) -> RecipeLineInput:
    if isinstance(raw, dict):
        ingredient_id, quantity = raw.get("ingredient_id"), raw.get("quantity")
    else:
        ingredient_id, quantity = raw.ingredient_id, raw.quantity
    if ingredient_id is None:
        raise InvalidInput("Recipe line requires an ingredient_id")
    return RecipeLineInput(ingredient_id=int(ingredient_id), quantity=positive_quantity(quantity))


class MenuCatalogService:
    """
    Service du catalogue.

    Responsabilites:
    - CRUD des articles et de leurs recettes
    - Calcul du cout recette et de la marge
    - Disponibilite des articles
    - Categories du menu
    """

    def __init__(
        self,
        menu_repo: MenuItemRepository,
        category_repo: MenuCategoryRepository,
        ingredient_repo: IngredientRepository,
    ):
        self.menu_repo = menu_repo
        self.category_repo = category_repo
        self.ingredient_repo = ingredient_repo

    # =========================================================================
    # Helpers
    # =========================================================================

    def _validate_recipe(self, recipe: Iterable[Any]) -> List[RecipeLineInput]:
        lines = [_line(raw) for raw in recipe or []]
        known = {i.id for i in self.ingredient_repo.get_many([line.ingredient_id for line in lines])}
        for line in lines:
            if line.ingredient_id not in known:
                raise IngredientNotFound(line.ingredient_id)
        return lines

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.category_repo.get(category_id) is None:
            raise CategoryNotFound(category_id)

    def compute_cost(self, item: MenuItem) -> RecipeCost:
        """Cout de la recette d'un article au cout moyen courant."""
        ids = [line.ingredient_id for line in item.recipe]
        ingredients = {i.id: i for i in self.ingredient_repo.get_many(ids)}
        return recipe_cost(item.recipe, ingredients)

    def _refresh_costing(self, item: MenuItem) -> None:
        cost = self.compute_cost(item)
        item.recipe_cost = cost.total
        item.profit_margin = profit_margin(item.price, cost.total)

    def _changed(self) -> None:
        mark_changed(self.menu_repo.session, TOPIC_MENU)

    # =========================================================================
    # Articles
    # =========================================================================

    def create_menu_item(
        self,
        name: str,
        price: Decimal,
        description: Optional[str] = None,
        category_id: Optional[int] = None,
        is_available: bool = True,
        recipe: Optional[Iterable[Any]] = None,
    ) -> MenuItem:
        """
        Cree un article avec sa recette.

        Raises:
            InvalidInput: nom vide ou prix negatif
            IngredientNotFound: ligne de recette sur un ingredient inconnu
            CategoryNotFound: categorie inconnue
        """
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Menu item name is required")
        price = _price(price)
        self._check_category(category_id)
        lines = self._validate_recipe(recipe)

        item = MenuItem(
            name=name,
            description=description,
            price=price,
            category_id=category_id,
            is_available=is_available,
            recipe=[
                RecipeLine(ingredient_id=line.ingredient_id, quantity=line.quantity, position=index)
                for index, line in enumerate(lines)
            ],
        )
        self._refresh_costing(item)
        self.menu_repo.session.add(item)
        self.menu_repo.session.flush()
        self._changed()
        logger.info(f"Article cree: {item.id} '{name}' cout {item.recipe_cost}")
        return item

    def get_menu_item(self, menu_item_id: int) -> MenuItem:
        item = self.menu_repo.get_with_recipe(menu_item_id)
        if item is None:
            raise MenuItemNotFound(menu_item_id)
        return item

    def list_menu_items(
        self,
        category_id: Optional[int] = None,
        available_only: bool = False,
    ) -> List[MenuItem]:
        return self.menu_repo.list_all(category_id=category_id, available_only=available_only)

    def update_menu_item(self, menu_item_id: int, data: Dict[str, Any]) -> MenuItem:
        """
        Met a jour un article. Une cle "recipe" remplace la recette.
        """
        unknown = set(data) - ITEM_FIELDS - {"recipe"}
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")

        item = self.get_menu_item(menu_item_id)
        if "name" in data:
            name = (data["name"] or "").strip()
            if not name:
                raise InvalidInput("Menu item name is required")
            item.name = name
        if "description" in data:
            item.description = data["description"]
        if "price" in data:
            item.price = _price(data["price"])
        if "category_id" in data:
            self._check_category(data["category_id"])
            item.category_id = data["category_id"]
        if "is_available" in data:
            item.is_available = bool(data["is_available"])
        if "recipe" in data:
            self._replace_recipe(item, self._validate_recipe(data["recipe"]))

        self._refresh_costing(item)
        self.menu_repo.session.flush()
        self._changed()
        return item

    def _replace_recipe(self, item: MenuItem, lines: List[RecipeLineInput]) -> None:
        item.recipe.clear()
        self.menu_repo.session.flush()
        for index, line in enumerate(lines):
            item.recipe.append(
                RecipeLine(ingredient_id=line.ingredient_id, quantity=line.quantity, position=index)
            )

    def set_recipe(self, menu_item_id: int, recipe: Iterable[Any]) -> MenuItem:
        """Remplace la recette et recalcule cout et marge."""
        lines = self._validate_recipe(recipe)
        item = self.get_menu_item(menu_item_id)
        self._replace_recipe(item, lines)
        self._refresh_costing(item)
        self.menu_repo.session.flush()
        self._changed()
        return item

    def set_availability(self, menu_item_id: int, is_available: bool) -> MenuItem:
        item = self.get_menu_item(menu_item_id)
        item.is_available = is_available
        self.menu_repo.session.flush()
        self._changed()
        return item

    def delete_menu_item(self, menu_item_id: int) -> None:
        """
        Supprime un article. Les lignes de commandes passees gardent leur
        instantane (menu_item_id passe a NULL).
        """
        item = self.get_menu_item(menu_item_id)
        self.menu_repo.session.delete(item)
        self.menu_repo.session.flush()
        self._changed()
        logger.info(f"Article supprime: {menu_item_id}")

    def recalculate_costs(self) -> int:
        """
        Recalcule le cout de tous les articles depuis les couts moyens courants.

        Returns:
            Nombre d'articles dont le cout a change
        """
        changed = 0
        for item in self.menu_repo.list_all():
            cost = self.compute_cost(item)
            margin = profit_margin(item.price, cost.total)
            if cost.total != item.recipe_cost or margin != item.profit_margin:
                item.recipe_cost = cost.total
                item.profit_margin = margin
                changed += 1
        if changed:
            self.menu_repo.session.flush()
            self._changed()
        logger.info(f"Couts recettes recalcules: {changed} article(s) modifie(s)")
        return changed

    # =========================================================================
    # Categories
    # =========================================================================

    def create_category(
        self,
        name: str,
        icon: Optional[str] = None,
        color: Optional[str] = None,
        sort_order: int = 0,
    ) -> MenuCategory:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Category name is required")
        category = self.category_repo.create({
            "name": name,
            "icon": icon,
            "color": color,
            "sort_order": sort_order,
        })
        self._changed()
        return category

    def list_categories(self) -> List[MenuCategory]:
        return self.category_repo.list_all()

    def update_category(self, category_id: int, data: Dict[str, Any]) -> MenuCategory:
        unknown = set(data) - CATEGORY_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")
        if "name" in data and not (data["name"] or "").strip():
            raise InvalidInput("Category name is required")
        category = self.category_repo.update(category_id, data)
        if category is None:
            raise CategoryNotFound(category_id)
        self._changed()
        return category

    def delete_category(self, category_id: int) -> None:
        """Refuse si des articles sont encore rattaches a la categorie."""
        if self.category_repo.get(category_id) is None:
            raise CategoryNotFound(category_id)
        in_use = self.category_repo.count_items(category_id)
        if in_use:
            raise CategoryInUse(f"Menu category {category_id} has {in_use} item(s)")
        self.category_repo.delete(category_id)
        self._changed()
