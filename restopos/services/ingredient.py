"""
Service pour la gestion des ingredients et de leurs categories.

Les champs de stock ne sont jamais modifiables ici: ils passent par
IngredientLedgerService.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from restopos.core.exceptions import (
    CategoryInUse,
    CategoryNotFound,
    Conflict,
    IngredientHasHistory,
    IngredientInUse,
    IngredientNameExists,
    IngredientNotFound,
    InvalidInput,
)
from restopos.core.numbers import quantize_cost, quantize_qty, to_decimal
from restopos.models.ingredient import Ingredient, IngredientCategory, IngredientUnit
from restopos.repositories.ingredient import IngredientRepository, IngredientCategoryRepository
from restopos.services.events import TOPIC_INGREDIENTS, mark_changed

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"name", "unit", "low_stock_threshold", "category_id"}
LEDGER_FIELDS = {"store_stock", "kitchen_stock", "cost_per_unit", "version_id"}


def _unit(value) -> IngredientUnit:
    try:
        return IngredientUnit(value)
    except ValueError as exc:
        raise InvalidInput(f"Unknown unit: {value!r}") from exc


def _threshold(value) -> Decimal:
    threshold = to_decimal(value, "low_stock_threshold")
    if threshold < 0:
        raise InvalidInput("low_stock_threshold must be >= 0")
    return quantize_qty(threshold)


class IngredientService:
    """
    Service pour les ingredients.

    Responsabilites:
    - CRUD ingredients (hors champs de stock)
    - Unicite des noms
    - Protection des ingredients utilises par une recette
    - Categories d'ingredients
    """

    def __init__(
        self,
        ingredient_repo: IngredientRepository,
        category_repo: IngredientCategoryRepository,
    ):
        self.ingredient_repo = ingredient_repo
        self.category_repo = category_repo

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.category_repo.get(category_id) is None:
            raise CategoryNotFound(category_id)

    def _check_name(self, name: str, exclude_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Ingredient name is required")
        existing = self.ingredient_repo.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise IngredientNameExists(name)
        return name

    # =========================================================================
    # Ingredients
    # =========================================================================

    def create_ingredient(
        self,
        name: str,
        unit: IngredientUnit = IngredientUnit.KILOGRAM,
        cost_per_unit: Decimal = Decimal("0"),
        low_stock_threshold: Decimal = Decimal("0"),
        category_id: Optional[int] = None,
    ) -> Ingredient:
        """
        Cree un ingredient. Le stock demarre a zero; le cout peut etre amorce.

        Raises:
            IngredientNameExists: nom deja utilise
            CategoryNotFound: categorie inconnue
        """
        name = self._check_name(name)
        cost = to_decimal(cost_per_unit, "cost_per_unit")
        if cost < 0:
            raise InvalidInput("cost_per_unit must be >= 0")
        self._check_category(category_id)

        ingredient = self.ingredient_repo.create({
            "name": name,
            "unit": _unit(unit),
            "cost_per_unit": quantize_cost(cost),
            "store_stock": Decimal("0"),
            "kitchen_stock": Decimal("0"),
            "low_stock_threshold": _threshold(low_stock_threshold),
            "category_id": category_id,
        })
        mark_changed(self.ingredient_repo.session, TOPIC_INGREDIENTS)
        logger.info(f"Ingredient cree: {ingredient.id} '{name}'")
        return ingredient

    def get_ingredient(self, ingredient_id: int) -> Ingredient:
        ingredient = self.ingredient_repo.get(ingredient_id)
        if ingredient is None:
            raise IngredientNotFound(ingredient_id)
        return ingredient

    def list_ingredients(self, category_id: Optional[int] = None) -> List[Ingredient]:
        return self.ingredient_repo.list_all(category_id=category_id)

    def search_ingredients(self, query: str) -> List[Ingredient]:
        query = (query or "").strip()
        if not query:
            return self.list_ingredients()
        return self.ingredient_repo.search_by_name(query)

    def update_ingredient(self, ingredient_id: int, data: Dict[str, Any]) -> Ingredient:
        """
        Met a jour nom, unite, seuil et categorie.

        Raises:
            InvalidInput: tentative de modifier un champ de stock ou champ inconnu
        """
        forbidden = set(data) & LEDGER_FIELDS
        if forbidden:
            raise InvalidInput(
                f"Stock fields cannot be edited directly: {', '.join(sorted(forbidden))}"
            )
        unknown = set(data) - EDITABLE_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")

        ingredient = self.get_ingredient(ingredient_id)
        changes: Dict[str, Any] = {}
        if "name" in data:
            changes["name"] = self._check_name(data["name"], exclude_id=ingredient.id)
        if "unit" in data:
            changes["unit"] = _unit(data["unit"])
        if "low_stock_threshold" in data:
            changes["low_stock_threshold"] = _threshold(data["low_stock_threshold"])
        if "category_id" in data:
            self._check_category(data["category_id"])
            changes["category_id"] = data["category_id"]

        for key, value in changes.items():
            setattr(ingredient, key, value)
        self.ingredient_repo.session.flush()
        mark_changed(self.ingredient_repo.session, TOPIC_INGREDIENTS)
        return ingredient

    def delete_ingredient(self, ingredient_id: int) -> None:
        """
        Supprime un ingredient jamais utilise.

        Le journal de stock n'est jamais efface: un ingredient deja achete,
        transfere ou vendu reste en base.

        Raises:
            IngredientInUse: au moins une recette le reference
            IngredientHasHistory: au moins un enregistrement du journal de stock
        """
        ingredient = self.get_ingredient(ingredient_id)
        menu_item_ids = self.ingredient_repo.get_menu_item_ids_using(ingredient.id)
        if menu_item_ids:
            raise IngredientInUse(ingredient.id, menu_item_ids)
        records = self.ingredient_repo.count_ledger_records(ingredient.id)
        if records:
            raise IngredientHasHistory(ingredient.id, records)
        self.ingredient_repo.delete(ingredient.id)
        mark_changed(self.ingredient_repo.session, TOPIC_INGREDIENTS)
        logger.info(f"Ingredient supprime: {ingredient_id}")

    # =========================================================================
    # Categories
    # =========================================================================

    def create_category(self, name: str) -> IngredientCategory:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Category name is required")
        if self.category_repo.get_by_name(name) is not None:
            raise Conflict(f"Category '{name}' already exists")
        category = self.category_repo.create({"name": name})
        mark_changed(self.category_repo.session, TOPIC_INGREDIENTS)
        return category

    def list_categories(self) -> List[IngredientCategory]:
        return self.category_repo.list_all()

    def delete_category(self, category_id: int) -> None:
        """Refuse si des ingredients sont encore rattaches a la categorie."""
        if self.category_repo.get(category_id) is None:
            raise CategoryNotFound(category_id)
        in_use = self.ingredient_repo.count_in_category(category_id)
        if in_use:
            raise CategoryInUse(f"Category {category_id} is assigned to {in_use} ingredient(s)")
        self.category_repo.delete(category_id)
        mark_changed(self.category_repo.session, TOPIC_INGREDIENTS)
