"""
Tests du service ingredients (hors journal de stock).
"""
import pytest
from decimal import Decimal

from restopos.core.exceptions import (
    CategoryInUse,
    Conflict,
    IngredientInUse,
    IngredientNameExists,
    IngredientNotFound,
    InvalidInput,
)
from restopos.models.ingredient import IngredientUnit


class TestIngredients:

    @pytest.mark.unit
    def test_create_with_defaults(self, ingredient_service):
        ingredient = ingredient_service.create_ingredient("Tomate", unit="kg", low_stock_threshold="5")

        assert ingredient.unit == IngredientUnit.KILOGRAM
        assert ingredient.low_stock_threshold == Decimal("5")
        assert ingredient.store_stock == Decimal("0")
        assert ingredient.kitchen_stock == Decimal("0")

    @pytest.mark.unit
    def test_name_unique_case_insensitive(self, ingredient_service):
        ingredient_service.create_ingredient("Tomate")

        with pytest.raises(IngredientNameExists):
            ingredient_service.create_ingredient("  tomate ")

    @pytest.mark.unit
    def test_unknown_unit(self, ingredient_service):
        with pytest.raises(InvalidInput):
            ingredient_service.create_ingredient("Lait", unit="gallon")

    @pytest.mark.unit
    @pytest.mark.parametrize("field", ["store_stock", "kitchen_stock", "cost_per_unit"])
    def test_stock_fields_not_editable(self, ingredient_service, field):
        ingredient = ingredient_service.create_ingredient("Tomate")

        with pytest.raises(InvalidInput):
            ingredient_service.update_ingredient(ingredient.id, {field: Decimal("99")})

    @pytest.mark.unit
    def test_update_editable_fields(self, ingredient_service):
        ingredient = ingredient_service.create_ingredient("Tomate")
        category = ingredient_service.create_category("Legumes")

        ingredient_service.update_ingredient(
            ingredient.id, {"name": "Tomate cerise", "category_id": category.id, "unit": "pcs"}
        )

        assert ingredient.name == "Tomate cerise"
        assert ingredient.unit == IngredientUnit.PIECES
        assert [i.id for i in ingredient_service.list_ingredients(category_id=category.id)] == [ingredient.id]

    @pytest.mark.unit
    def test_search(self, ingredient_service):
        ingredient_service.create_ingredient("Poivre noir")
        ingredient_service.create_ingredient("Sel")

        assert [i.name for i in ingredient_service.search_ingredients("poivre")] == ["Poivre noir"]

    @pytest.mark.unit
    def test_delete_used_ingredient_rejected(self, ingredient_service, burger, stocked_kitchen):
        with pytest.raises(IngredientInUse) as exc_info:
            ingredient_service.delete_ingredient(stocked_kitchen["beef"].id)

        assert exc_info.value.menu_item_ids == [burger.id]

    @pytest.mark.unit
    def test_delete_unused(self, ingredient_service):
        ingredient = ingredient_service.create_ingredient("Menthe")

        ingredient_service.delete_ingredient(ingredient.id)

        with pytest.raises(IngredientNotFound):
            ingredient_service.get_ingredient(ingredient.id)


class TestIngredientCategories:

    @pytest.mark.unit
    def test_duplicate_category(self, ingredient_service):
        ingredient_service.create_category("Epices")

        with pytest.raises(Conflict):
            ingredient_service.create_category("Epices")

    @pytest.mark.unit
    def test_delete_category_in_use(self, ingredient_service):
        category = ingredient_service.create_category("Viandes")
        ingredient_service.create_ingredient("Poulet", category_id=category.id)

        with pytest.raises(CategoryInUse):
            ingredient_service.delete_category(category.id)
