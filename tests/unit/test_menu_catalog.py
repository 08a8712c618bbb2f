"""
Tests du catalogue: cout recette, marge, recalcul, categories.
"""
import pytest
from decimal import Decimal

from restopos.core.exceptions import (
    CategoryInUse,
    IngredientNotFound,
    InvalidInput,
    InvalidQuantity,
    MenuItemNotFound,
)
from restopos.services.events import TOPIC_MENU, pending_topics
from restopos.services.menu import RecipeLineInput


class TestMenuItems:

    @pytest.mark.unit
    def test_create_computes_cost_and_margin(self, burger):
        assert burger.recipe_cost == Decimal("220.0000")
        assert burger.profit_margin == Decimal("72.50")
        assert [line.position for line in burger.recipe] == [0, 1]

    @pytest.mark.unit
    def test_recipe_lines_accept_dataclass_input(self, menu_service, stocked_kitchen):
        item = menu_service.create_menu_item(
            name="Pain seul",
            price=Decimal("50"),
            recipe=[RecipeLineInput(ingredient_id=stocked_kitchen["bun"].id, quantity=Decimal("1"))],
        )

        assert item.recipe_cost == Decimal("20.0000")

    @pytest.mark.unit
    def test_unknown_ingredient_in_recipe(self, menu_service):
        with pytest.raises(IngredientNotFound):
            menu_service.create_menu_item(
                name="Mystere", price=Decimal("10"),
                recipe=[{"ingredient_id": 4242, "quantity": "1"}],
            )

    @pytest.mark.unit
    def test_recipe_quantity_must_be_positive(self, menu_service, stocked_kitchen):
        with pytest.raises(InvalidQuantity):
            menu_service.create_menu_item(
                name="Vide", price=Decimal("10"),
                recipe=[{"ingredient_id": stocked_kitchen["bun"].id, "quantity": "0"}],
            )

    @pytest.mark.unit
    def test_negative_price_rejected(self, menu_service):
        with pytest.raises(InvalidInput):
            menu_service.create_menu_item(name="Gratuit", price=Decimal("-1"))

    @pytest.mark.unit
    def test_price_change_updates_margin(self, menu_service, burger):
        menu_service.update_menu_item(burger.id, {"price": Decimal("1000")})

        assert burger.profit_margin == Decimal("78.00")
        assert burger.recipe_cost == Decimal("220.0000")

    @pytest.mark.unit
    def test_set_recipe_replaces_lines(self, menu_service, burger, stocked_kitchen):
        menu_service.set_recipe(burger.id, [{"ingredient_id": stocked_kitchen["beef"].id, "quantity": "0.3"}])

        assert len(burger.recipe) == 1
        assert burger.recipe_cost == Decimal("300.0000")

    @pytest.mark.unit
    def test_availability_and_listing(self, menu_service, burger):
        menu_service.set_availability(burger.id, False)

        assert menu_service.list_menu_items(available_only=True) == []
        assert [i.id for i in menu_service.list_menu_items()] == [burger.id]

    @pytest.mark.unit
    def test_delete(self, menu_service, burger, db_session):
        menu_service.delete_menu_item(burger.id)

        with pytest.raises(MenuItemNotFound):
            menu_service.get_menu_item(burger.id)
        assert TOPIC_MENU in pending_topics(db_session)

    @pytest.mark.unit
    def test_recalculate_after_purchase(self, menu_service, ledger, burger, stocked_kitchen):
        # reserve boeuf: 3 @ 1000, achat 5 @ 2000 -> cout moyen 1625
        ledger.add_purchase(stocked_kitchen["beef"].id, Decimal("5"), Decimal("2000"))

        assert menu_service.recalculate_costs() == 1
        assert burger.recipe_cost == Decimal("345.0000")
        assert menu_service.recalculate_costs() == 0


class TestMenuCategories:

    @pytest.mark.unit
    def test_create_and_update(self, menu_service):
        category = menu_service.create_category("Burgers", icon="burger", sort_order=2)

        menu_service.update_category(category.id, {"color": "#ff0000"})

        assert category.color == "#ff0000"
        assert [c.name for c in menu_service.list_categories()] == ["Burgers"]

    @pytest.mark.unit
    def test_unknown_field_rejected(self, menu_service):
        category = menu_service.create_category("Boissons")

        with pytest.raises(InvalidInput):
            menu_service.update_category(category.id, {"visible": True})

    @pytest.mark.unit
    def test_delete_with_items_rejected(self, menu_service):
        category = menu_service.create_category("Desserts")
        menu_service.create_menu_item(name="Kulfi", price=Decimal("150"), category_id=category.id)

        with pytest.raises(CategoryInUse):
            menu_service.delete_category(category.id)
