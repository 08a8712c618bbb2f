"""
Factories du catalogue.
"""
from decimal import Decimal

from factory import Sequence

from restopos.models.menu import MenuCategory, MenuItem, RecipeLine
from tests.factories.base import SessionFactory


class MenuCategoryFactory(SessionFactory):

    class Meta:
        model = MenuCategory

    name = Sequence(lambda n: f"Rubrique {n}")
    sort_order = 0


class MenuItemFactory(SessionFactory):

    class Meta:
        model = MenuItem

    name = Sequence(lambda n: f"Plat {n}")
    price = Decimal("500.00")
    is_available = True
    recipe_cost = Decimal("0")
    profit_margin = Decimal("0")


class RecipeLineFactory(SessionFactory):

    class Meta:
        model = RecipeLine

    quantity = Decimal("1")
    position = 0
