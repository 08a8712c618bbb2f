"""
Factories FactoryBoy pour les tests.

Usage:
    from tests.factories import IngredientFactory, RestaurantTableFactory

    beef = IngredientFactory.create(db_session=db_session, name="Boeuf")
    table = RestaurantTableFactory.create(db_session=db_session, number=3)
"""
from tests.factories.ingredient import IngredientFactory, IngredientCategoryFactory
from tests.factories.menu import MenuItemFactory, RecipeLineFactory, MenuCategoryFactory
from tests.factories.table import RestaurantTableFactory, WaiterFactory

__all__ = [
    "IngredientFactory",
    "IngredientCategoryFactory",
    "MenuItemFactory",
    "RecipeLineFactory",
    "MenuCategoryFactory",
    "RestaurantTableFactory",
    "WaiterFactory",
]
