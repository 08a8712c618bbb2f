"""
Repositories restopos (acces aux donnees).
"""
from restopos.repositories.base import BaseRepository, to_utc
from restopos.repositories.ingredient import IngredientRepository, IngredientCategoryRepository
from restopos.repositories.stock import StockLedgerRepository
from restopos.repositories.menu import MenuItemRepository, MenuCategoryRepository
from restopos.repositories.table import TableRepository, WaiterRepository
from restopos.repositories.order import OrderRepository
from restopos.repositories.expense import ExpenseRepository

__all__ = [
    "BaseRepository",
    "to_utc",
    "IngredientRepository",
    "IngredientCategoryRepository",
    "StockLedgerRepository",
    "MenuItemRepository",
    "MenuCategoryRepository",
    "TableRepository",
    "WaiterRepository",
    "OrderRepository",
    "ExpenseRepository",
]
