"""
Models SQLAlchemy pour restopos.
Importer ce module enregistre toutes les tables dans Base.metadata.
"""
from restopos.models.base import Base, TimestampMixin, utc_now
from restopos.models.ingredient import (
    Ingredient,
    IngredientCategory,
    IngredientUnit,
    StockLocation,
)
from restopos.models.stock import (
    StockPurchase,
    StockTransfer,
    StockRemoval,
    StockSale,
    OrderStockMovement,
    StockMovementKind,
)
from restopos.models.menu import MenuCategory, MenuItem, RecipeLine
from restopos.models.table import RestaurantTable, Waiter, TableStatus
from restopos.models.order import (
    Order,
    OrderItem,
    OrderStatus,
    OrderType,
    PaymentMethod,
    DiscountType,
)
from restopos.models.expense import Expense, ExpenseCategory

__all__ = [
    "Base",
    "TimestampMixin",
    "utc_now",
    # Ingredient
    "Ingredient",
    "IngredientCategory",
    "IngredientUnit",
    "StockLocation",
    # Stock ledger
    "StockPurchase",
    "StockTransfer",
    "StockRemoval",
    "StockSale",
    "OrderStockMovement",
    "StockMovementKind",
    # Menu
    "MenuCategory",
    "MenuItem",
    "RecipeLine",
    # Tables
    "RestaurantTable",
    "Waiter",
    "TableStatus",
    # Orders
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderType",
    "PaymentMethod",
    "DiscountType",
    # Expenses
    "Expense",
    "ExpenseCategory",
]
