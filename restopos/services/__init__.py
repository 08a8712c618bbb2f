"""
Services metier restopos.
"""
from restopos.services.ledger import IngredientLedgerService, KITCHEN_DEDUCTION_POLICY, LowStockAlert
from restopos.services.costing import RecipeCost, recipe_cost, profit_margin
from restopos.services.ingredient import IngredientService
from restopos.services.menu import MenuCatalogService, RecipeLineInput
from restopos.services.tables import TableRegistryService
from restopos.services.orders import (
    Cart,
    CartLine,
    CancellationResult,
    OrderCreation,
    OrderDetails,
    OrderEngineService,
    OrderEntryPolicy,
    UnresolvedReference,
)
from restopos.services.reports import ReportService, DailyReport, DailySales, DirectSalesSummary
from restopos.services.expenses import ExpenseService
from restopos.services.events import ChangeNotifier, change_notifier, mark_changed

__all__ = [
    "IngredientLedgerService",
    "KITCHEN_DEDUCTION_POLICY",
    "LowStockAlert",
    "RecipeCost",
    "recipe_cost",
    "profit_margin",
    "IngredientService",
    "MenuCatalogService",
    "RecipeLineInput",
    "TableRegistryService",
    "Cart",
    "CartLine",
    "CancellationResult",
    "OrderCreation",
    "OrderDetails",
    "OrderEngineService",
    "OrderEntryPolicy",
    "UnresolvedReference",
    "ReportService",
    "DailyReport",
    "DailySales",
    "DirectSalesSummary",
    "ExpenseService",
    "ChangeNotifier",
    "change_notifier",
    "mark_changed",
]
