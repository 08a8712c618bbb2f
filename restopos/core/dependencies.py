"""
Dependencies FastAPI pour restopos
Construction des services a partir d'une session DB.

Les fonctions build_* servent aussi hors HTTP:
    run_in_transaction(lambda db: build_order_engine(db).settle(order_id))
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from restopos.core.database import get_db
from restopos.repositories.expense import ExpenseRepository
from restopos.repositories.ingredient import IngredientRepository, IngredientCategoryRepository
from restopos.repositories.menu import MenuItemRepository, MenuCategoryRepository
from restopos.repositories.order import OrderRepository
from restopos.repositories.stock import StockLedgerRepository
from restopos.repositories.table import TableRepository, WaiterRepository
from restopos.services.expenses import ExpenseService
from restopos.services.ingredient import IngredientService
from restopos.services.ledger import IngredientLedgerService
from restopos.services.menu import MenuCatalogService
from restopos.services.orders import OrderEngineService
from restopos.services.reports import ReportService
from restopos.services.tables import TableRegistryService


# ============================================
# Constructeurs
# ============================================

def build_ledger_service(db: Session) -> IngredientLedgerService:
    return IngredientLedgerService(IngredientRepository(db), StockLedgerRepository(db))


def build_ingredient_service(db: Session) -> IngredientService:
    return IngredientService(IngredientRepository(db), IngredientCategoryRepository(db))


def build_menu_service(db: Session) -> MenuCatalogService:
    return MenuCatalogService(
        MenuItemRepository(db),
        MenuCategoryRepository(db),
        IngredientRepository(db),
    )


def build_table_registry(db: Session) -> TableRegistryService:
    return TableRegistryService(TableRepository(db), WaiterRepository(db), OrderRepository(db))


def build_order_engine(db: Session) -> OrderEngineService:
    return OrderEngineService(
        order_repo=OrderRepository(db),
        menu_repo=MenuItemRepository(db),
        waiter_repo=WaiterRepository(db),
        ledger=build_ledger_service(db),
        tables=build_table_registry(db),
    )


def build_report_service(db: Session) -> ReportService:
    return ReportService(
        OrderRepository(db),
        MenuItemRepository(db),
        StockLedgerRepository(db),
        expense_repo=ExpenseRepository(db),
    )


def build_expense_service(db: Session) -> ExpenseService:
    return ExpenseService(ExpenseRepository(db))


# ============================================
# Dependances FastAPI
# ============================================

def get_ledger_service(db: Session = Depends(get_db)) -> IngredientLedgerService:
    return build_ledger_service(db)


def get_ingredient_service(db: Session = Depends(get_db)) -> IngredientService:
    return build_ingredient_service(db)


def get_menu_service(db: Session = Depends(get_db)) -> MenuCatalogService:
    return build_menu_service(db)


def get_table_registry(db: Session = Depends(get_db)) -> TableRegistryService:
    return build_table_registry(db)


def get_order_engine(db: Session = Depends(get_db)) -> OrderEngineService:
    return build_order_engine(db)


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return build_report_service(db)


def get_expense_service(db: Session = Depends(get_db)) -> ExpenseService:
    return build_expense_service(db)
