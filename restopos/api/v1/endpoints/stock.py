"""
API Endpoints du journal de stock: achats, transferts, retraits,
ventes directes, alertes et valorisation.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from restopos.core.config import get_settings
from restopos.core.dependencies import get_ledger_service
from restopos.schemas.stock import (
    LowStockAlertResponse,
    PurchaseCreate,
    PurchaseResponse,
    RemovalCreate,
    RemovalResponse,
    SaleCreate,
    SaleResponse,
    StockValueResponse,
    TransferCreate,
    TransferResponse,
)
from restopos.services.ledger import IngredientLedgerService

router = APIRouter(prefix="/stock", tags=["Stock"])


@router.post(
    "/purchases",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enregistrer un achat",
)
def add_purchase(
    data: PurchaseCreate,
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.add_purchase(
        data.ingredient_id,
        data.quantity,
        data.unit_cost,
        supplier=data.supplier,
        notes=data.notes,
    )


@router.get("/purchases", response_model=List[PurchaseResponse], summary="Historique des achats")
def list_purchases(
    ingredient_id: Optional[int] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.get_purchase_history(ingredient_id, start, end)


@router.post(
    "/transfers",
    response_model=TransferResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Transferer entre reserve et cuisine",
)
def transfer(
    data: TransferCreate,
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.transfer(
        data.ingredient_id,
        data.quantity,
        data.from_location,
        data.to_location,
        reason=data.reason,
    )


@router.get("/transfers", response_model=List[TransferResponse], summary="Historique des transferts")
def list_transfers(
    ingredient_id: Optional[int] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.get_transfer_history(ingredient_id, start, end)


@router.post(
    "/removals",
    response_model=RemovalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Retirer du stock",
)
def remove(
    data: RemovalCreate,
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.remove(data.ingredient_id, data.quantity, data.reason, data.location)


@router.get("/removals", response_model=List[RemovalResponse])
def list_removals(
    ingredient_id: Optional[int] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.get_removals(ingredient_id, start, end)


@router.post(
    "/sales",
    response_model=SaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Vente directe d'ingredient",
)
def sell(
    data: SaleCreate,
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.sell(
        data.ingredient_id,
        data.quantity,
        data.sale_price,
        customer_name=data.customer_name,
        notes=data.notes,
    )


@router.get("/sales", response_model=List[SaleResponse])
def list_sales(
    ingredient_id: Optional[int] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    ledger: IngredientLedgerService = Depends(get_ledger_service),
):
    return ledger.get_sales(ingredient_id, start, end)


@router.get("/alerts", response_model=List[LowStockAlertResponse], summary="Alertes de stock bas")
def low_stock_alerts(ledger: IngredientLedgerService = Depends(get_ledger_service)):
    return ledger.get_low_stock_alerts()


@router.get("/value", response_model=StockValueResponse, summary="Valeur du stock")
def stock_value(ledger: IngredientLedgerService = Depends(get_ledger_service)):
    return StockValueResponse(
        total_value=ledger.calculate_stock_value(),
        currency=get_settings().CURRENCY,
    )
