"""
API Endpoints des commandes.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from restopos.core.dependencies import get_order_engine
from restopos.models.order import OrderStatus, OrderType
from restopos.schemas.order import (
    CancellationResponse,
    OrderCreate,
    OrderCreationResponse,
    OrderResponse,
)
from restopos.services.orders import OrderEngineService

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=List[OrderResponse], summary="Lister les commandes")
def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    order_type: Optional[OrderType] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    engine: OrderEngineService = Depends(get_order_engine),
):
    return engine.list_orders(status=status_filter, order_type=order_type, start=start, end=end)


@router.get("/pending", response_model=List[OrderResponse], summary="Commandes en cours")
def list_pending_orders(engine: OrderEngineService = Depends(get_order_engine)):
    return engine.list_pending_orders()


@router.post(
    "",
    response_model=OrderCreationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creer une commande",
)
def create_order(
    data: OrderCreate,
    engine: OrderEngineService = Depends(get_order_engine),
):
    return engine.create_with_report(data.to_cart(), data.to_details())


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    engine: OrderEngineService = Depends(get_order_engine),
):
    return engine.get_order(order_id)


@router.put("/{order_id}", response_model=OrderResponse, summary="Modifier une commande en cours")
def update_order(
    order_id: int,
    data: OrderCreate,
    engine: OrderEngineService = Depends(get_order_engine),
):
    return engine.update(order_id, data.to_cart(), data.to_details())


@router.post("/{order_id}/settle", response_model=OrderResponse, summary="Regler une commande")
def settle_order(
    order_id: int,
    engine: OrderEngineService = Depends(get_order_engine),
):
    return engine.settle(order_id)


@router.post("/{order_id}/cancel", response_model=CancellationResponse, summary="Annuler une commande")
def cancel_order(
    order_id: int,
    engine: OrderEngineService = Depends(get_order_engine),
):
    return engine.cancel(order_id)
