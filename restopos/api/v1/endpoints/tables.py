"""
API Endpoints tables et serveurs.

L'occupation des tables n'est pas exposee: elle suit les commandes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from restopos.core.dependencies import get_table_registry
from restopos.schemas.order import OrderResponse
from restopos.schemas.table import (
    TableCreate,
    TableResponse,
    TableUpdate,
    WaiterCreate,
    WaiterResponse,
    WaiterUpdate,
)
from restopos.services.tables import TableRegistryService

router = APIRouter(tags=["Tables"])


@router.get("/tables", response_model=List[TableResponse], summary="Lister les tables")
def list_tables(
    floor: Optional[str] = Query(None),
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.list_tables(floor=floor)


@router.post("/tables", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def create_table(
    data: TableCreate,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.create_table(**data.model_dump())


@router.get("/tables/{table_id}", response_model=TableResponse)
def get_table(
    table_id: int,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.get_table(table_id)


@router.patch("/tables/{table_id}", response_model=TableResponse)
def update_table(
    table_id: int,
    data: TableUpdate,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.update_table(table_id, data.model_dump(exclude_unset=True))


@router.delete("/tables/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(
    table_id: int,
    registry: TableRegistryService = Depends(get_table_registry),
):
    registry.delete_table(table_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tables/{table_id}/order", response_model=Optional[OrderResponse], summary="Commande en cours")
def get_table_order(
    table_id: int,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.get_table_order(table_id)


@router.get("/waiters", response_model=List[WaiterResponse])
def list_waiters(
    active_only: bool = Query(True),
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.list_waiters(active_only=active_only)


@router.post("/waiters", response_model=WaiterResponse, status_code=status.HTTP_201_CREATED)
def create_waiter(
    data: WaiterCreate,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.create_waiter(data.name, phone=data.phone)


@router.patch("/waiters/{waiter_id}", response_model=WaiterResponse)
def update_waiter(
    waiter_id: int,
    data: WaiterUpdate,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.update_waiter(waiter_id, data.model_dump(exclude_unset=True))


@router.delete("/waiters/{waiter_id}", response_model=WaiterResponse, summary="Desactiver un serveur")
def deactivate_waiter(
    waiter_id: int,
    registry: TableRegistryService = Depends(get_table_registry),
):
    return registry.deactivate_waiter(waiter_id)
