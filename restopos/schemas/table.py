"""
Schemas tables et serveurs.
"""
from typing import Optional

from pydantic import Field

from restopos.models.table import TableStatus
from restopos.schemas.base import BaseSchema, ResponseSchema


class TableCreate(BaseSchema):
    number: int = Field(..., ge=1)
    capacity: int = Field(default=4, ge=1)
    floor: Optional[str] = None


class TableUpdate(BaseSchema):
    number: Optional[int] = Field(None, ge=1)
    capacity: Optional[int] = Field(None, ge=1)
    floor: Optional[str] = None


class TableResponse(ResponseSchema):
    id: int
    number: int
    capacity: int
    floor: Optional[str]
    status: TableStatus
    current_order_id: Optional[int]


class WaiterCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None


class WaiterUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class WaiterResponse(ResponseSchema):
    id: int
    name: str
    phone: Optional[str]
    is_active: bool
