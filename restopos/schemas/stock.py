"""
Schemas du journal de stock.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from restopos.models.ingredient import StockLocation
from restopos.schemas.base import BaseSchema, ResponseSchema


class PurchaseCreate(BaseSchema):
    ingredient_id: int
    quantity: Decimal = Field(..., gt=0)
    unit_cost: Decimal = Field(..., ge=0)
    supplier: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class PurchaseResponse(ResponseSchema):
    id: int
    ingredient_id: int
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    supplier: Optional[str]
    notes: Optional[str]
    purchased_at: datetime


class TransferCreate(BaseSchema):
    ingredient_id: int
    quantity: Decimal = Field(..., gt=0)
    from_location: StockLocation
    to_location: StockLocation
    reason: Optional[str] = None


class TransferResponse(ResponseSchema):
    id: int
    ingredient_id: int
    quantity: Decimal
    from_location: StockLocation
    to_location: StockLocation
    reason: str
    created_at: datetime


class RemovalCreate(BaseSchema):
    ingredient_id: int
    quantity: Decimal = Field(..., gt=0)
    location: StockLocation = StockLocation.STORE
    reason: str = Field(..., min_length=1)


class RemovalResponse(ResponseSchema):
    id: int
    ingredient_id: int
    quantity: Decimal
    location: StockLocation
    reason: str
    created_at: datetime


class SaleCreate(BaseSchema):
    ingredient_id: int
    quantity: Decimal = Field(..., gt=0)
    sale_price: Decimal = Field(..., ge=0)
    customer_name: Optional[str] = None
    notes: Optional[str] = None


class SaleResponse(ResponseSchema):
    id: int
    ingredient_id: int
    quantity: Decimal
    cost_per_unit: Decimal
    sale_price: Decimal
    total_cost: Decimal
    total_sale: Decimal
    profit: Decimal
    customer_name: Optional[str]
    notes: Optional[str]
    created_at: datetime


class LowStockAlertResponse(ResponseSchema):
    ingredient_id: int
    name: str
    unit: str
    store_stock: Decimal
    kitchen_stock: Decimal
    total_stock: Decimal
    threshold: Decimal
    severity: str


class StockValueResponse(ResponseSchema):
    total_value: Decimal
    currency: str
