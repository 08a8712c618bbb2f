"""
Schemas ingredients et categories d'ingredients.
"""
from decimal import Decimal
from typing import Optional

from pydantic import Field

from restopos.models.ingredient import IngredientUnit
from restopos.schemas.base import BaseSchema, ResponseSchema, TimestampSchema


class IngredientCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    unit: IngredientUnit = IngredientUnit.KILOGRAM
    cost_per_unit: Decimal = Field(default=Decimal("0"), ge=0)
    low_stock_threshold: Decimal = Field(default=Decimal("0"), ge=0)
    category_id: Optional[int] = None


class IngredientUpdate(BaseSchema):
    """Les champs de stock ne sont pas modifiables: extra='forbid' les rejette."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    unit: Optional[IngredientUnit] = None
    low_stock_threshold: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[int] = None


class IngredientResponse(TimestampSchema):
    id: int
    name: str
    unit: IngredientUnit
    cost_per_unit: Decimal
    store_stock: Decimal
    kitchen_stock: Decimal
    total_stock: Decimal
    stock_value: Decimal
    low_stock_threshold: Decimal
    is_low: bool
    category_id: Optional[int]


class IngredientCategoryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)


class IngredientCategoryResponse(ResponseSchema):
    id: int
    name: str
