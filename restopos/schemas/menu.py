"""
Schemas du catalogue.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from restopos.schemas.base import BaseSchema, ResponseSchema, TimestampSchema


class RecipeLineSchema(BaseSchema):
    ingredient_id: int
    quantity: Decimal = Field(..., gt=0)


class RecipeLineResponse(ResponseSchema):
    ingredient_id: int
    quantity: Decimal
    position: int


class MenuItemCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0)
    description: Optional[str] = None
    category_id: Optional[int] = None
    is_available: bool = True
    recipe: List[RecipeLineSchema] = Field(default_factory=list)


class MenuItemUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    category_id: Optional[int] = None
    is_available: Optional[bool] = None
    recipe: Optional[List[RecipeLineSchema]] = None


class RecipeUpdate(BaseSchema):
    recipe: List[RecipeLineSchema]


class AvailabilityUpdate(BaseSchema):
    is_available: bool


class MenuItemResponse(TimestampSchema):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    category_id: Optional[int]
    is_available: bool
    recipe_cost: Decimal
    profit_margin: Decimal
    recipe: List[RecipeLineResponse]


class RecalculateResponse(ResponseSchema):
    updated: int


class MenuCategoryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: int = 0


class MenuCategoryUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    icon: Optional[str] = None
    color: Optional[str] = None
    sort_order: Optional[int] = None


class MenuCategoryResponse(ResponseSchema):
    id: int
    name: str
    icon: Optional[str]
    color: Optional[str]
    sort_order: int
