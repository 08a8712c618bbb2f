"""
Schemas des depenses journalieres.
"""
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field

from restopos.models.expense import ExpenseCategory
from restopos.schemas.base import BaseSchema, TimestampSchema, ResponseSchema


class ExpenseCreate(BaseSchema):
    category: ExpenseCategory
    amount: Decimal = Field(..., gt=0)
    expense_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=500)


class ExpenseUpdate(BaseSchema):
    category: Optional[ExpenseCategory] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    expense_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=500)


class ExpenseResponse(TimestampSchema):
    id: int
    category: ExpenseCategory
    description: Optional[str]
    amount: Decimal
    expense_date: date


class ExpenseDayTotalResponse(ResponseSchema):
    expense_date: date
    count: int
    total: Decimal
