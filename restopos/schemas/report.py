"""
Schemas de reporting.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List

from restopos.schemas.base import ResponseSchema


class TopItemResponse(ResponseSchema):
    name: str
    quantity: int
    revenue: Decimal


class DailyReportResponse(ResponseSchema):
    business_date: date
    start: datetime
    end: datetime
    total_orders: int
    completed_orders: int
    pending_orders: int
    cancelled_orders: int
    revenue: Decimal
    tax: Decimal
    discounts: Decimal
    cost: Decimal
    profit: Decimal
    average_order_value: Decimal
    expenses: Decimal
    net_profit: Decimal
    unresolved_items: int
    payment_breakdown: Dict[str, Decimal]
    expense_breakdown: Dict[str, Decimal]
    top_items: List[TopItemResponse]


class DailySalesResponse(ResponseSchema):
    business_date: date
    orders: int
    revenue: Decimal
    cost: Decimal
    profit: Decimal


class DirectSalesResponse(ResponseSchema):
    business_date: date
    sales: int
    total_sale: Decimal
    total_cost: Decimal
    profit: Decimal
