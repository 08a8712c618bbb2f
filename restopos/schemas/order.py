"""
Schemas des commandes.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from restopos.models.order import DiscountType, OrderStatus, OrderType, PaymentMethod
from restopos.models.stock import StockMovementKind
from restopos.schemas.base import BaseSchema, ResponseSchema
from restopos.services.orders import Cart, CartLine, OrderDetails


class CartLineSchema(BaseSchema):
    menu_item_id: int
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = None


class OrderCreate(BaseSchema):
    """Un panier vide est accepte ici et rejete par le moteur (EMPTY_CART)."""
    items: List[CartLineSchema] = Field(default_factory=list)
    order_type: OrderType = OrderType.DINE_IN
    payment_method: PaymentMethod = PaymentMethod.CASH
    table_id: Optional[int] = None
    waiter_id: Optional[int] = None
    customer_name: Optional[str] = None
    discount_type: DiscountType = DiscountType.FIXED
    discount_value: Decimal = Decimal("0")
    discount_reason: Optional[str] = None

    def to_cart(self) -> Cart:
        return Cart(lines=[
            CartLine(menu_item_id=line.menu_item_id, quantity=line.quantity, notes=line.notes)
            for line in self.items
        ])

    def to_details(self) -> OrderDetails:
        return OrderDetails(
            order_type=self.order_type,
            payment_method=self.payment_method,
            table_id=self.table_id,
            waiter_id=self.waiter_id,
            customer_name=self.customer_name,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
            discount_reason=self.discount_reason,
        )


class OrderItemResponse(ResponseSchema):
    id: int
    menu_item_id: Optional[int]
    menu_item_name: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    notes: Optional[str]


class OrderResponse(ResponseSchema):
    id: int
    order_number: str
    items: List[OrderItemResponse]
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    discount_type: DiscountType
    discount_value: Decimal
    discount_reason: Optional[str]
    total: Decimal
    payment_method: PaymentMethod
    order_type: OrderType
    status: OrderStatus
    table_id: Optional[int]
    table_number: Optional[int]
    waiter_id: Optional[int]
    waiter_name: Optional[str]
    customer_name: Optional[str]
    created_at: datetime
    completed_at: Optional[datetime]


class StockMovementResponse(ResponseSchema):
    ingredient_id: int
    kind: StockMovementKind
    requested_quantity: Decimal
    applied_quantity: Decimal


class UnresolvedReferenceResponse(ResponseSchema):
    kind: str
    id: Optional[int]
    order_item_id: Optional[int] = None


class OrderCreationResponse(ResponseSchema):
    order: OrderResponse
    movements: List[StockMovementResponse]
    unresolved: List[UnresolvedReferenceResponse]


class CancellationResponse(ResponseSchema):
    order: OrderResponse
    restored: List[StockMovementResponse]
    unresolved: List[UnresolvedReferenceResponse]
    is_partial: bool
