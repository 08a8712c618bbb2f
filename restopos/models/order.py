"""
Models Order et OrderItem.

Les OrderItem sont un instantane du menu au moment de la commande:
une modification ulterieure du menu ne change pas les commandes passees.
"""
import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import DateTime, Integer, Text, Numeric, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from restopos.models.base import Base, BigIntPK, TimestampMixin, enum_type

if TYPE_CHECKING:
    from restopos.models.menu import MenuItem


class OrderStatus(str, enum.Enum):
    """Etats d'une commande. REFUNDED est reserve (aucune transition n'y mene)."""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class OrderType(str, enum.Enum):
    DINE_IN = "dine-in"
    ONLINE = "online"
    TAKEAWAY = "takeaway"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    MOBILE = "mobile"


class DiscountType(str, enum.Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class Order(Base, TimestampMixin):
    """
    Commande client.

    Attributes:
        order_number: "ORD-" + horodatage ms en base 36
        subtotal: Somme prix * quantite
        tax: GST sur le sous-total
        discount: Montant de remise resolu
        discount_value: Valeur saisie (montant ou pourcentage)
        total: subtotal + tax - discount (jamais negatif)
    """
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_number: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    discount_type: Mapped[DiscountType] = mapped_column(
        enum_type(DiscountType, "discount_type"),
        default=DiscountType.FIXED,
        nullable=False
    )
    discount_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    discount_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        enum_type(PaymentMethod, "payment_method"),
        default=PaymentMethod.CASH,
        nullable=False
    )
    order_type: Mapped[OrderType] = mapped_column(
        enum_type(OrderType, "order_type"),
        default=OrderType.DINE_IN,
        nullable=False,
        index=True
    )
    status: Mapped[OrderStatus] = mapped_column(
        enum_type(OrderStatus, "order_status"),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    table_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("restaurant_tables.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    table_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    waiter_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("waiters.id", ondelete="SET NULL"),
        nullable=True
    )
    waiter_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    items: Mapped[List["OrderItem"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position"
    )

    @property
    def is_pending(self) -> bool:
        return self.status == OrderStatus.PENDING

    @property
    def item_count(self) -> int:
        """Nombre total d'unites commandees."""
        return sum(item.quantity for item in self.items)

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, number='{self.order_number}', status={self.status.value}, total={self.total})>"


class OrderItem(Base):
    """Ligne de commande (instantane du MenuItem)."""
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigIntPK,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    menu_item_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("menu_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    menu_item_name: Mapped[str] = mapped_column(Text, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    order: Mapped["Order"] = relationship(back_populates="items")
    menu_item: Mapped[Optional["MenuItem"]] = relationship(back_populates="order_items")

    def __repr__(self) -> str:
        return f"<OrderItem(order_id={self.order_id}, name='{self.menu_item_name}', qty={self.quantity})>"
