"""
Models RestaurantTable et Waiter.
"""
import enum
from typing import Optional

from sqlalchemy import Boolean, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from restopos.models.base import Base, BigIntPK, TimestampMixin, enum_type


class TableStatus(str, enum.Enum):
    """Etat d'occupation d'une table."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class RestaurantTable(Base, TimestampMixin):
    """
    Table de la salle.

    current_order_id est renseigne si et seulement si la table est occupee.
    Seul OrderEngineService modifie l'occupation.
    """
    __tablename__ = "restaurant_tables"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    number: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, default=4, nullable=False)
    floor: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[TableStatus] = mapped_column(
        enum_type(TableStatus, "table_status"),
        default=TableStatus.AVAILABLE,
        nullable=False
    )
    # use_alter: dependance circulaire orders <-> restaurant_tables
    current_order_id: Mapped[Optional[int]] = mapped_column(
        BigIntPK,
        ForeignKey("orders.id", ondelete="SET NULL", use_alter=True, name="fk_tables_current_order"),
        nullable=True
    )

    @property
    def is_occupied(self) -> bool:
        return self.status == TableStatus.OCCUPIED

    def __repr__(self) -> str:
        return f"<RestaurantTable(id={self.id}, number={self.number}, status={self.status.value})>"


class Waiter(Base, TimestampMixin):
    """Serveur."""
    __tablename__ = "waiters"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Waiter(id={self.id}, name='{self.name}')>"
