"""
Repository pour Order et OrderItem.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from restopos.models.order import Order, OrderStatus, OrderType
from restopos.repositories.base import BaseRepository, to_utc


class OrderRepository(BaseRepository[Order]):
    """Repository pour les commandes."""

    model = Order

    def get_with_items(self, order_id: int) -> Optional[Order]:
        """Recupere une commande avec ses lignes."""
        stmt = (
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_number(self, order_number: str) -> Optional[Order]:
        stmt = select(Order).where(Order.order_number == order_number)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_filtered(
        self,
        status: Optional[OrderStatus] = None,
        order_type: Optional[OrderType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Order]:
        """
        Liste les commandes (plus recentes en premier).

        Args:
            status: Filtre sur l'etat
            order_type: Filtre sur le type
            start: Borne inclusive sur created_at
            end: Borne exclusive sur created_at
        """
        stmt = select(Order).options(selectinload(Order.items))
        if status is not None:
            stmt = stmt.where(Order.status == status)
        if order_type is not None:
            stmt = stmt.where(Order.order_type == order_type)
        if start is not None:
            stmt = stmt.where(Order.created_at >= to_utc(start))
        if end is not None:
            stmt = stmt.where(Order.created_at < to_utc(end))
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def get_pending_for_table(self, table_id: int) -> Optional[Order]:
        """Commande en cours sur une table."""
        stmt = (
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.table_id == table_id, Order.status == OrderStatus.PENDING)
            .order_by(Order.created_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()
