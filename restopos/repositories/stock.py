"""
Repository du journal de stock (achats, transferts, retraits, ventes,
mouvements lies aux commandes).
"""
from datetime import datetime
from typing import List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from restopos.models.base import Base
from restopos.models.stock import (
    StockPurchase,
    StockTransfer,
    StockRemoval,
    StockSale,
    OrderStockMovement,
)
from restopos.repositories.base import to_utc

RecordType = TypeVar("RecordType", bound=Base)


class StockLedgerRepository:
    """
    Acces au journal de stock.

    Les enregistrements sont immuables: ce repository n'expose que
    l'ajout et la lecture.
    """

    def __init__(self, session: Session):
        self.session = session

    def add(self, record: RecordType) -> RecordType:
        """Ajoute un enregistrement au journal."""
        self.session.add(record)
        self.session.flush()
        return record

    def _history(
        self,
        model: Type[RecordType],
        timestamp_column,
        ingredient_id: Optional[int],
        start: Optional[datetime],
        end: Optional[datetime],
    ) -> List[RecordType]:
        stmt = select(model)
        if ingredient_id is not None:
            stmt = stmt.where(model.ingredient_id == ingredient_id)
        if start is not None:
            stmt = stmt.where(timestamp_column >= to_utc(start))
        if end is not None:
            stmt = stmt.where(timestamp_column < to_utc(end))
        stmt = stmt.order_by(timestamp_column.desc(), model.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def get_purchases(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockPurchase]:
        """Historique des achats (plus recents en premier)."""
        return self._history(StockPurchase, StockPurchase.purchased_at, ingredient_id, start, end)

    def get_transfers(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockTransfer]:
        """Historique des transferts, receptions d'achat comprises."""
        return self._history(StockTransfer, StockTransfer.created_at, ingredient_id, start, end)

    def get_removals(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockRemoval]:
        return self._history(StockRemoval, StockRemoval.created_at, ingredient_id, start, end)

    def get_sales(
        self,
        ingredient_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[StockSale]:
        return self._history(StockSale, StockSale.created_at, ingredient_id, start, end)

    def get_order_movements(self, order_id: int) -> List[OrderStockMovement]:
        """Mouvements de stock cuisine d'une commande, dans l'ordre d'application."""
        stmt = (
            select(OrderStockMovement)
            .where(OrderStockMovement.order_id == order_id)
            .order_by(OrderStockMovement.id)
        )
        return list(self.session.execute(stmt).scalars().all())
