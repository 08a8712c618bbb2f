"""
Repositories pour RestaurantTable et Waiter.
"""
from typing import List, Optional

from sqlalchemy import select

from restopos.models.table import RestaurantTable, Waiter
from restopos.repositories.base import BaseRepository


class TableRepository(BaseRepository[RestaurantTable]):
    """Repository pour les tables."""

    model = RestaurantTable

    def get_for_update(self, table_id: int) -> Optional[RestaurantTable]:
        """Recupere une table avec verrou de ligne."""
        stmt = (
            select(RestaurantTable)
            .where(RestaurantTable.id == table_id)
            .with_for_update()
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_number(self, number: int) -> Optional[RestaurantTable]:
        stmt = select(RestaurantTable).where(RestaurantTable.number == number)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self, floor: Optional[str] = None) -> List[RestaurantTable]:
        """Liste les tables, optionnellement filtrees par etage."""
        stmt = select(RestaurantTable)
        if floor is not None:
            stmt = stmt.where(RestaurantTable.floor == floor)
        stmt = stmt.order_by(RestaurantTable.number)
        return list(self.session.execute(stmt).scalars().all())


class WaiterRepository(BaseRepository[Waiter]):
    """Repository pour les serveurs."""

    model = Waiter

    def list_all(self, active_only: bool = True) -> List[Waiter]:
        stmt = select(Waiter)
        if active_only:
            stmt = stmt.where(Waiter.is_active == True)
        stmt = stmt.order_by(Waiter.name)
        return list(self.session.execute(stmt).scalars().all())
