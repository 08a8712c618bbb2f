"""
Registre des tables et des serveurs.

L'occupation des tables (occupy / free) n'est modifiee que par le moteur
de commandes.
"""
import logging
from typing import Any, Dict, List, Optional

from restopos.core.exceptions import (
    Conflict,
    InvalidInput,
    TableNotFound,
    TableOccupied,
    WaiterNotFound,
)
from restopos.models.order import Order
from restopos.models.table import RestaurantTable, TableStatus, Waiter
from restopos.repositories.order import OrderRepository
from restopos.repositories.table import TableRepository, WaiterRepository
from restopos.services.events import TOPIC_TABLES, mark_changed

logger = logging.getLogger(__name__)

TABLE_FIELDS = {"number", "capacity", "floor"}
WAITER_FIELDS = {"name", "phone", "is_active"}


class TableRegistryService:
    """
    Service des tables et serveurs.

    Responsabilites:
    - Occupation / liberation des tables
    - CRUD tables et serveurs
    - Commande en cours d'une table
    """

    def __init__(
        self,
        table_repo: TableRepository,
        waiter_repo: WaiterRepository,
        order_repo: OrderRepository,
    ):
        self.table_repo = table_repo
        self.waiter_repo = waiter_repo
        self.order_repo = order_repo

    def _changed(self) -> None:
        mark_changed(self.table_repo.session, TOPIC_TABLES)

    # =========================================================================
    # Occupation
    # =========================================================================

    def occupy(self, table_id: int, order_id: int) -> RestaurantTable:
        """Marque la table occupee par la commande. Aucune verification metier ici."""
        table = self.table_repo.get_for_update(table_id)
        if table is None:
            raise TableNotFound(table_id)
        table.status = TableStatus.OCCUPIED
        table.current_order_id = order_id
        self.table_repo.session.flush()
        self._changed()
        logger.info(f"Table {table.number} occupee par la commande {order_id}")
        return table

    def free(self, table_id: int) -> Optional[RestaurantTable]:
        """Libere la table. Une table supprimee entre-temps est ignoree."""
        table = self.table_repo.get_for_update(table_id)
        if table is None:
            logger.warning(f"Liberation ignoree: table {table_id} introuvable")
            return None
        table.status = TableStatus.AVAILABLE
        table.current_order_id = None
        self.table_repo.session.flush()
        self._changed()
        logger.info(f"Table {table.number} liberee")
        return table

    # =========================================================================
    # Tables
    # =========================================================================

    def _validate_table(self, number: int, capacity: int, exclude_id: Optional[int] = None) -> None:
        if number is None or int(number) < 1:
            raise InvalidInput("Table number must be >= 1")
        if capacity is None or int(capacity) < 1:
            raise InvalidInput("Table capacity must be >= 1")
        existing = self.table_repo.get_by_number(int(number))
        if existing is not None and existing.id != exclude_id:
            raise Conflict(f"Table number {number} already exists")

    def create_table(self, number: int, capacity: int = 4, floor: Optional[str] = None) -> RestaurantTable:
        self._validate_table(number, capacity)
        table = self.table_repo.create({
            "number": int(number),
            "capacity": int(capacity),
            "floor": floor,
            "status": TableStatus.AVAILABLE,
        })
        self._changed()
        return table

    def get_table(self, table_id: int) -> RestaurantTable:
        table = self.table_repo.get(table_id)
        if table is None:
            raise TableNotFound(table_id)
        return table

    def list_tables(self, floor: Optional[str] = None) -> List[RestaurantTable]:
        return self.table_repo.list_all(floor=floor)

    def update_table(self, table_id: int, data: Dict[str, Any]) -> RestaurantTable:
        """Met a jour numero, capacite et etage. L'occupation n'est pas editable."""
        unknown = set(data) - TABLE_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")
        table = self.get_table(table_id)
        self._validate_table(
            data.get("number", table.number),
            data.get("capacity", table.capacity),
            exclude_id=table.id,
        )
        for key, value in data.items():
            setattr(table, key, value)
        self.table_repo.session.flush()
        self._changed()
        return table

    def delete_table(self, table_id: int) -> None:
        table = self.get_table(table_id)
        if table.is_occupied:
            raise TableOccupied(table.id, table.current_order_id)
        self.table_repo.delete(table.id)
        self._changed()

    def get_table_order(self, table_id: int) -> Optional[Order]:
        """Commande en cours (pending) sur la table, ou None."""
        self.get_table(table_id)
        return self.order_repo.get_pending_for_table(table_id)

    # =========================================================================
    # Serveurs
    # =========================================================================

    def create_waiter(self, name: str, phone: Optional[str] = None) -> Waiter:
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Waiter name is required")
        waiter = self.waiter_repo.create({"name": name, "phone": phone, "is_active": True})
        self._changed()
        return waiter

    def get_waiter(self, waiter_id: int) -> Waiter:
        waiter = self.waiter_repo.get(waiter_id)
        if waiter is None:
            raise WaiterNotFound(waiter_id)
        return waiter

    def update_waiter(self, waiter_id: int, data: Dict[str, Any]) -> Waiter:
        unknown = set(data) - WAITER_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")
        if "name" in data and not (data["name"] or "").strip():
            raise InvalidInput("Waiter name is required")
        waiter = self.get_waiter(waiter_id)
        for key, value in data.items():
            setattr(waiter, key, value)
        self.waiter_repo.session.flush()
        self._changed()
        return waiter

    def deactivate_waiter(self, waiter_id: int) -> Waiter:
        return self.update_waiter(waiter_id, {"is_active": False})

    def list_waiters(self, active_only: bool = True) -> List[Waiter]:
        return self.waiter_repo.list_all(active_only=active_only)
