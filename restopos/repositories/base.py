"""
Base Repository generique pour restopos.

Les repositories ne font que flush: le commit appartient a l'appelant
(get_db pour l'API, session_scope / run_in_transaction ailleurs).
"""
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from restopos.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise une borne de date en UTC pour les filtres SQL.

    Les timestamps sont stockes en UTC; une borne naive est supposee UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BaseRepository(Generic[ModelType]):
    """
    Repository generique: lecture par ID, creation, mise a jour, suppression.

    Usage:
        class WaiterRepository(BaseRepository[Waiter]):
            model = Waiter
    """

    model: Type[ModelType]

    def __init__(self, session: Session):
        self.session = session

    def get(self, id: int) -> Optional[ModelType]:
        return self.session.get(self.model, id)

    def create(self, data: Dict[str, Any]) -> ModelType:
        """Instancie le model, l'ajoute a la session et flush pour obtenir l'ID."""
        obj = self.model(**data)
        self.session.add(obj)
        self.session.flush()
        return obj

    def update(self, id: int, data: Dict[str, Any]) -> Optional[ModelType]:
        """
        Applique `data` sur l'objet.

        Les cles inconnues du model sont ignorees; le filtrage des champs
        modifiables est fait par les services.

        Returns:
            L'objet mis a jour, None si introuvable
        """
        obj = self.get(id)
        if obj is None:
            return None
        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)
        self.session.flush()
        return obj

    def delete(self, id: int) -> bool:
        """Supprime par ID. Retourne False si introuvable."""
        obj = self.get(id)
        if obj is None:
            return False
        self.session.delete(obj)
        self.session.flush()
        return True
