"""
Configuration de la connexion a la base de donnees

Fournit:
- engine / SessionLocal construits depuis les settings
- get_db: dependance FastAPI (commit si succes, rollback sinon)
- session_scope / run_in_transaction pour les appelants hors HTTP
"""
import logging
from contextlib import contextmanager
from typing import Callable, Generator, Optional, TypeVar

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.orm.exc import StaleDataError

from restopos.core.config import get_settings
from restopos.core.exceptions import InconsistentState
from restopos.core.optimistic_lock import with_optimistic_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

settings = get_settings()


def create_db_engine(url: str) -> Engine:
    """
    Cree le moteur SQLAlchemy.

    Les options de pool ne s'appliquent pas a SQLite (tests, outils locaux).
    """
    if url.startswith("sqlite"):
        return create_engine(url, future=True)
    return create_engine(
        url,
        pool_pre_ping=True,  # Verifie la connexion avant utilisation
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_recycle=settings.DATABASE_POOL_RECYCLE,
    )


engine = create_db_engine(settings.DATABASE_URL)

# Session locale
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _commit(db: Session) -> None:
    """Commit en convertissant les conflits de version en InconsistentState."""
    try:
        db.commit()
    except StaleDataError as exc:
        raise InconsistentState() from exc


def get_db() -> Generator[Session, None, None]:
    """
    Fournit une session DB avec auto-commit/rollback.
    Utilise comme dependance FastAPI.

    Yields:
        Session SQLAlchemy
    """
    db = SessionLocal()
    try:
        yield db
        _commit(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def session_scope(
    session_factory: Optional[Callable[[], Session]] = None,
) -> Generator[Session, None, None]:
    """
    Transaction unique: commit a la sortie, rollback sur exception.

    Usage:
        with session_scope() as db:
            IngredientLedgerService(db).add_purchase(...)
    """
    factory = session_factory or SessionLocal
    db = factory()
    try:
        yield db
        _commit(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def run_in_transaction(
    work: Callable[[Session], T],
    session_factory: Optional[Callable[[], Session]] = None,
    max_retries: Optional[int] = None,
) -> T:
    """
    Execute `work(session)` dans sa propre transaction.

    Une InconsistentState (conflit de version) relance la transaction
    entiere avec backoff exponentiel, jusqu'a max_retries tentatives.

    Args:
        work: Fonction recevant la session
        session_factory: Fabrique de sessions (defaut: SessionLocal)
        max_retries: Nombre de tentatives (defaut: OPT_LOCK_MAX_RETRIES)

    Returns:
        Valeur retournee par work
    """
    @with_optimistic_retry(max_retries=max_retries)
    def _attempt() -> T:
        with session_scope(session_factory) as db:
            return work(db)

    return _attempt()
