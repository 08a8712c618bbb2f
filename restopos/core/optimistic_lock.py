"""
Verrouillage optimiste: retry avec backoff exponentiel + jitter.

Ingredient.version_id est la colonne de version du mapper. Quand une
transaction concurrente l'a incrementee entre notre lecture et notre
ecriture, SQLAlchemy leve StaleDataError, traduite en InconsistentState.
"""
import functools
import logging
import random
import time
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.orm.exc import StaleDataError

from restopos.core.config import get_settings
from restopos.core.exceptions import InconsistentState

logger = logging.getLogger(__name__)


@contextmanager
def translate_stale_data():
    """Convertit StaleDataError en InconsistentState."""
    try:
        yield
    except StaleDataError as exc:
        raise InconsistentState() from exc


def backoff_delay(attempt: int) -> float:
    """Delai en secondes avant la tentative suivante: base * 2^attempt + jitter, borne."""
    settings = get_settings()
    base_delay = settings.OPT_LOCK_BASE_DELAY_MS / 1000.0
    max_delay = settings.OPT_LOCK_MAX_DELAY_MS / 1000.0
    jitter = random.uniform(0, settings.OPT_LOCK_JITTER_MS / 1000.0)
    return min(base_delay * (2 ** attempt), max_delay) + jitter


def with_optimistic_retry(max_retries: Optional[int] = None):
    """
    Decorateur pour les fonctions qui ouvrent leur propre transaction.
    Sur InconsistentState, relance avec backoff exponentiel + jitter.

    Usage:
        @with_optimistic_retry()
        def transfer_stock(...):
            with session_scope() as db:
                ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            _max = max_retries or get_settings().OPT_LOCK_MAX_RETRIES
            for attempt in range(1, _max + 1):
                try:
                    return func(*args, **kwargs)
                except InconsistentState:
                    if attempt == _max:
                        logger.error(
                            "Conflit de version non resolu apres %d tentatives pour %s",
                            _max, func.__name__,
                        )
                        raise
                    delay = backoff_delay(attempt)
                    logger.warning(
                        "Conflit de version (tentative %d/%d), nouvel essai dans %.3fs",
                        attempt, _max, delay,
                    )
                    time.sleep(delay)
        return wrapper
    return decorator
