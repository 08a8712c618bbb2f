"""
Logging structure pour restopos.

- JSON (un objet par ligne) hors developpement, format console sinon
- request_id de la requete HTTP courante joint a chaque ligne
- Champs `extra` masques quand leur nom est sensible (url DB, telephone...)

Usage:
    from restopos.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Stock transfere", extra={"ingredient_id": 12})
"""
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REDACTED = "[REDACTED]"

# Sous-chaines recherchees dans le nom du champ (insensible a la casse)
SENSITIVE_FIELDS = (
    "password",
    "secret",
    "token",
    "authorization",
    "database_url",
    "card_number",
    "phone",
)

# Attributs standards d'un LogRecord: tout le reste vient de `extra`
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def sanitize(key: str, value: Any) -> Any:
    """
    Masque la valeur si `key` est sensible; descend dans les dicts et listes.

    Une chaine longue garde ses 4 premiers caracteres pour faciliter le debug.
    """
    if isinstance(value, dict):
        return sanitize_dict(value)
    if isinstance(value, list):
        return [sanitize(key, item) for item in value]
    if any(marker in key.lower() for marker in SENSITIVE_FIELDS):
        if isinstance(value, str) and len(value) > 8:
            return f"{value[:4]}...{REDACTED}"
        return REDACTED
    return value


def sanitize_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: sanitize(key, value) for key, value in data.items()}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


# =============================================================================
# Formatters
# =============================================================================

class JSONFormatter(logging.Formatter):
    """timestamp, level, logger, message, request_id, extra, exception."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id
        extra = _extra_fields(record)
        if extra:
            entry["extra"] = sanitize_dict(extra)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # Decimal, date, Enum: str() suffit
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Format lisible pour le developpement:
        HH:MM:SS LEVEL    logger: message [req=abcd1234] {extra}
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{clock} {color}{record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        request_id = request_id_var.get()
        if request_id:
            line += f" [req={request_id[:8]}]"
        extra = _extra_fields(record)
        if extra:
            line += f" {sanitize_dict(extra)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# =============================================================================
# Configuration
# =============================================================================

def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Installe un unique handler stdout sur le logger racine.

    Args:
        level: DEBUG, INFO, WARNING, ERROR ou CRITICAL
        json_format: JSON si True, format console sinon
    """
    numeric_level = getattr(logging, level.upper())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_context(request_id: Optional[str] = None) -> None:
    if request_id:
        request_id_var.set(request_id)


def clear_request_context() -> None:
    request_id_var.set("")
