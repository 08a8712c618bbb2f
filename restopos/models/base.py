"""
Classes de base et mixins pour les modeles SQLAlchemy
Compatible SQLAlchemy 2.0 avec Mapped types
"""
import enum
from datetime import datetime, timezone
from typing import Type

from sqlalchemy import BigInteger, DateTime, Enum, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BIGINT en production, INTEGER sous SQLite (seul type auto-incremente)
BigIntPK = BigInteger().with_variant(Integer, "sqlite")


def utc_now() -> datetime:
    """Retourne l'heure actuelle en UTC (timezone-aware)"""
    return datetime.now(timezone.utc)


def enum_type(enum_cls: Type[enum.Enum], name: str) -> Enum:
    """Colonne enum stockee par valeur (VARCHAR + CHECK, portable)."""
    return Enum(
        enum_cls,
        values_callable=lambda e: [m.value for m in e],
        name=name,
        native_enum=False,
        length=32,
    )


class Base(DeclarativeBase):
    """Classe de base pour tous les modeles SQLAlchemy"""
    pass


class TimestampMixin:
    """
    Mixin pour ajouter created_at et updated_at automatiques.
    updated_at est mis a jour automatiquement a chaque modification.
    """
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        server_default=func.now(),
        onupdate=utc_now,
        nullable=False
    )
