"""
Model Expense: depenses journalieres du restaurant (salaires, factures...).
"""
import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from restopos.models.base import Base, BigIntPK, TimestampMixin, enum_type


class ExpenseCategory(str, enum.Enum):
    WAGES = "wages"
    UTILITIES = "utilities"
    SUPPLIES = "supplies"
    RENT = "rent"
    MAINTENANCE = "maintenance"
    MARKETING = "marketing"
    TRANSPORT = "transport"
    OTHER = "other"


class Expense(Base, TimestampMixin):
    """
    Depense rattachee a une date (expense_date), pas a un instant.

    Le rapport journalier soustrait les depenses de la date de la journee
    commerciale pour obtenir le profit net.
    """
    __tablename__ = "expenses"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    category: Mapped[ExpenseCategory] = mapped_column(
        enum_type(ExpenseCategory, "expense_category"),
        nullable=False
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Expense(id={self.id}, category={self.category.value}, amount={self.amount})>"
