"""
Repository pour Expense.
"""
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func, select

from restopos.models.expense import Expense, ExpenseCategory
from restopos.repositories.base import BaseRepository


class ExpenseRepository(BaseRepository[Expense]):

    model = Expense

    def list_for_date(self, day: date, category: Optional[ExpenseCategory] = None) -> List[Expense]:
        """Depenses d'une date, les plus recentes d'abord."""
        stmt = select(Expense).where(Expense.expense_date == day)
        if category is not None:
            stmt = stmt.where(Expense.category == category)
        stmt = stmt.order_by(Expense.created_at.desc(), Expense.id.desc())
        return list(self.session.execute(stmt).scalars().all())

    def totals_by_category(self, day: date) -> Dict[ExpenseCategory, Decimal]:
        stmt = (
            select(Expense.category, func.sum(Expense.amount))
            .where(Expense.expense_date == day)
            .group_by(Expense.category)
        )
        return {category: Decimal(total) for category, total in self.session.execute(stmt).all()}
