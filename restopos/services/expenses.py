"""
Journal des depenses journalieres.

Une depense porte une date (pas un instant): elle est comptee dans le
rapport de la journee commerciale de meme date.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Union

from restopos.core.exceptions import ExpenseNotFound, InvalidInput
from restopos.core.numbers import quantize_money, to_decimal
from restopos.models.base import utc_now
from restopos.models.expense import Expense, ExpenseCategory
from restopos.repositories.expense import ExpenseRepository
from restopos.services.business_day import business_date
from restopos.services.events import TOPIC_EXPENSES, mark_changed

logger = logging.getLogger(__name__)

EXPENSE_FIELDS = {"category", "description", "amount", "expense_date"}


def _category(value: Union[ExpenseCategory, str]) -> ExpenseCategory:
    try:
        return ExpenseCategory(value)
    except ValueError as exc:
        raise InvalidInput(f"Unknown expense category: {value!r}") from exc


def _amount(value: Any) -> Decimal:
    amount = quantize_money(to_decimal(value, "amount"))
    if amount <= 0:
        raise InvalidInput(f"amount must be positive, got {amount}")
    return amount


def _description(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class ExpenseService:
    """
    Service des depenses.

    Responsabilites:
    - CRUD depenses (montant strictement positif, categorie connue)
    - Liste et totaux par date
    """

    def __init__(
        self,
        expense_repo: ExpenseRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.expense_repo = expense_repo
        self.clock = clock or utc_now

    def _changed(self) -> None:
        mark_changed(self.expense_repo.session, TOPIC_EXPENSES)

    def create_expense(
        self,
        category: Union[ExpenseCategory, str],
        amount: Any,
        expense_date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Expense:
        """
        Enregistre une depense.

        Args:
            expense_date: defaut: la journee commerciale en cours
        """
        expense = self.expense_repo.create({
            "category": _category(category),
            "amount": _amount(amount),
            "expense_date": expense_date or business_date(self.clock()),
            "description": _description(description),
        })
        self._changed()
        logger.info(f"Depense {expense.category.value} {expense.amount} le {expense.expense_date}")
        return expense

    def get_expense(self, expense_id: int) -> Expense:
        expense = self.expense_repo.get(expense_id)
        if expense is None:
            raise ExpenseNotFound(expense_id)
        return expense

    def update_expense(self, expense_id: int, data: Dict[str, Any]) -> Expense:
        unknown = set(data) - EXPENSE_FIELDS
        if unknown:
            raise InvalidInput(f"Unknown fields: {', '.join(sorted(unknown))}")
        expense = self.get_expense(expense_id)
        if "category" in data:
            expense.category = _category(data["category"])
        if "amount" in data:
            expense.amount = _amount(data["amount"])
        if "description" in data:
            expense.description = _description(data["description"])
        if "expense_date" in data:
            if data["expense_date"] is None:
                raise InvalidInput("expense_date is required")
            expense.expense_date = data["expense_date"]
        self.expense_repo.session.flush()
        self._changed()
        return expense

    def delete_expense(self, expense_id: int) -> None:
        expense = self.get_expense(expense_id)
        self.expense_repo.delete(expense.id)
        self._changed()
        logger.info(f"Depense supprimee: {expense_id}")

    def list_expenses(
        self,
        day: Optional[date] = None,
        category: Optional[Union[ExpenseCategory, str]] = None,
    ) -> List[Expense]:
        day = day or business_date(self.clock())
        return self.expense_repo.list_for_date(day, _category(category) if category is not None else None)

    def total_for(self, day: date) -> Decimal:
        totals = self.expense_repo.totals_by_category(day)
        return quantize_money(sum(totals.values(), Decimal("0")))
