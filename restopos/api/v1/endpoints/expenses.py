"""
API Endpoints des depenses journalieres.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from restopos.core.dependencies import get_expense_service
from restopos.models.expense import ExpenseCategory
from restopos.schemas.expense import (
    ExpenseCreate,
    ExpenseDayTotalResponse,
    ExpenseResponse,
    ExpenseUpdate,
)
from restopos.services.expenses import ExpenseService

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.get("", response_model=List[ExpenseResponse], summary="Depenses d'une date")
def list_expenses(
    expense_date: Optional[date] = Query(None, description="Defaut: journee commerciale en cours"),
    category: Optional[ExpenseCategory] = Query(None),
    service: ExpenseService = Depends(get_expense_service),
):
    return service.list_expenses(expense_date, category)


@router.get("/total", response_model=ExpenseDayTotalResponse, summary="Total des depenses d'une date")
def expenses_total(
    expense_date: date = Query(...),
    service: ExpenseService = Depends(get_expense_service),
):
    return ExpenseDayTotalResponse(
        expense_date=expense_date,
        count=len(service.list_expenses(expense_date)),
        total=service.total_for(expense_date),
    )


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    data: ExpenseCreate,
    service: ExpenseService = Depends(get_expense_service),
):
    return service.create_expense(**data.model_dump())


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
):
    return service.get_expense(expense_id)


@router.patch("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: int,
    data: ExpenseUpdate,
    service: ExpenseService = Depends(get_expense_service),
):
    return service.update_expense(expense_id, data.model_dump(exclude_unset=True))


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
):
    service.delete_expense(expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
