from typing import List
from fastapi import APIRouter, Depends, status
from app.api.v1.endpoints.session import get_session
from app.models.expense import Expense
from app.schemas.expense import ExpenseCreate
from app.services.expense_service import ExpenseService
from app.services.session_service import LedgerSession

router = APIRouter()


@router.get("/", response_model=List[Expense])
async def list_expenses(session: LedgerSession = Depends(get_session)):
    """All expenses in ledger order"""
    session.require_registered()
    return session.expenses


@router.post("/", response_model=List[Expense], status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    session: LedgerSession = Depends(get_session)
):
    """Record an expense and return the reloaded expense list"""
    await ExpenseService.add_expense(expense_in.label, expense_in.participants, session)
    return session.expenses
