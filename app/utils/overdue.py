"""Overdue debt detection."""
from typing import List

from app.models.debt import Debt, OverdueReport

# Fixed policy, not user configurable
OVERDUE_THRESHOLD_DAYS = 7


def is_actionable(debt: Debt) -> bool:
    return debt.age_in_days > OVERDUE_THRESHOLD_DAYS


def actionable_debts(debts: List[Debt]) -> List[Debt]:
    """Debts old enough to be offered for settlement, in their original order."""
    return [debt for debt in debts if is_actionable(debt)]


def build_overdue_report(debts: List[Debt]) -> OverdueReport:
    """
    Every debt is shown; only those past the threshold are actionable.
    """
    return OverdueReport(debts=list(debts), actionable=actionable_debts(debts))
