"""
Debt and settlement models.

Debts are derived on every overdue check and never persisted.
A settlement attempt moves through:
pending -> confirming -> skipped
                      -> submitting -> settled | failed
"""

from enum import Enum
from typing import List, Optional
from decimal import Decimal
from pydantic import BaseModel


class Debt(BaseModel):
    """What the acting account owes one creditor, and for how long."""
    creditor: str
    amount: Decimal
    age_in_days: int


class SettlementState(str, Enum):
    PENDING = "pending"
    CONFIRMING = "confirming"
    SKIPPED = "skipped"
    SUBMITTING = "submitting"
    SETTLED = "settled"
    FAILED = "failed"


TRANSITIONS = {
    SettlementState.PENDING: {SettlementState.CONFIRMING},
    SettlementState.CONFIRMING: {SettlementState.SKIPPED, SettlementState.SUBMITTING},
    SettlementState.SUBMITTING: {SettlementState.SETTLED, SettlementState.FAILED},
}


class SettlementAttempt(BaseModel):
    debt: Debt
    state: SettlementState = SettlementState.PENDING
    tx_hash: Optional[str] = None
    error: Optional[str] = None

    def advance(self, state: SettlementState) -> None:
        """Move to the next state, refusing transitions the machine does not allow."""
        if state not in TRANSITIONS.get(self.state, set()):
            raise ValueError(f"Cannot move settlement from {self.state.value} to {state.value}")
        self.state = state


class OverdueReport(BaseModel):
    """All debts for display plus the subset offered for settlement."""
    debts: List[Debt]
    actionable: List[Debt]
