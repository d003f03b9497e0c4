"""
Expense model - one shared expense as recorded on the ledger.

Design principles:
- id is ledger-assigned and stable
- Immutable once created
- participants keep the order of the addresses passed to addExpense
- Amounts are in ether; the ledger stores them in wei
"""

from typing import List
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field


class Participant(BaseModel):
    """A participant's share of one expense. Owned by exactly one Expense."""
    address: str
    amount_paid: Decimal = Decimal(0)
    amount_owed: Decimal = Decimal(0)

    def net(self) -> Decimal:
        return self.amount_paid - self.amount_owed


class Expense(BaseModel):
    id: int
    label: str
    timestamp: datetime
    participants: List[Participant] = Field(default_factory=list)

    def total_paid(self) -> Decimal:
        return sum((p.amount_paid for p in self.participants), Decimal(0))
