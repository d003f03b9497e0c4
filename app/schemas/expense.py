"""Expense request schemas. Amounts are in ether."""
from typing import List
from decimal import Decimal
from pydantic import BaseModel, Field


class ParticipantIn(BaseModel):
    address: str
    amount_paid: Decimal = Decimal(0)
    amount_owed: Decimal = Decimal(0)


class ExpenseCreate(BaseModel):
    label: str
    participants: List[ParticipantIn] = Field(default_factory=list)
