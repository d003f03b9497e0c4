"""Expense validation utilities."""
from typing import List, Tuple
from decimal import Decimal

from web3 import Web3

from app.core.exceptions import PreconditionError
from app.schemas.expense import ParticipantIn
from app.utils.units import ether_to_wei


class ExpenseValidationError(PreconditionError):
    """Raised when expense input is rejected before submission."""
    pass


def validate_name(name: str) -> str:
    """Return the trimmed name, rejecting blanks."""
    cleaned = (name or "").strip()
    if not cleaned:
        raise PreconditionError("Name must not be empty")
    return cleaned


def validate_participants(participants: List[ParticipantIn]) -> List[str]:
    """
    Validate expense participants.

    Rules:
    - at least one participant
    - every address is a valid account address
    - amounts are non-negative
    - an address appears at most once

    Returns the checksum addresses in input order.
    """
    if not participants:
        raise ExpenseValidationError("Add at least one participant")

    addresses = []
    for idx, participant in enumerate(participants):
        raw = (participant.address or "").strip()
        if not raw or not Web3.is_address(raw):
            raise ExpenseValidationError(
                f"Participant {idx} has an invalid address: {participant.address!r}"
            )
        if participant.amount_paid < 0 or participant.amount_owed < 0:
            raise ExpenseValidationError(
                f"Participant {raw} has a negative amount",
                details={"index": idx}
            )

        address = Web3.to_checksum_address(raw)
        if address in addresses:
            raise ExpenseValidationError(
                f"Participant {address} appears more than once",
                details={"index": idx}
            )
        addresses.append(address)

    return addresses


def prepare_expense(label: str, participants: List[ParticipantIn]) -> Tuple[str, List[str], List[int], List[int]]:
    """
    Validate and convert an expense to the index-aligned arrays addExpense takes.
    """
    cleaned_label = (label or "").strip()
    if not cleaned_label:
        raise ExpenseValidationError("Enter an expense label")

    addresses = validate_participants(participants)
    paid = [ether_to_wei(Decimal(p.amount_paid)) for p in participants]
    owed = [ether_to_wei(Decimal(p.amount_owed)) for p in participants]
    return cleaned_label, addresses, paid, owed
