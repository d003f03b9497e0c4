import asyncio
import logging
from typing import List, Optional, Tuple

from app.core.exceptions import SessionUnavailableError
from app.db.session import get_ledger, require_ledger
from app.models.expense import Expense, Participant
from app.models.person import Person
from app.repositories.ledger_repo import LedgerRepository
from app.utils.units import wei_to_ether

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Rebuilds people and expenses from the ledger's point lookups.

    Lookups fan out in parallel. A failed person or expense is logged and
    skipped; a failed participant amount degrades to zero so the expense
    is still returned.
    """

    @staticmethod
    async def check_registration(address: str) -> Tuple[bool, str]:
        """Returns (is_registered, name) for an address."""
        ledger = await require_ledger()
        try:
            name, registered = await ledger.get_person(address)
        except Exception as e:
            logger.error("Error checking registration of %s: %s", address, e)
            raise SessionUnavailableError("Could not reach the ledger") from e
        return registered, name if registered else ""

    @staticmethod
    async def load_people() -> List[Person]:
        ledger = await get_ledger()
        if ledger is None:
            return []

        try:
            addresses = await ledger.get_all_registered_people()
        except Exception as e:
            logger.error("Error loading registered addresses: %s", e)
            raise SessionUnavailableError("Could not load people") from e

        # address is the natural key, keep the first occurrence
        unique = list(dict.fromkeys(addresses))
        people = await asyncio.gather(
            *(LedgerService._load_person(ledger, address) for address in unique)
        )
        return [person for person in people if person is not None]

    @staticmethod
    async def load_expenses() -> List[Expense]:
        ledger = await get_ledger()
        if ledger is None:
            return []

        try:
            count = await ledger.expense_count()
        except Exception as e:
            logger.error("Error loading expense count: %s", e)
            raise SessionUnavailableError("Could not load expenses") from e

        expenses = await asyncio.gather(
            *(LedgerService._load_expense(ledger, index) for index in range(count))
        )
        loaded = [expense for expense in expenses if expense is not None]
        loaded.sort(key=lambda e: e.id)
        return loaded

    @staticmethod
    async def get_total_registered() -> Optional[int]:
        """Registry counter, or None if it could not be read."""
        ledger = await get_ledger()
        if ledger is None:
            return None
        try:
            return await ledger.get_total_registered_people()
        except Exception as e:
            logger.warning("Error fetching total registered people: %s", e)
            return None

    # ===== PRIVATE HELPERS =====

    @staticmethod
    async def _load_person(ledger: LedgerRepository, address: str) -> Optional[Person]:
        try:
            (name, registered), balance = await asyncio.gather(
                ledger.get_person(address),
                ledger.get_net_balance(address),
            )
        except Exception as e:
            logger.warning("Skipping person %s: %s", address, e)
            return None

        if not registered:
            logger.info("Skipping unregistered address %s", address)
            return None

        return Person(address=address, name=name, net_balance=wei_to_ether(balance))

    @staticmethod
    async def _load_expense(ledger: LedgerRepository, index: int) -> Optional[Expense]:
        try:
            (expense_id, label, timestamp), addresses = await asyncio.gather(
                ledger.get_expense_basic_info(index),
                ledger.get_expense_participants(index),
            )
        except Exception as e:
            logger.warning("Skipping expense %s: %s", index, e)
            return None

        participants = await asyncio.gather(
            *(LedgerService._load_participant(ledger, index, address) for address in addresses)
        )
        return Expense(
            id=expense_id,
            label=label,
            timestamp=timestamp,
            participants=list(participants),
        )

    @staticmethod
    async def _load_participant(ledger: LedgerRepository, index: int, address: str) -> Participant:
        try:
            paid, owed = await asyncio.gather(
                ledger.get_amount_paid(index, address),
                ledger.get_amount_owed(index, address),
            )
        except Exception as e:
            logger.warning("Error loading amounts for %s in expense %s: %s", address, index, e)
            return Participant(address=address)

        return Participant(
            address=address,
            amount_paid=wei_to_ether(paid),
            amount_owed=wei_to_ether(owed),
        )
