"""
LedgerSession - process-wide state for the one connected identity.

Everything derived from the ledger (people, expenses, registration) is
rebuilt by `reload()`, the single invalidation transition. It runs after
every successful write and on every account change.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from web3 import Web3

from app.core.exceptions import (
    NotRegisteredError,
    PreconditionError,
    SessionUnavailableError,
    TransactionPendingError,
)
from app.models.expense import Expense
from app.models.person import Person
from app.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


class LedgerSession:
    def __init__(self):
        self.account: Optional[str] = None
        self.tx_pending = False
        self.settlement_running = False
        self.clear()

    def clear(self):
        """Drop everything derived from the ledger."""
        self.is_registered = False
        self.name = ""
        self.people: List[Person] = []
        self.expenses: List[Expense] = []
        self.total_registered = 0

    @property
    def is_connected(self) -> bool:
        return bool(self.account)

    async def reload(self):
        if not self.account:
            self.clear()
            return

        registered, name = await LedgerService.check_registration(self.account)
        self.is_registered = registered
        if not registered:
            self.clear()
            return

        self.name = name
        self.expenses = await LedgerService.load_expenses()
        self.people = await LedgerService.load_people()
        total = await LedgerService.get_total_registered()
        self.total_registered = total if total is not None else len(self.people)
        logger.info(
            "Reloaded session for %s: %d people, %d expenses",
            self.account, len(self.people), len(self.expenses)
        )

    async def on_account_changed(self, account: Optional[str]):
        """Start from scratch for a new identity, or disconnect on an empty one."""
        if not account:
            self.disconnect()
            return
        if not Web3.is_address(account):
            raise PreconditionError(f"Invalid account address: {account!r}")

        self.account = Web3.to_checksum_address(account)
        self.tx_pending = False
        self.settlement_running = False
        self.clear()
        logger.info("Account changed to %s", self.account)
        await self.reload()

    def disconnect(self):
        logger.info("Session disconnected")
        self.account = None
        self.tx_pending = False
        self.settlement_running = False
        self.clear()

    def require_account(self) -> str:
        if not self.account:
            raise SessionUnavailableError("No wallet account connected")
        return self.account

    def require_registered(self) -> str:
        account = self.require_account()
        if not self.is_registered:
            raise NotRegisteredError(account)
        return account

    @asynccontextmanager
    async def mutation(self):
        """
        Hold the in-flight flag for one ledger write.

        Raises TransactionPendingError if another write is outstanding. The
        flag is released whether the write succeeds or fails.
        """
        if self.tx_pending:
            raise TransactionPendingError()
        self.tx_pending = True
        try:
            yield
        finally:
            self.tx_pending = False


ledger_session = LedgerSession()
