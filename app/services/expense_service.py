import logging
from typing import List

from app.db.session import require_ledger
from app.schemas.expense import ParticipantIn
from app.services.session_service import LedgerSession, ledger_session
from app.utils.expense_validation import prepare_expense

logger = logging.getLogger(__name__)


class ExpenseService:
    @staticmethod
    async def add_expense(
        label: str,
        participants: List[ParticipantIn],
        session: LedgerSession = ledger_session,
    ) -> str:
        """
        Record a shared expense on the ledger.

        Input is validated before anything is sent. Returns the transaction hash
        once the expense is confirmed and the session has been reloaded.
        """
        label, addresses, paid, owed = prepare_expense(label, participants)
        account = session.require_registered()
        ledger = await require_ledger()

        async with session.mutation():
            tx_hash = await ledger.add_expense(account, label, addresses, paid, owed)
            await ledger.wait_for(tx_hash)

        logger.info("Added expense %r with %d participants", label, len(addresses))
        await session.reload()
        return tx_hash
