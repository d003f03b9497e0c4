import logging

from app.core.exceptions import PreconditionError
from app.db.session import require_ledger
from app.services.session_service import LedgerSession, ledger_session
from app.utils.expense_validation import validate_name

logger = logging.getLogger(__name__)


class AccountService:
    @staticmethod
    async def register(name: str, session: LedgerSession = ledger_session) -> str:
        """Bind a name to the connected account on the ledger."""
        name = validate_name(name)
        account = session.require_account()
        if session.is_registered:
            raise PreconditionError("Account is already registered")
        ledger = await require_ledger()

        async with session.mutation():
            tx_hash = await ledger.register_person(account, name)
            await ledger.wait_for(tx_hash)

        logger.info("Registered %s as %r", account, name)
        await session.reload()
        return tx_hash

    @staticmethod
    async def update_name(name: str, session: LedgerSession = ledger_session) -> bool:
        """
        Rename the connected account.

        Returns False without sending anything when the name is unchanged.
        """
        name = validate_name(name)
        account = session.require_registered()
        if name == session.name:
            return False
        ledger = await require_ledger()

        async with session.mutation():
            tx_hash = await ledger.update_name(account, name)
            await ledger.wait_for(tx_hash)

        logger.info("Renamed %s to %r", account, name)
        await session.reload()
        return True
