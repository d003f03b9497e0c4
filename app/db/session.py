from typing import Optional

from app.core.exceptions import SessionUnavailableError
from app.db.chain import chain
from app.repositories.ledger_repo import LedgerRepository


async def get_ledger() -> Optional[LedgerRepository]:
    """Return the active ledger repository, or None when unconnected."""
    return chain.ledger


async def require_ledger() -> LedgerRepository:
    """Return the active ledger repository or fail the current operation."""
    ledger = await get_ledger()
    if ledger is None:
        raise SessionUnavailableError()
    return ledger
