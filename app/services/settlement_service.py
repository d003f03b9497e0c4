import logging
from typing import Awaitable, Callable, List, Optional, Set

from app.core.exceptions import AppException, TransactionPendingError, WriteRejectedError
from app.db.session import require_ledger
from app.models.debt import Debt, OverdueReport, SettlementAttempt, SettlementState
from app.repositories.ledger_repo import LedgerRepository
from app.services.balance_service import BalanceService
from app.services.session_service import LedgerSession, ledger_session
from app.utils.overdue import build_overdue_report
from app.utils.units import ether_to_wei

logger = logging.getLogger(__name__)

# Asked once per actionable debt; True settles it, False skips it
Decision = Callable[[Debt], Awaitable[bool]]


class SettlementService:
    @staticmethod
    async def overdue_report(session: LedgerSession = ledger_session) -> OverdueReport:
        """Freshly computed overdue debts for the session's account."""
        account = session.require_registered()
        debts = await BalanceService.overdue_debts(account)
        return build_overdue_report(debts)

    @staticmethod
    async def run(decide: Decision, session: LedgerSession = ledger_session) -> List[SettlementAttempt]:
        """
        Walk the actionable debts one at a time.

        Each debt is confirmed through `decide`, then settled by a direct
        transfer that is awaited before the next debt is considered.
        After a settlement the remaining debts are recomputed from the
        ledger; after a failure the walk carries on with the list it had.
        Creditors are visited at most once per run.

        Returns every attempt, in processing order.
        """
        account = session.require_registered()
        if session.settlement_running:
            raise TransactionPendingError()

        session.settlement_running = True
        try:
            ledger = await require_ledger()
            worklist = (await SettlementService.overdue_report(session)).actionable
            visited: Set[str] = set()
            attempts: List[SettlementAttempt] = []

            while worklist:
                debt = worklist.pop(0)
                if debt.creditor in visited:
                    continue
                visited.add(debt.creditor)

                attempt = await SettlementService._settle_one(ledger, session, account, debt, decide)
                attempts.append(attempt)

                if attempt.state is SettlementState.SETTLED:
                    fresh = await SettlementService._refresh(session)
                    if fresh is not None:
                        worklist = [d for d in fresh if d.creditor not in visited]

            return attempts
        finally:
            session.settlement_running = False

    # ===== PRIVATE HELPERS =====

    @staticmethod
    async def _settle_one(
        ledger: LedgerRepository,
        session: LedgerSession,
        account: str,
        debt: Debt,
        decide: Decision,
    ) -> SettlementAttempt:
        attempt = SettlementAttempt(debt=debt)
        attempt.advance(SettlementState.CONFIRMING)

        if debt.amount <= 0:
            # nothing owed any more, so there is nothing to ask about
            attempt.advance(SettlementState.SKIPPED)
            attempt.error = "Nothing to transfer"
            logger.info("Settlement with %s skipped: nothing to transfer", debt.creditor)
            return attempt

        if not await decide(debt):
            attempt.advance(SettlementState.SKIPPED)
            logger.info("Settlement with %s skipped", debt.creditor)
            return attempt

        attempt.advance(SettlementState.SUBMITTING)
        try:
            async with session.mutation():
                attempt.tx_hash = await ledger.transfer(account, debt.creditor, ether_to_wei(debt.amount))
                await ledger.wait_for(attempt.tx_hash)
        except (WriteRejectedError, TransactionPendingError) as e:
            attempt.advance(SettlementState.FAILED)
            attempt.error = e.message
            logger.error("Payment of %s ETH to %s failed: %s", debt.amount, debt.creditor, e.message)
            return attempt
        except Exception as e:
            attempt.advance(SettlementState.FAILED)
            attempt.error = str(e) or type(e).__name__
            logger.exception("Unexpected error paying %s ETH to %s", debt.amount, debt.creditor)
            return attempt

        attempt.advance(SettlementState.SETTLED)
        logger.info("Paid %s ETH to %s in %s", debt.amount, debt.creditor, attempt.tx_hash)
        return attempt

    @staticmethod
    async def _refresh(session: LedgerSession) -> Optional[List[Debt]]:
        """Reload the session and recompute actionable debts, or None if the ledger could not be read."""
        try:
            await session.reload()
            return (await SettlementService.overdue_report(session)).actionable
        except AppException as e:
            logger.warning("Could not refresh overdue debts after settlement: %s", e.message)
            return None
