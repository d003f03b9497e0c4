import logging
from typing import List
from decimal import Decimal

from app.core.exceptions import SessionUnavailableError
from app.db.session import require_ledger
from app.models.debt import Debt
from app.utils.units import wei_to_ether

logger = logging.getLogger(__name__)


class BalanceService:
    @staticmethod
    async def net_balance(address: str) -> Decimal:
        """The ledger's net balance for an address, in ether. Negative = net debtor."""
        ledger = await require_ledger()
        try:
            balance = await ledger.get_net_balance(address)
        except Exception as e:
            logger.error("Error fetching net balance of %s: %s", address, e)
            raise SessionUnavailableError("Could not load the net balance") from e
        return wei_to_ether(balance)

    @staticmethod
    async def overdue_debts(address: str) -> List[Debt]:
        """
        Debts the address owes, in the ledger's creditor order.

        The ledger's per-creditor amounts are not reliable, so every debt
        carries what the debtor owes overall: the negated net balance, or zero
        for a net creditor. With several creditors this over- or understates
        individual debts.
        """
        ledger = await require_ledger()
        try:
            creditors, _amounts, days_old = await ledger.get_overdue_debts(address)
        except Exception as e:
            logger.error("Error loading overdue debts of %s: %s", address, e)
            raise SessionUnavailableError("Could not load overdue debts") from e

        if len(creditors) != len(days_old):
            logger.warning(
                "Overdue query for %s returned %d creditors but %d ages",
                address, len(creditors), len(days_old)
            )

        net = await BalanceService.net_balance(address)
        amount = -net if net < 0 else Decimal(0)
        return [
            Debt(creditor=creditor, amount=amount, age_in_days=age)
            for creditor, age in zip(creditors, days_old)
        ]
