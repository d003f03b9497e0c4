"""
LedgerRepository - record-level access to the expense tracker contract.

The contract only answers point lookups and counts, so every method here maps
to exactly one contract call. Raw values are converted on the way out:
- addresses -> checksum strings
- amounts -> int wei
- timestamps -> timezone-aware UTC datetimes

Writes return the pending transaction hash. Callers must await `wait_for`
before treating the write as applied.
"""

import logging
from typing import List, Tuple
from datetime import datetime, timezone

import aiohttp
from web3 import AsyncWeb3, Web3
from web3.exceptions import TimeExhausted, Web3Exception

from app.core.exceptions import WriteRejectedError

logger = logging.getLogger(__name__)

ADDRESS_ZERO = "0x0000000000000000000000000000000000000000"

# The node dropped or never answered; nothing is known about the write
TRANSPORT_ERRORS = (aiohttp.ClientError, TimeoutError, OSError)


class LedgerRepository:
    """Repository for people and expenses held by the ledger contract."""

    def __init__(self, w3: AsyncWeb3, contract, confirmation_timeout: float = 120.0):
        self.w3 = w3
        self.contract = contract
        self.confirmation_timeout = confirmation_timeout

    # ===== QUERIES =====

    async def get_all_registered_people(self) -> List[str]:
        addresses = await self.contract.functions.getAllRegisteredPeople().call()
        return [Web3.to_checksum_address(a) for a in addresses]

    async def get_person(self, address: str) -> Tuple[str, bool]:
        """
        Returns (name, is_registered).

        The contract answers every address; an unregistered one comes back
        with the zero address as its wallet.
        """
        name, wallet = await self.contract.functions.getPerson(
            Web3.to_checksum_address(address)
        ).call()
        return name, Web3.to_checksum_address(wallet) != ADDRESS_ZERO

    async def get_total_registered_people(self) -> int:
        return int(await self.contract.functions.getTotalRegisteredPeople().call())

    async def expense_count(self) -> int:
        return int(await self.contract.functions.expenseCount().call())

    async def get_expense_basic_info(self, index: int) -> Tuple[int, str, datetime]:
        expense_id, label, timestamp = await self.contract.functions.getExpenseBasicInfo(index).call()
        return int(expense_id), label, datetime.fromtimestamp(int(timestamp), tz=timezone.utc)

    async def get_expense_participants(self, index: int) -> List[str]:
        addresses = await self.contract.functions.getExpenseParticipants(index).call()
        return [Web3.to_checksum_address(a) for a in addresses]

    async def get_amount_paid(self, index: int, address: str) -> int:
        return int(await self.contract.functions.getAmountPaid(
            index, Web3.to_checksum_address(address)
        ).call())

    async def get_amount_owed(self, index: int, address: str) -> int:
        return int(await self.contract.functions.getAmountOwed(
            index, Web3.to_checksum_address(address)
        ).call())

    async def get_net_balance(self, address: str) -> int:
        return int(await self.contract.functions.getNetBalance(
            Web3.to_checksum_address(address)
        ).call())

    async def get_overdue_debts(self, address: str) -> Tuple[List[str], List[int], List[int]]:
        """Returns (creditors, amounts, ages_in_days) as three index-aligned lists."""
        creditors, amounts, days_old = await self.contract.functions.getOverdueDebts(
            Web3.to_checksum_address(address)
        ).call()
        return (
            [Web3.to_checksum_address(c) for c in creditors],
            [int(a) for a in amounts],
            [int(d) for d in days_old],
        )

    # ===== MUTATIONS =====

    async def register_person(self, sender: str, name: str) -> str:
        return await self._transact(self.contract.functions.registerPerson(name), sender)

    async def update_name(self, sender: str, name: str) -> str:
        return await self._transact(self.contract.functions.updateName(name), sender)

    async def add_expense(
        self,
        sender: str,
        label: str,
        addresses: List[str],
        paid_wei: List[int],
        owed_wei: List[int],
    ) -> str:
        """Submit one expense. The three lists must be index-aligned."""
        if not (len(addresses) == len(paid_wei) == len(owed_wei)):
            raise ValueError("addresses, paid and owed amounts must have the same length")
        return await self._transact(
            self.contract.functions.addExpense(
                label,
                [Web3.to_checksum_address(a) for a in addresses],
                paid_wei,
                owed_wei,
            ),
            sender,
        )

    async def transfer(self, sender: str, to: str, amount_wei: int) -> str:
        """Direct value transfer from sender to `to`."""
        try:
            tx_hash = await self.w3.eth.send_transaction({
                "from": Web3.to_checksum_address(sender),
                "to": Web3.to_checksum_address(to),
                "value": amount_wei,
            })
        except (Web3Exception, ValueError) as e:
            raise WriteRejectedError(f"Transfer rejected: {e}") from e
        except TRANSPORT_ERRORS as e:
            raise WriteRejectedError(f"Could not reach the node: {e}") from e
        return Web3.to_hex(tx_hash)

    async def wait_for(self, tx_hash: str):
        """
        Suspend until the transaction is mined.

        Raises WriteRejectedError if it reverted or the transport gave up waiting.
        """
        try:
            receipt = await self.w3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.confirmation_timeout
            )
        except TimeExhausted as e:
            raise WriteRejectedError("Transaction was not confirmed in time", tx_hash) from e
        except (Web3Exception, *TRANSPORT_ERRORS) as e:
            raise WriteRejectedError(f"Could not confirm transaction: {e}", tx_hash) from e

        if receipt["status"] != 1:
            raise WriteRejectedError("Transaction reverted", tx_hash)
        return receipt

    # ===== PRIVATE HELPERS =====

    async def _transact(self, call, sender: str) -> str:
        try:
            tx_hash = await call.transact({"from": Web3.to_checksum_address(sender)})
        except (Web3Exception, ValueError) as e:
            # reverts surface here at gas estimation, before anything is broadcast
            raise WriteRejectedError(f"Transaction rejected: {e}") from e
        except TRANSPORT_ERRORS as e:
            raise WriteRejectedError(f"Could not reach the node: {e}") from e
        return Web3.to_hex(tx_hash)
