"""
Tests for the ledger repository's conversion of raw contract values.
"""

import aiohttp
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from web3.exceptions import ContractLogicError, TimeExhausted

from app.core.exceptions import WriteRejectedError
from app.repositories.ledger_repo import ADDRESS_ZERO, LedgerRepository
from tests.conftest import ALICE, BOB, ETHER


def contract_call(name, contract, result=None, side_effect=None):
    """Make contract.functions.<name>(...).call() return `result`."""
    call = MagicMock()
    call.call = AsyncMock(return_value=result, side_effect=side_effect)
    setattr(contract.functions, name, MagicMock(return_value=call))
    return call


@pytest.fixture
def contract():
    return MagicMock()


@pytest.fixture
def w3():
    mock_w3 = MagicMock()
    mock_w3.eth.send_transaction = AsyncMock()
    mock_w3.eth.wait_for_transaction_receipt = AsyncMock()
    return mock_w3


@pytest.fixture
def repo(w3, contract):
    return LedgerRepository(w3, contract, confirmation_timeout=5)


@pytest.mark.asyncio
async def test_get_person_registered(repo, contract):
    contract_call("getPerson", contract, ["Alice", ALICE])

    assert await repo.get_person(ALICE.lower()) == ("Alice", True)
    contract.functions.getPerson.assert_called_once_with(ALICE)


@pytest.mark.asyncio
async def test_get_person_zero_address_is_unregistered(repo, contract):
    contract_call("getPerson", contract, ["", ADDRESS_ZERO])

    assert await repo.get_person(BOB) == ("", False)


@pytest.mark.asyncio
async def test_addresses_are_checksummed(repo, contract):
    contract_call("getAllRegisteredPeople", contract, [ALICE.lower(), BOB.lower()])

    assert await repo.get_all_registered_people() == [ALICE, BOB]


@pytest.mark.asyncio
async def test_expense_basic_info(repo, contract):
    contract_call("getExpenseBasicInfo", contract, [1, "Dinner", 1714564800])

    expense_id, label, timestamp = await repo.get_expense_basic_info(0)

    assert expense_id == 1
    assert label == "Dinner"
    assert timestamp == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_signed_net_balance(repo, contract):
    contract_call("getNetBalance", contract, -ETHER)

    assert await repo.get_net_balance(ALICE) == -ETHER


@pytest.mark.asyncio
async def test_overdue_debts(repo, contract):
    contract_call("getOverdueDebts", contract, [[ALICE.lower(), BOB.lower()], [1, 2], [10, 3]])

    assert await repo.get_overdue_debts(ALICE) == ([ALICE, BOB], [1, 2], [10, 3])


@pytest.mark.asyncio
async def test_add_expense_requires_aligned_lists(repo):
    with pytest.raises(ValueError):
        await repo.add_expense(ALICE, "Dinner", [ALICE, BOB], [ETHER], [ETHER, 0])


@pytest.mark.asyncio
async def test_revert_at_submission(repo, contract):
    fn = MagicMock()
    fn.transact = AsyncMock(side_effect=ContractLogicError("execution reverted: already registered"))
    contract.functions.registerPerson = MagicMock(return_value=fn)

    with pytest.raises(WriteRejectedError) as exc_info:
        await repo.register_person(ALICE, "Alice")

    assert "already registered" in exc_info.value.message


@pytest.mark.asyncio
async def test_transfer_returns_hex_hash(repo, w3):
    w3.eth.send_transaction.return_value = bytes.fromhex("ab" * 32)

    tx_hash = await repo.transfer(ALICE, BOB, ETHER)

    assert tx_hash == "0x" + "ab" * 32
    sent = w3.eth.send_transaction.call_args[0][0]
    assert sent == {"from": ALICE, "to": BOB, "value": ETHER}


@pytest.mark.asyncio
async def test_transfer_connection_error_is_rejected(repo, w3):
    w3.eth.send_transaction.side_effect = ConnectionError("node dropped")

    with pytest.raises(WriteRejectedError) as exc_info:
        await repo.transfer(ALICE, BOB, ETHER)

    assert "node dropped" in exc_info.value.message


@pytest.mark.asyncio
async def test_wait_for_client_error_keeps_hash(repo, w3):
    w3.eth.wait_for_transaction_receipt.side_effect = aiohttp.ClientConnectionError("reset")

    with pytest.raises(WriteRejectedError) as exc_info:
        await repo.wait_for("0x01")

    assert exc_info.value.tx_hash == "0x01"


@pytest.mark.asyncio
async def test_wait_for_reverted_receipt(repo, w3):
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}

    with pytest.raises(WriteRejectedError) as exc_info:
        await repo.wait_for("0x01")

    assert exc_info.value.tx_hash == "0x01"


@pytest.mark.asyncio
async def test_wait_for_timeout(repo, w3):
    w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("gave up")

    with pytest.raises(WriteRejectedError):
        await repo.wait_for("0x01")


@pytest.mark.asyncio
async def test_wait_for_success(repo, w3):
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 1}

    assert (await repo.wait_for("0x01"))["status"] == 1
    w3.eth.wait_for_transaction_receipt.assert_awaited_once_with("0x01", timeout=5)
