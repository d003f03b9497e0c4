import pytest
from decimal import Decimal
from app.core.exceptions import SessionUnavailableError
from app.services.balance_service import BalanceService
from app.utils.overdue import build_overdue_report
from tests.conftest import ALICE, BOB, CAROL, ETHER


@pytest.mark.asyncio
async def test_net_balance(fake_ledger):
    fake_ledger.add_person(ALICE, "Alice", balance_wei=-3 * ETHER)

    assert await BalanceService.net_balance(ALICE) == Decimal("-3")


@pytest.mark.asyncio
async def test_overdue_amount_is_debtors_net_balance(fake_ledger):
    fake_ledger.add_person(CAROL, "Carol", balance_wei=-5 * ETHER // 2)
    fake_ledger.overdue[CAROL] = [(ALICE, ETHER, 10), (BOB, 2 * ETHER, 3)]

    debts = await BalanceService.overdue_debts(CAROL)
    report = build_overdue_report(debts)

    assert [(d.creditor, d.amount, d.age_in_days) for d in report.debts] == [
        (ALICE, Decimal("2.5"), 10),
        (BOB, Decimal("2.5"), 3),
    ]
    assert [d.creditor for d in report.actionable] == [ALICE]


@pytest.mark.asyncio
async def test_net_creditor_owes_nothing(fake_ledger):
    fake_ledger.add_person(CAROL, "Carol", balance_wei=3 * ETHER)
    fake_ledger.overdue[CAROL] = [(ALICE, ETHER, 10)]

    debts = await BalanceService.overdue_debts(CAROL)

    assert [(d.creditor, d.amount) for d in debts] == [(ALICE, Decimal("0"))]

@pytest.mark.asyncio
async def test_overdue_keeps_ledger_order(fake_ledger):
    fake_ledger.add_person(CAROL, "Carol", balance_wei=-ETHER)
    fake_ledger.overdue[CAROL] = [(BOB, 0, 2), (ALICE, 0, 30)]

    debts = await BalanceService.overdue_debts(CAROL)

    assert [d.creditor for d in debts] == [BOB, ALICE]


@pytest.mark.asyncio
async def test_no_overdue_debts(fake_ledger):
    fake_ledger.add_person(CAROL, "Carol")

    assert await BalanceService.overdue_debts(CAROL) == []


@pytest.mark.asyncio
async def test_overdue_query_failure(fake_ledger):
    fake_ledger.fail("get_overdue_debts", CAROL)

    with pytest.raises(SessionUnavailableError):
        await BalanceService.overdue_debts(CAROL)


@pytest.mark.asyncio
async def test_no_connection(no_ledger):
    with pytest.raises(SessionUnavailableError):
        await BalanceService.net_balance(ALICE)
