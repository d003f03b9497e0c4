from datetime import datetime, timezone
from typing import Dict, List, Tuple

import pytest
import pytest_asyncio
from web3 import Web3

from app.core.exceptions import WriteRejectedError
from app.db.chain import chain
from app.services.session_service import LedgerSession

ALICE = Web3.to_checksum_address("0x" + "a1" * 20)
BOB = Web3.to_checksum_address("0x" + "b2" * 20)
CAROL = Web3.to_checksum_address("0x" + "c3" * 20)
DAVE = Web3.to_checksum_address("0x" + "d4" * 20)

ETHER = 10 ** 18


class FakeLedger:
    """
    In-memory stand-in for LedgerRepository.

    Same method names and signatures. Any call can be made to fail with
    `fail(method, *args)`; `events` records calls in order so tests can
    check sequencing.
    """

    def __init__(self):
        self.names: Dict[str, str] = {}
        self.registry: List[str] = []
        self.balances: Dict[str, int] = {}
        self.expenses: List[dict] = []
        self.overdue: Dict[str, List[Tuple[str, int, int]]] = {}
        self.failures: Dict[tuple, Exception] = {}
        self.reverting: set = set()
        self.transfers: List[Tuple[str, str, int]] = []
        self.events: List[tuple] = []
        self._tx_status: Dict[str, bool] = {}
        self._tx_effects: Dict[str, tuple] = {}

    # ----- test helpers -----

    def fail(self, method: str, *args, exc: Exception = None):
        self.failures[(method,) + args] = exc or OSError(f"{method} failed")

    def _check(self, method: str, *args):
        self.events.append((method,) + args)
        exc = self.failures.get((method,) + args) or self.failures.get((method,))
        if exc is not None:
            raise exc

    def add_person(self, address: str, name: str, balance_wei: int = 0):
        self.registry.append(address)
        self.names[address] = name
        self.balances[address] = balance_wei

    def _new_tx(self, ok: bool = True, effect: tuple = None) -> str:
        tx_hash = "0x%064x" % (len(self._tx_status) + 1)
        self._tx_status[tx_hash] = ok
        if effect:
            self._tx_effects[tx_hash] = effect
        return tx_hash

    # ----- queries -----

    async def get_all_registered_people(self) -> List[str]:
        self._check("get_all_registered_people")
        return list(self.registry)

    async def get_person(self, address: str) -> Tuple[str, bool]:
        self._check("get_person", address)
        if address in self.names:
            return self.names[address], True
        return "", False

    async def get_total_registered_people(self) -> int:
        self._check("get_total_registered_people")
        return len(self.names)

    async def expense_count(self) -> int:
        self._check("expense_count")
        return len(self.expenses)

    async def get_expense_basic_info(self, index: int):
        self._check("get_expense_basic_info", index)
        expense = self.expenses[index]
        return expense["id"], expense["label"], expense["timestamp"]

    async def get_expense_participants(self, index: int) -> List[str]:
        self._check("get_expense_participants", index)
        return [p[0] for p in self.expenses[index]["participants"]]

    async def get_amount_paid(self, index: int, address: str) -> int:
        self._check("get_amount_paid", index, address)
        return dict((p[0], p[1]) for p in self.expenses[index]["participants"])[address]

    async def get_amount_owed(self, index: int, address: str) -> int:
        self._check("get_amount_owed", index, address)
        return dict((p[0], p[2]) for p in self.expenses[index]["participants"])[address]

    async def get_net_balance(self, address: str) -> int:
        self._check("get_net_balance", address)
        return self.balances.get(address, 0)

    async def get_overdue_debts(self, address: str):
        self._check("get_overdue_debts", address)
        rows = self.overdue.get(address, [])
        return [r[0] for r in rows], [r[1] for r in rows], [r[2] for r in rows]

    # ----- mutations -----

    async def register_person(self, sender: str, name: str) -> str:
        self._check("register_person", sender, name)
        return self._new_tx(effect=("register", sender, name))

    async def update_name(self, sender: str, name: str) -> str:
        self._check("update_name", sender, name)
        return self._new_tx(effect=("rename", sender, name))

    async def add_expense(self, sender, label, addresses, paid_wei, owed_wei) -> str:
        self._check("add_expense", sender, label)
        participants = list(zip(addresses, paid_wei, owed_wei))
        return self._new_tx(effect=("expense", label, participants))

    async def transfer(self, sender: str, to: str, amount_wei: int) -> str:
        self._check("transfer", sender, to)
        self.transfers.append((sender, to, amount_wei))
        return self._new_tx(ok=to not in self.reverting, effect=("transfer", sender, to, amount_wei))

    async def wait_for(self, tx_hash: str):
        self._check("wait_for", tx_hash)
        if not self._tx_status[tx_hash]:
            raise WriteRejectedError("Transaction reverted", tx_hash)
        self._apply(self._tx_effects.pop(tx_hash, None))
        return {"status": 1, "transactionHash": tx_hash}

    def _apply(self, effect):
        if effect is None:
            return
        kind = effect[0]
        if kind == "register":
            _, sender, name = effect
            self.add_person(sender, name)
        elif kind == "rename":
            _, sender, name = effect
            self.names[sender] = name
        elif kind == "expense":
            _, label, participants = effect
            self.expenses.append({
                "id": len(self.expenses) + 1,
                "label": label,
                "timestamp": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
                "participants": participants,
            })
            for address, paid, owed in participants:
                self.balances[address] = self.balances.get(address, 0) + paid - owed
        elif kind == "transfer":
            _, sender, to, amount = effect
            self.balances[sender] = self.balances.get(sender, 0) + amount
            self.balances[to] = self.balances.get(to, 0) - amount
            self.overdue[sender] = [r for r in self.overdue.get(sender, []) if r[0] != to]


@pytest.fixture
def fake_ledger(monkeypatch):
    """Install an in-memory ledger as the active chain connection."""
    ledger = FakeLedger()
    monkeypatch.setattr(chain, "ledger", ledger)
    return ledger


@pytest.fixture
def no_ledger(monkeypatch):
    monkeypatch.setattr(chain, "ledger", None)


@pytest.fixture
def session():
    return LedgerSession()


@pytest_asyncio.fixture
async def alice_session(fake_ledger, session):
    """Alice registered and connected."""
    fake_ledger.add_person(ALICE, "Alice")
    fake_ledger.add_person(BOB, "Bob")
    await session.on_account_changed(ALICE)
    return session
