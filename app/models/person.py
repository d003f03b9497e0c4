"""
Person model - a registered identity on the ledger.

- address is the natural key (checksum form)
- net_balance is the ledger's authoritative figure, in ether
- negative net_balance = net debtor, positive = net creditor
"""

from decimal import Decimal
from pydantic import BaseModel


class Person(BaseModel):
    address: str
    name: str
    net_balance: Decimal = Decimal(0)

    def is_debtor(self) -> bool:
        return self.net_balance < 0
