"""Conversion between ether amounts and the ledger's wei integers."""
from decimal import Decimal

from web3 import Web3


def wei_to_ether(value: int) -> Decimal:
    """Signed conversion. Web3.from_wei refuses negative values."""
    if value < 0:
        return -Decimal(Web3.from_wei(-value, "ether"))
    return Decimal(Web3.from_wei(value, "ether"))


def ether_to_wei(amount: Decimal) -> int:
    return int(Web3.to_wei(Decimal(amount), "ether"))
