from decimal import Decimal
from pydantic import BaseModel


class BalanceResponse(BaseModel):
    """Net balance in ether. Negative = net debtor."""
    address: str
    net_balance: Decimal
    is_debtor: bool
