from typing import Optional
from decimal import Decimal
from pydantic import BaseModel


class PriceResponse(BaseModel):
    currency: str
    rate: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    converted: Optional[Decimal] = None
