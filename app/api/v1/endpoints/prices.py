from decimal import Decimal
from typing import Optional
from fastapi import APIRouter
from app.core.config import settings
from app.schemas.price import PriceResponse
from app.services.price_service import PriceService

router = APIRouter()


@router.get("/eth", response_model=PriceResponse)
async def get_eth_price(currency: Optional[str] = None, amount: Optional[Decimal] = None):
    """ETH exchange rate, optionally converting an ether amount"""
    currency = (currency or settings.DISPLAY_CURRENCY).lower()
    rate = await PriceService.get_eth_rate(currency)
    converted = PriceService.convert(amount, rate) if rate is not None and amount is not None else None
    return PriceResponse(currency=currency, rate=rate, amount=amount, converted=converted)
