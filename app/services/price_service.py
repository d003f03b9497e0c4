import logging
from typing import Optional
from decimal import Decimal, InvalidOperation

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)


class PriceService:
    """ETH exchange rate for display. Never used in ledger arithmetic."""

    @staticmethod
    async def get_eth_rate(
        currency: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> Optional[Decimal]:
        """Price of one ETH in `currency`, or None if the oracle could not be read."""
        currency = (currency or settings.DISPLAY_CURRENCY).lower()
        try:
            async with httpx.AsyncClient(timeout=settings.PRICE_ORACLE_TIMEOUT, transport=transport) as client:
                response = await client.get(
                    settings.PRICE_ORACLE_URL,
                    params={"ids": "ethereum", "vs_currencies": currency}
                )
                response.raise_for_status()
                data = response.json()
            return Decimal(str(data["ethereum"][currency]))
        except (httpx.HTTPError, KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.warning("Failed to fetch ETH-%s rate: %s", currency.upper(), e)
            return None

    @staticmethod
    def convert(amount: Decimal, rate: Decimal) -> Decimal:
        return (Decimal(amount) * rate).quantize(Decimal("0.01"))
