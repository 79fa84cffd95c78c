from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

COINGECKO_IDS: dict[str, str] = {
    "ETH": "ethereum",
    "MATIC": "matic-network",
}

FALLBACK_PRICES: dict[str, Decimal] = {
    "ETH": Decimal("2000"),
    "MATIC": Decimal("0.8"),
}


def fallback_price(currency: str) -> Decimal:
    return FALLBACK_PRICES.get(currency.upper(), Decimal("0"))


async def get_native_price(currency: str) -> Decimal:
    """USD price of a native currency, never raising on upstream failure."""
    coin_id = COINGECKO_IDS.get(currency.upper())
    if coin_id is None:
        logger.warning("PRICE: no price source for %s, using fallback", currency)
        return fallback_price(currency)

    params = {"ids": coin_id, "vs_currencies": "usd"}
    try:
        async with httpx.AsyncClient(timeout=settings.price_timeout) as client:
            resp = await client.get(settings.price_api_url, params=params)
    except httpx.HTTPError as exc:
        logger.warning("PRICE: request for %s failed: %s", coin_id, exc)
        return fallback_price(currency)

    if resp.status_code != 200:
        logger.warning("PRICE: %s returned status %s", coin_id, resp.status_code)
        return fallback_price(currency)

    try:
        usd = resp.json()[coin_id]["usd"]
        price = Decimal(str(usd))
    except (ValueError, KeyError, TypeError, InvalidOperation) as exc:
        logger.warning("PRICE: malformed payload for %s: %s", coin_id, exc)
        return fallback_price(currency)

    if not price.is_finite() or price <= 0:
        return fallback_price(currency)

    logger.debug("PRICE: %s = %s USD", currency, price)
    return price
