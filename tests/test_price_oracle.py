from decimal import Decimal

import httpx
import respx

from app.config import settings
from app.pricing.oracle import get_native_price


class TestNativePrice:
    @respx.mock
    async def test_eth_price(self):
        route = respx.get(settings.price_api_url).mock(
            return_value=httpx.Response(200, json={"ethereum": {"usd": 3120.55}})
        )
        assert await get_native_price("ETH") == Decimal("3120.55")
        request = route.calls.last.request
        assert request.url.params["ids"] == "ethereum"
        assert request.url.params["vs_currencies"] == "usd"

    @respx.mock
    async def test_matic_price(self):
        respx.get(settings.price_api_url).mock(
            return_value=httpx.Response(200, json={"matic-network": {"usd": 0.42}})
        )
        assert await get_native_price("MATIC") == Decimal("0.42")

    @respx.mock
    async def test_network_failure_falls_back(self):
        respx.get(settings.price_api_url).mock(side_effect=httpx.ConnectError("down"))
        assert await get_native_price("ETH") == Decimal("2000")

    @respx.mock
    async def test_timeout_falls_back(self):
        respx.get(settings.price_api_url).mock(side_effect=httpx.TimeoutException("timeout"))
        assert await get_native_price("MATIC") == Decimal("0.8")

    @respx.mock
    async def test_non_200_falls_back(self):
        respx.get(settings.price_api_url).mock(return_value=httpx.Response(429))
        assert await get_native_price("ETH") == Decimal("2000")

    @respx.mock
    async def test_malformed_payload_falls_back(self):
        respx.get(settings.price_api_url).mock(return_value=httpx.Response(200, json={"bitcoin": {}}))
        assert await get_native_price("ETH") == Decimal("2000")

    @respx.mock
    async def test_non_json_falls_back(self):
        respx.get(settings.price_api_url).mock(return_value=httpx.Response(200, text="<html>"))
        assert await get_native_price("ETH") == Decimal("2000")

    @respx.mock
    async def test_zero_price_falls_back(self):
        respx.get(settings.price_api_url).mock(
            return_value=httpx.Response(200, json={"ethereum": {"usd": 0}})
        )
        assert await get_native_price("ETH") == Decimal("2000")

    @respx.mock(assert_all_called=False)
    async def test_unknown_currency_makes_no_call(self):
        route = respx.get(settings.price_api_url)
        assert await get_native_price("DOGE") == Decimal("0")
        assert not route.called

    @respx.mock
    async def test_refetches_every_call(self):
        route = respx.get(settings.price_api_url).mock(
            return_value=httpx.Response(200, json={"ethereum": {"usd": 3000}})
        )
        await get_native_price("ETH")
        await get_native_price("ETH")
        assert route.call_count == 2
