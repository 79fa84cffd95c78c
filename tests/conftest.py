import os

os.environ.setdefault("ALCHEMY_ETH_API_KEY", "test-eth-key")
os.environ.setdefault("ALCHEMY_POLYGON_API_KEY", "test-polygon-key")
os.environ.setdefault("ALCHEMY_ARBITRUM_API_KEY", "test-arbitrum-key")

import pytest

from app.cache.manager import response_cache
from app.orchestrator import orchestrator


@pytest.fixture(autouse=True)
def clear_cache():
    response_cache.clear()
    yield
    response_cache.clear()


@pytest.fixture(autouse=True)
def reset_orchestrator():
    yield
    orchestrator.cooling_until = 0.0
    orchestrator.last_attempted_key = None
    orchestrator.in_flight = False
    orchestrator.transactions = []
    orchestrator.is_loading = False
    orchestrator.error = None


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# --- Mock upstream responses ---

WALLET = "0xAAAA" + "0" * 32 + "1111"
OTHER = "0x" + "bb" * 20
THIRD = "0x" + "cc" * 20

MOCK_PRICE_ETH = {"ethereum": {"usd": 3000}}
MOCK_PRICE_MATIC = {"matic-network": {"usd": 0.5}}


def make_transfer(
    tx_hash: str,
    from_: str = WALLET,
    to: str = OTHER,
    value="0xde0b6b3a7640000",
    block_num="0x100",
    block_timestamp=None,
) -> dict:
    transfer = {
        "hash": tx_hash,
        "from": from_,
        "to": to,
        "value": value,
        "blockNum": block_num,
        "category": "external",
        "asset": "ETH",
    }
    if block_timestamp is not None:
        transfer["metadata"] = {"blockTimestamp": block_timestamp}
    return transfer


def transfers_response(*transfers: dict) -> dict:
    return {"jsonrpc": "2.0", "id": 1, "result": {"transfers": list(transfers)}}


MOCK_TRANSFERS_EMPTY = transfers_response()

MOCK_RATE_LIMIT_ERROR = {
    "jsonrpc": "2.0",
    "id": 1,
    "error": {"code": 429, "message": "Your app has exceeded its compute units per second capacity. 429"},
}

MOCK_RPC_ERROR = {
    "jsonrpc": "2.0",
    "id": 1,
    "error": {"code": -32602, "message": "invalid 'maxCount' value"},
}
