from __future__ import annotations

from app.config import settings
from app.models.chain import ChainDescriptor

MISSING_KEY_SENTINEL = "YOUR_API_KEY"
DEFAULT_CHAIN_KEY = "ethereum"

# Upstream transfer API base endpoint per supported chain id
ALCHEMY_BASE_URLS: dict[int, str] = {
    1: "https://eth-mainnet.g.alchemy.com/v2",
    137: "https://polygon-mainnet.g.alchemy.com/v2",
    42161: "https://arb-mainnet.g.alchemy.com/v2",
}


def _rpc_url(base_url: str, api_key: str) -> str:
    return f"{base_url}/{api_key or MISSING_KEY_SENTINEL}"


CHAINS: dict[str, ChainDescriptor] = {
    "ethereum": ChainDescriptor(
        key="ethereum",
        id=1,
        name="Ethereum",
        rpc_url=_rpc_url(ALCHEMY_BASE_URLS[1], settings.alchemy_eth_api_key),
        explorer_url="https://etherscan.io",
        currency="ETH",
        currency_symbol="ETH",
    ),
    "polygon": ChainDescriptor(
        key="polygon",
        id=137,
        name="Polygon",
        rpc_url=_rpc_url(ALCHEMY_BASE_URLS[137], settings.alchemy_polygon_api_key),
        explorer_url="https://polygonscan.com",
        currency="MATIC",
        currency_symbol="MATIC",
    ),
    "arbitrum": ChainDescriptor(
        key="arbitrum",
        id=42161,
        name="Arbitrum",
        rpc_url=_rpc_url(ALCHEMY_BASE_URLS[42161], settings.alchemy_arbitrum_api_key),
        explorer_url="https://arbiscan.io",
        currency="ETH",
        currency_symbol="ETH",
    ),
}

_BY_ID = {chain.id: chain for chain in CHAINS.values()}


def get_chain_by_id(chain_id: int) -> ChainDescriptor | None:
    return _BY_ID.get(chain_id)


def get_chain_by_key(name: str) -> ChainDescriptor | None:
    return CHAINS.get(name.lower().strip())


def list_chains() -> list[ChainDescriptor]:
    return list(CHAINS.values())
