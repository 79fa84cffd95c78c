"""
Native-currency transfer history via Alchemy's ``alchemy_getAssetTransfers``.

One JSON-RPC call returns transfers in both directions for the wallet. The raw
entries are deduplicated by hash, filtered to the queried wallet and converted
into TransactionRecord objects. Upstream ordering is not trusted; records are
sorted newest first before truncation.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx

from app.chains.registry import ALCHEMY_BASE_URLS, MISSING_KEY_SENTINEL
from app.config import settings
from app.errors import (
    CorsOrConfig,
    MissingCredential,
    NetworkError,
    RateLimited,
    UnsupportedChain,
    UpstreamError,
)
from app.fetchers.sample_data import sample_transactions
from app.models.chain import ChainDescriptor
from app.models.transaction import TransactionRecord
from app.pricing import get_native_price
from app.validation.input import validate_address

logger = logging.getLogger(__name__)

WEI_PER_ETHER = 10**18
# Heuristic only: real block times differ per network and over time
SECONDS_PER_BLOCK = 12
CENTS = Decimal("0.01")


def _rpc_payload(method: str, params: list, req_id: int = 1) -> dict:
    return {"jsonrpc": "2.0", "id": req_id, "method": method, "params": params}


def _extract_api_key(rpc_url: str) -> str:
    return rpc_url.rstrip("/").rsplit("/", 1)[-1]


def _resolve_endpoint(chain: ChainDescriptor) -> str:
    if MISSING_KEY_SENTINEL in chain.rpc_url:
        raise MissingCredential(
            "API key not configured. Please add your Alchemy API key to the .env file."
        )
    api_key = _extract_api_key(chain.rpc_url)
    if not api_key:
        raise MissingCredential("Invalid API key. Please check your .env file configuration.")

    base_url = ALCHEMY_BASE_URLS.get(chain.id)
    if base_url is None:
        raise UnsupportedChain(f"Unsupported chain: {chain.name}")
    return f"{base_url}/{api_key}"


def _is_rate_limit_message(message: str) -> bool:
    lowered = message.lower()
    return "429" in lowered or "rate limit" in lowered or "too many requests" in lowered


def parse_wei(value: Any) -> int:
    """Integer wei from a hex string, decimal string or number."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"unexpected boolean value {value!r}")
    if isinstance(value, int):
        wei = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"fractional wei value {value!r}")
        wei = int(value)
    else:
        text = str(value).strip()
        if text.lower().startswith("0x"):
            wei = int(text, 16)
        else:
            wei = int(text)
    if wei < 0:
        raise ValueError(f"negative wei value {value!r}")
    return wei


def format_ether(wei: int) -> str:
    whole, frac = divmod(wei, WEI_PER_ETHER)
    frac_digits = str(frac).rjust(18, "0").rstrip("0") or "0"
    return f"{whole}.{frac_digits}"


def _parse_block_number(block_num: Any) -> int | None:
    if block_num is None or isinstance(block_num, bool):
        return None
    if isinstance(block_num, int):
        return block_num
    text = str(block_num).strip()
    if not text:
        return None
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text)


def _parse_block_timestamp(raw: Any) -> int:
    """Epoch seconds from an ISO-8601 string or a number of seconds."""
    if isinstance(raw, bool):
        raise TypeError(f"unexpected boolean timestamp {raw!r}")
    if isinstance(raw, (int, float)):
        return int(raw)
    if not isinstance(raw, str):
        raise TypeError(f"unexpected timestamp type {type(raw).__name__}")
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def _resolve_timestamp(transfer: dict, block_number: int | None) -> int:
    metadata = transfer.get("metadata")
    block_ts = metadata.get("blockTimestamp") if isinstance(metadata, dict) else None
    if block_ts:
        try:
            return _parse_block_timestamp(block_ts)
        except (ValueError, TypeError, OverflowError):
            logger.debug("Unparseable blockTimestamp %r", block_ts)
    if block_number:
        return block_number * SECONDS_PER_BLOCK
    return int(time.time())


def _raw_value(transfer: dict) -> Any:
    raw_contract = transfer.get("rawContract") or {}
    if raw_contract.get("value") is not None:
        return raw_contract["value"]
    return transfer.get("value")


def normalize_transfers(
    transfers: list[dict],
    address: str,
    chain: ChainDescriptor,
    price: Decimal,
    limit: int,
) -> list[TransactionRecord]:
    wallet = address.lower()
    records: list[TransactionRecord] = []
    seen_hashes: set[str] = set()

    for transfer in transfers:
        if len(records) >= limit:
            break

        tx_hash = transfer.get("hash")
        if not tx_hash or tx_hash in seen_hashes:
            continue
        seen_hashes.add(tx_hash)

        from_address = transfer.get("from") or ""
        to_address = transfer.get("to") or ""
        is_from = from_address.lower() == wallet
        is_to = to_address.lower() == wallet
        if not is_from and not is_to:
            continue

        try:
            wei = parse_wei(_raw_value(transfer))
            block_number = _parse_block_number(transfer.get("blockNum"))
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping transfer %s with unparseable fields: %s", tx_hash, exc)
            continue

        amount = format_ether(wei)
        amount_usd = (Decimal(amount) * price).quantize(CENTS, rounding=ROUND_HALF_UP)

        records.append(
            TransactionRecord(
                hash=tx_hash,
                timestamp=_resolve_timestamp(transfer, block_number),
                type="sent" if is_from else "received",
                amount=amount,
                amount_usd=str(amount_usd),
                from_address=from_address,
                to_address=to_address,
                network=chain.name,
                status="confirmed",
                block_number=block_number,
            )
        )

    return records


async def _request_transfers(url: str, address: str, limit: int) -> list[dict]:
    params = {
        "fromBlock": "0x0",
        "toBlock": "latest",
        "fromAddress": address,
        "toAddress": address,
        "category": ["external"],
        "maxCount": hex(limit * 2),
        "excludeZeroValue": False,
        "withMetadata": True,
    }

    async with httpx.AsyncClient(timeout=settings.rpc_timeout) as client:
        try:
            resp = await client.post(url, json=_rpc_payload("alchemy_getAssetTransfers", [params]))
        except httpx.TransportError as exc:
            logger.error("ALCHEMY RPC TRANSPORT ERROR: %s", exc)
            raise NetworkError(f"Network error: {exc}") from exc

    if resp.status_code == 429:
        raise RateLimited(
            "Rate limit exceeded (429). Please wait a few minutes before trying again."
        )
    if resp.status_code in (401, 403):
        raise CorsOrConfig(f"Alchemy API rejected the request ({resp.status_code}): {resp.text}")
    if not resp.is_success:
        raise UpstreamError(
            f"Alchemy API error ({resp.status_code}): {resp.text or resp.reason_phrase}"
        )

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamError("Alchemy API returned a malformed response") from exc
    if not isinstance(data, dict):
        raise UpstreamError("Alchemy API returned a malformed response")

    error = data.get("error")
    if error:
        message = str((error.get("message") if isinstance(error, dict) else error) or "")
        if _is_rate_limit_message(message):
            raise RateLimited("Rate limit exceeded. Please wait a few minutes before trying again.")
        raise UpstreamError(message or "Alchemy API error")

    result = data.get("result")
    if result is None:
        return []
    if not isinstance(result, dict):
        raise UpstreamError("Alchemy API returned a malformed response")
    transfers = result.get("transfers")
    if transfers is None:
        return []
    if not isinstance(transfers, list):
        raise UpstreamError("Alchemy API returned a malformed response")
    return [t for t in transfers if isinstance(t, dict)]


async def fetch_wallet_transactions(
    address: str, chain: ChainDescriptor, limit: int = 10
) -> list[TransactionRecord]:
    validate_address(address)
    url = _resolve_endpoint(chain)

    price = await get_native_price(chain.currency)

    logger.info("ALCHEMY RPC: fetching transfers for %s on %s", address, chain.name)
    transfers = await _request_transfers(url, address, limit)
    logger.info("ALCHEMY RPC RESPONSE: %d transfers for %s on %s", len(transfers), address, chain.name)

    records = normalize_transfers(transfers, address, chain, price, limit)
    logger.info("Processed %d transactions", len(records))

    if not records:
        logger.info("No transactions found, using sample data for %s", chain.name)
        return sample_transactions(address, chain, limit)

    records.sort(key=lambda r: r.timestamp, reverse=True)
    return records[:limit]
