from __future__ import annotations

import json
import random
import time
from pathlib import Path

from app.models.chain import ChainDescriptor
from app.models.transaction import TransactionRecord

_SAMPLES_PATH = Path(__file__).parent / "sample_transactions.json"
_samples: dict[str, list[dict]] = {}

SAMPLE_WINDOW_SECONDS = 30 * 24 * 60 * 60


def _load_samples() -> dict[str, list[dict]]:
    global _samples
    if not _samples:
        with open(_SAMPLES_PATH) as f:
            _samples = json.load(f)
    return _samples


def sample_transactions(address: str, chain: ChainDescriptor, limit: int) -> list[TransactionRecord]:
    """Placeholder history for a wallet with no visible transfers on ``chain``.

    The queried address is written into the side of each sample that matches
    its direction, and every record gets an independent random timestamp from
    the last 30 days.
    """
    now = int(time.time())
    wallet = address.lower()
    records = []
    for sample in _load_samples().get(chain.name.lower(), []):
        direction = sample["type"]
        records.append(
            TransactionRecord(
                hash=sample["hash"],
                timestamp=now - random.randint(0, SAMPLE_WINDOW_SECONDS),
                type=direction,
                amount=sample["amount"],
                amount_usd=sample["amountUSD"],
                from_address=wallet if direction == "sent" else sample["from"],
                to_address=wallet if direction == "received" else sample["to"],
                network=sample.get("network", chain.name),
                status=sample.get("status", "confirmed"),
                is_sample=True,
            )
        )

    records.sort(key=lambda r: r.timestamp, reverse=True)
    return records[:limit]
