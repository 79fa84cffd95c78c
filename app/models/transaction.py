from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class TransactionRecord(BaseModel):
    hash: str
    timestamp: int
    type: Literal["sent", "received"]
    amount: str
    amount_usd: str
    from_address: str
    to_address: str
    network: str
    status: Literal["pending", "confirmed", "failed"]
    block_number: int | None = None
    is_sample: bool = False


class FetchState(BaseModel):
    transactions: list[TransactionRecord] = []
    is_loading: bool = False
    error: str | None = None
    cooling_down_for: float = 0.0
