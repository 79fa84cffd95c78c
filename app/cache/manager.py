import time
from typing import Callable

from app.config import settings
from app.models.transaction import TransactionRecord

_SENTINEL = object()


class CacheEntry:
    __slots__ = ("records", "captured_at")

    def __init__(self, records: list[TransactionRecord], captured_at: float):
        self.records = records
        self.captured_at = captured_at


class ResponseCache:
    """Fetch results per (address, chain id) with an absolute expiry window.

    Reads never extend an entry's lifetime. There is no size bound; the key
    space is one connected wallet times the supported chains.
    """

    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic):
        self._store: dict[str, CacheEntry] = {}
        self._ttl = settings.cache_ttl if ttl is None else ttl
        self._clock = clock

    @staticmethod
    def _key(address: str, chain_id: int) -> str:
        return f"{address}-{chain_id}"

    def get(self, address: str, chain_id: int) -> CacheEntry | object:
        key = self._key(address, chain_id)
        entry = self._store.get(key)
        if entry is None:
            return _SENTINEL

        if self._clock() - entry.captured_at > self._ttl:
            del self._store[key]
            return _SENTINEL

        return entry

    def set(self, address: str, chain_id: int, records: list[TransactionRecord]) -> None:
        self._store[self._key(address, chain_id)] = CacheEntry(records, self._clock())

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


CACHE_MISS = _SENTINEL
response_cache = ResponseCache()
