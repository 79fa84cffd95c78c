"""
Fetch orchestration for the transaction list.

The UI asks for transactions on every state change, so most calls to
``request_fetch`` must be cheap no-ops. One orchestrator holds three pieces of
state that decide whether a call turns into a real fetch:

* ``cooling_until``: after a rate-limit response no fetch starts, for any
  chain, until this deadline passes.
* ``last_attempted_key``: the ``address-chainId`` pair last attempted. The same
  pair is not tried again until the key changes or ``reset`` is called.
  A rate-limit failure clears it so the pair is retried after cooldown.
* the in-flight flag: at most one fetch runs at a time.

The check and the transition into the fetching state happen without an
``await`` in between, so they are atomic on the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from enum import Enum
from typing import Awaitable, Callable

from app.cache.manager import CACHE_MISS, ResponseCache, response_cache
from app.config import settings
from app.errors import FetchError, NetworkError, RateLimited, UpstreamError, describe_error
from app.fetchers import fetch_wallet_transactions
from app.models.chain import ChainDescriptor
from app.models.transaction import FetchState, TransactionRecord

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, ChainDescriptor, int], Awaitable[list[TransactionRecord]]]

NOT_CONNECTED_MESSAGE = "Wallet not connected"


class FetchDecision(str, Enum):
    FETCH = "fetch"
    COOLING_DOWN = "cooling_down"
    DUPLICATE = "duplicate"
    IN_FLIGHT = "in_flight"


class FetchOutcome(str, Enum):
    FETCHED = "fetched"
    CACHED = "cached"
    FAILED = "failed"
    NOT_CONNECTED = "not_connected"
    SKIPPED_COOLDOWN = "skipped_cooldown"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    SKIPPED_IN_FLIGHT = "skipped_in_flight"


_SKIP_OUTCOMES = {
    FetchDecision.COOLING_DOWN: FetchOutcome.SKIPPED_COOLDOWN,
    FetchDecision.DUPLICATE: FetchOutcome.SKIPPED_DUPLICATE,
    FetchDecision.IN_FLIGHT: FetchOutcome.SKIPPED_IN_FLIGHT,
}


def fetch_key(address: str, chain: ChainDescriptor) -> str:
    return f"{address}-{chain.id}"


class FetchOrchestrator:
    def __init__(
        self,
        cache: ResponseCache | None = None,
        fetcher: Fetcher | None = None,
        clock: Callable[[], float] = time.monotonic,
        cooldown: float | None = None,
        limit: int | None = None,
        fetch_timeout: float | None = None,
    ):
        self._cache = response_cache if cache is None else cache
        self._fetcher = fetcher or fetch_wallet_transactions
        self._clock = clock
        self._cooldown = settings.rate_limit_cooldown if cooldown is None else cooldown
        self._limit = settings.fetch_limit if limit is None else limit
        self._fetch_timeout = settings.fetch_timeout if fetch_timeout is None else fetch_timeout

        self.cooling_until = 0.0
        self.last_attempted_key: str | None = None
        self.in_flight = False

        self.transactions: list[TransactionRecord] = []
        self.is_loading = False
        self.error: str | None = None

    def cooldown_remaining(self) -> float:
        return max(0.0, self.cooling_until - self._clock())

    def should_fetch(self, key: str) -> FetchDecision:
        if self._clock() < self.cooling_until:
            return FetchDecision.COOLING_DOWN
        if key == self.last_attempted_key:
            return FetchDecision.DUPLICATE
        if self.in_flight:
            return FetchDecision.IN_FLIGHT
        return FetchDecision.FETCH

    async def request_fetch(
        self, address: str | None, chain: ChainDescriptor, is_connected: bool = True
    ) -> FetchOutcome:
        if not is_connected or not address:
            self.error = NOT_CONNECTED_MESSAGE
            return FetchOutcome.NOT_CONNECTED

        key = fetch_key(address, chain)
        decision = self.should_fetch(key)
        if decision is not FetchDecision.FETCH:
            if decision is FetchDecision.COOLING_DOWN:
                logger.info(
                    "COOLDOWN: rate limit cooldown active, %ds remaining",
                    math.ceil(self.cooldown_remaining()),
                )
            else:
                logger.debug("SKIP %s: %s", decision.value, key)
            return _SKIP_OUTCOMES[decision]

        self.last_attempted_key = key
        self.in_flight = True
        self.is_loading = True
        self.error = None
        logger.info("FETCH START: %s on %s", address, chain.name)

        try:
            records, outcome = await self._load(address, chain)
        except FetchError as exc:
            self._on_failure(exc)
            return FetchOutcome.FAILED
        finally:
            self.in_flight = False
            self.is_loading = False

        self.transactions = records
        logger.info("FETCH DONE: %d transactions for %s", len(records), key)
        return outcome

    async def _load(
        self, address: str, chain: ChainDescriptor
    ) -> tuple[list[TransactionRecord], FetchOutcome]:
        entry = self._cache.get(address, chain.id)
        if entry is not CACHE_MISS:
            logger.info("CACHE HIT for %s on %s", address, chain.name)
            return entry.records, FetchOutcome.CACHED

        logger.info("CACHE MISS: fetching %s on %s", address, chain.name)
        try:
            records = await asyncio.wait_for(
                self._fetcher(address, chain, self._limit), timeout=self._fetch_timeout
            )
        except asyncio.TimeoutError as exc:
            raise NetworkError(f"Fetch timed out after {self._fetch_timeout}s") from exc
        except FetchError:
            raise
        except Exception as exc:
            logger.exception("Unexpected error fetching %s on %s", address, chain.name)
            raise UpstreamError(str(exc) or "Failed to fetch transactions") from exc

        self._cache.set(address, chain.id, records)
        return records, FetchOutcome.FETCHED

    def _on_failure(self, exc: FetchError) -> None:
        logger.error("FETCH FAILED (%s): %s", type(exc).__name__, exc)
        self.transactions = []
        self.error = describe_error(exc)

        if isinstance(exc, RateLimited):
            self.cooling_until = self._clock() + self._cooldown
            self.last_attempted_key = None
            logger.warning("COOLDOWN: rate limited, pausing fetches for %ds", self._cooldown)

    def reset(self) -> None:
        self.last_attempted_key = None

    def clear_error(self) -> None:
        self.error = None

    def state(self) -> FetchState:
        return FetchState(
            transactions=self.transactions,
            is_loading=self.is_loading,
            error=self.error,
            cooling_down_for=self.cooldown_remaining(),
        )


orchestrator = FetchOrchestrator()
