"""
Short-lived price cache keyed by (ticker, exchange).

Entries expire lazily: a get() after the entry's TTL has elapsed behaves as a
miss and drops the entry. There is no background sweep. One cache lives for
one refresh run and is owned by the orchestrator; it is not thread-safe.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple

from .base import Exchange

DEFAULT_TTL_SECONDS = 30.0

CacheKey = Tuple[str, Exchange]


@dataclass(frozen=True)
class CacheEntry:
    price: Decimal
    expires_at: float


class PriceCache:
    """
    TTL mapping (ticker, exchange) -> price.

    `clock` returns seconds on a monotonic scale; tests pass a fake.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: Dict[CacheKey, CacheEntry] = {}

    def get(self, ticker: str, exchange: Exchange) -> Optional[Decimal]:
        key = (ticker, exchange)
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._store[key]
            return None
        return entry.price

    def put(
        self,
        ticker: str,
        exchange: Exchange,
        price: Decimal,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        self._store[(ticker, exchange)] = CacheEntry(price=price, expires_at=self._clock() + ttl_seconds)

    def __len__(self) -> int:
        return len(self._store)
