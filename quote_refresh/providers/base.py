"""
Exchange adapter interfaces and data contracts.

Every exchange adapter implements ExchangeAdapter: given a ticker, a market
kind and an optional proxy it returns a FetchOutcome. Outcomes are frozen
dataclasses, one per result kind, so callers branch on type instead of
inspecting status strings.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from .proxy import ProxyConfig


class Exchange(enum.Enum):
    """Supported exchanges."""

    BYBIT = "bybit"
    BINANCE = "binance"
    MEXC = "mexc"

    @classmethod
    def parse(cls, value: Union[str, "Exchange"]) -> "Exchange":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown exchange {value!r}. Expected one of: {[e.value for e in cls]}"
            ) from None


class MarketKind(enum.Enum):
    """Normalized spot-vs-futures selector; each adapter maps it to its own vocabulary."""

    SPOT = "spot"
    FUTURES = "futures"

    @classmethod
    def parse(cls, value: Union[str, "MarketKind"]) -> "MarketKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown market kind {value!r}. Expected one of: {[m.value for m in cls]}"
            ) from None


@dataclass(frozen=True)
class Quote:
    """Immutable, successfully parsed price quote."""

    ticker: str
    exchange: Exchange
    market_kind: MarketKind
    price: Decimal
    observed_at: datetime


@dataclass(frozen=True)
class Success:
    quote: Quote


@dataclass(frozen=True)
class Cancelled:
    """Dry run: the adapter was asked not to touch the network."""


@dataclass(frozen=True)
class SymbolNotFound:
    symbol: str
    message: str = ""


@dataclass(frozen=True)
class MalformedResponse:
    detail: str


@dataclass(frozen=True)
class TransportError:
    detail: str


FetchOutcome = Union[Success, Cancelled, SymbolNotFound, MalformedResponse, TransportError]


@runtime_checkable
class ExchangeAdapter(Protocol):
    """Protocol for per-exchange quote adapters."""

    @property
    def exchange(self) -> Exchange: ...

    def fetch_price(
        self,
        ticker: str,
        market_kind: MarketKind,
        proxy: Optional["ProxyConfig"] = None,
        *,
        dry_run: bool = False,
    ) -> FetchOutcome:
        """Fetch the last traded price for ticker (e.g. 'BTCUSDT') on this exchange."""
        ...
