"""
Exchange adapters for last-price quotes.

One adapter per exchange (Bybit, Binance, MEXC), a shared proxy builder,
locale-independent price parsing and a short-lived TTL cache. Adapters return typed
FetchOutcome values instead of raising for row-level failures.
"""

from __future__ import annotations

from .base import (
    Cancelled,
    Exchange,
    ExchangeAdapter,
    FetchOutcome,
    MalformedResponse,
    MarketKind,
    Quote,
    Success,
    SymbolNotFound,
    TransportError,
)
from .cache import PriceCache
from .cex import BinanceAdapter, BybitAdapter, MexcAdapter
from .numbers import PriceFormatError, parse_price
from .proxy import ProxyConfig, build_proxy_config
from .registry import AdapterRegistry, create_default_registry

__all__ = [
    "Exchange",
    "MarketKind",
    "Quote",
    "FetchOutcome",
    "Success",
    "Cancelled",
    "SymbolNotFound",
    "MalformedResponse",
    "TransportError",
    "ExchangeAdapter",
    "BybitAdapter",
    "BinanceAdapter",
    "MexcAdapter",
    "PriceCache",
    "ProxyConfig",
    "build_proxy_config",
    "PriceFormatError",
    "parse_price",
    "AdapterRegistry",
    "create_default_registry",
]
