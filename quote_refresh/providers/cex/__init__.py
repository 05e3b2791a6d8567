"""CEX (centralized exchange) ticker adapters."""
from __future__ import annotations

from .binance import BinanceAdapter
from .bybit import BybitAdapter
from .mexc import MexcAdapter

__all__ = ["BinanceAdapter", "BybitAdapter", "MexcAdapter"]
