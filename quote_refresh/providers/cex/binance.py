"""
Binance ticker adapter.

Uses the public Binance APIs (no authentication required):
  spot:    GET https://api.binance.com/api/v3/ticker/price?symbol={symbol}
  futures: GET https://fapi.binance.com/fapi/v1/ticker/price?symbol={symbol}
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from ..adapter import HttpExchangeAdapter
from ..base import Exchange, MarketKind

BINANCE_SPOT_URL = "https://api.binance.com"
BINANCE_FUTURES_URL = "https://fapi.binance.com"

_INVALID_SYMBOL = re.compile(r"invalid symbol", re.IGNORECASE)


class BinanceAdapter(HttpExchangeAdapter):
    """Fetch last prices from the Binance spot and USD-M futures APIs."""

    exchange = Exchange.BINANCE

    def endpoint(self, symbol: str, market_kind: MarketKind) -> Tuple[str, Dict[str, str]]:
        if market_kind is MarketKind.FUTURES:
            url = f"{BINANCE_FUTURES_URL}/fapi/v1/ticker/price"
        else:
            url = f"{BINANCE_SPOT_URL}/api/v3/ticker/price"
        return url, {"symbol": symbol}

    def unknown_symbol_message(self, body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        message = str(body.get("msg", ""))
        if _INVALID_SYMBOL.search(message):
            return message
        return None

    def extract_price(self, body: Any, market_kind: MarketKind) -> Any:
        return body["price"]
