"""
Bybit ticker adapter.

Uses the public Bybit v5 API (no authentication required):
  GET https://api.bybit.com/v5/market/tickers?category={spot|linear}&symbol={symbol}
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from ..adapter import HttpExchangeAdapter
from ..base import Exchange, MarketKind

BYBIT_BASE_URL = "https://api.bybit.com"
SUCCESS_MESSAGE = "OK"

# Bybit vocabulary: spot | linear | inverse. Inverse contracts are not selectable here.
_CATEGORY = {
    MarketKind.SPOT: "spot",
    MarketKind.FUTURES: "linear",
}


class BybitAdapter(HttpExchangeAdapter):
    """Fetch last prices from the Bybit public API."""

    exchange = Exchange.BYBIT

    def endpoint(self, symbol: str, market_kind: MarketKind) -> Tuple[str, Dict[str, str]]:
        url = f"{BYBIT_BASE_URL}/v5/market/tickers"
        return url, {"category": _CATEGORY[market_kind], "symbol": symbol}

    def unknown_symbol_message(self, body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        code = body.get("retCode", 0)
        message = str(body.get("retMsg", ""))
        if code not in (0, "0") and message != SUCCESS_MESSAGE:
            return message or f"retCode {code}"
        return None

    def extract_price(self, body: Any, market_kind: MarketKind) -> Any:
        return body["result"]["list"][0]["lastPrice"]
