"""
MEXC ticker adapter.

Uses the public MEXC APIs (no authentication required):
  spot:    GET https://api.mexc.com/api/v3/ticker/price?symbol={symbol}
  futures: GET https://contract.mexc.com/api/v1/contract/ticker?symbol={symbol}

Futures symbols use an underscore (BTC_USDT); see quote_refresh.refresh.normalize_symbol.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from ..adapter import HttpExchangeAdapter
from ..base import Exchange, MarketKind

MEXC_SPOT_URL = "https://api.mexc.com"
MEXC_CONTRACT_URL = "https://contract.mexc.com"

_ILLEGAL_SYMBOL = re.compile(r"illegal characters.*symbol", re.IGNORECASE)


class MexcAdapter(HttpExchangeAdapter):
    """Fetch last prices from the MEXC spot and contract APIs."""

    exchange = Exchange.MEXC

    def endpoint(self, symbol: str, market_kind: MarketKind) -> Tuple[str, Dict[str, str]]:
        if market_kind is MarketKind.FUTURES:
            url = f"{MEXC_CONTRACT_URL}/api/v1/contract/ticker"
        else:
            url = f"{MEXC_SPOT_URL}/api/v3/ticker/price"
        return url, {"symbol": symbol}

    def unknown_symbol_message(self, body: Any) -> Optional[str]:
        if not isinstance(body, dict):
            return None
        # spot errors use "msg", contract errors use "message"
        for field in ("msg", "message"):
            message = str(body.get(field) or "")
            if _ILLEGAL_SYMBOL.search(message):
                return message
        return None

    def extract_price(self, body: Any, market_kind: MarketKind) -> Any:
        if market_kind is MarketKind.FUTURES:
            return body["data"]["lastPrice"]
        return body["price"]
