"""
Shared request/classify flow for HTTP exchange adapters.

Subclasses describe one exchange: how to build the endpoint for a market
kind, how the exchange signals an unknown symbol, and where the price sits in
the JSON body. This class turns that into a FetchOutcome:

  dry run                       -> Cancelled (no network)
  connection/timeout failure    -> TransportError
  unknown-symbol signal in body -> SymbolNotFound
  other non-2xx status          -> TransportError
  missing/unparseable price     -> MalformedResponse
  otherwise                     -> Success(Quote)
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..timeutils import now_utc
from .base import (
    Cancelled,
    Exchange,
    FetchOutcome,
    MalformedResponse,
    MarketKind,
    Quote,
    Success,
    SymbolNotFound,
    TransportError,
)
from .numbers import PriceFormatError, parse_price
from .proxy import ProxyConfig
from .transport import HTTP_TIMEOUT_S, BodyDecodeError, TransportFailure, get_json

logger = logging.getLogger(__name__)


class HttpExchangeAdapter(ABC):
    """Base class; concrete adapters set `exchange` and implement the three hooks."""

    exchange: Exchange

    def __init__(self, timeout: float = HTTP_TIMEOUT_S) -> None:
        self.timeout = timeout

    @abstractmethod
    def endpoint(self, symbol: str, market_kind: MarketKind) -> Tuple[str, Dict[str, str]]:
        ...

    @abstractmethod
    def unknown_symbol_message(self, body: Any) -> Optional[str]:
        ...

    @abstractmethod
    def extract_price(self, body: Any, market_kind: MarketKind) -> Any:
        """Return the raw price field. KeyError/IndexError/TypeError mean it is missing."""
        ...

    def fetch_price(
        self,
        ticker: str,
        market_kind: MarketKind,
        proxy: Optional[ProxyConfig] = None,
        *,
        dry_run: bool = False,
    ) -> FetchOutcome:
        name = self.exchange.value
        if dry_run:
            return Cancelled()

        url, params = self.endpoint(ticker, market_kind)
        try:
            resp = get_json(url, params, proxy=proxy, timeout=self.timeout)
        except TransportFailure as exc:
            logger.debug("%s %s: transport failure: %s", name, ticker, exc)
            return TransportError(str(exc))
        except BodyDecodeError as exc:
            return MalformedResponse(str(exc))

        message = self.unknown_symbol_message(resp.body)
        if message is not None:
            return SymbolNotFound(symbol=ticker, message=message)
        if not resp.ok:
            return TransportError(f"HTTP {resp.status_code}")

        try:
            raw = self.extract_price(resp.body, market_kind)
        except (KeyError, IndexError, TypeError):
            return MalformedResponse(f"{name} response missing price field")
        try:
            price = parse_price(raw)
        except PriceFormatError as exc:
            return MalformedResponse(str(exc))

        return Success(
            Quote(
                ticker=ticker,
                exchange=self.exchange,
                market_kind=market_kind,
                price=price,
                observed_at=now_utc(),
            )
        )
