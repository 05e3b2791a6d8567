"""
Refresh API: settings, per-row orchestration and one-run execution.

A run walks the ticker column of a sheet from the start row until the first
empty ticker cell. For every row it normalizes the symbol for the selected
exchange, consults the run's PriceCache, calls the exchange adapter on a miss,
writes the price (or an error marker) into the price column and then pauses
for the configured inter-request delay.

Row-level fetch failures are written into the sheet and never stop the run.
Sink failures (SinkError) abort the run; run_refresh then skips the save so
the file on disk keeps its pre-run content.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from ..providers.base import (
    Cancelled,
    Exchange,
    ExchangeAdapter,
    FetchOutcome,
    MalformedResponse,
    MarketKind,
    Success,
    SymbolNotFound,
    TransportError,
)
from ..providers.cache import PriceCache
from ..providers.proxy import ProxyConfig, build_proxy_config
from ..providers.registry import AdapterRegistry, create_default_registry
from ..sheets.base import ResultSink
from ..sheets.csv_sheet import CsvSheet

logger = logging.getLogger(__name__)

FUTURES_QUOTE_SUFFIX = "USDT"

MARKER_CANCELLED = "CANCELLED"
MARKER_SYMBOL_NOT_FOUND = "ERROR: symbol not found"


def _section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = cfg.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"config section '{name}' must be a mapping, got {type(section).__name__}")
    return section


@dataclass(frozen=True)
class UpdateSettings:
    """Validated knobs for one refresh run. Build from config with from_config()."""

    exchange: Exchange = Exchange.BINANCE
    market_kind: MarketKind = MarketKind.SPOT
    proxy: Optional[ProxyConfig] = None
    cache_ttl_seconds: float = 30.0
    inter_request_delay_ms: int = 500
    http_timeout_seconds: float = 15.0
    ticker_column: int = 1
    price_column: int = 2
    timestamp_column: Optional[int] = None
    start_row: int = 2
    dry_run: bool = False

    def __post_init__(self) -> None:
        for name in ("ticker_column", "price_column", "start_row"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.timestamp_column is not None and self.timestamp_column < 1:
            raise ValueError(f"timestamp_column must be >= 1, got {self.timestamp_column}")
        if self.ticker_column == self.price_column:
            raise ValueError("ticker_column and price_column must differ")
        if self.cache_ttl_seconds < 0:
            raise ValueError(f"cache.ttl_seconds must be >= 0, got {self.cache_ttl_seconds}")
        if self.inter_request_delay_ms < 0:
            raise ValueError(
                f"requests.inter_request_delay_ms must be >= 0, got {self.inter_request_delay_ms}"
            )
        if self.http_timeout_seconds <= 0:
            raise ValueError(f"requests.timeout_seconds must be > 0, got {self.http_timeout_seconds}")

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], *, dry_run: bool = False) -> "UpdateSettings":
        proxy_cfg = _section(cfg, "proxy")
        sheet = _section(cfg, "sheet")
        reqs = _section(cfg, "requests")
        cache = _section(cfg, "cache")
        ts_col = sheet.get("timestamp_column")
        try:
            return cls(
                exchange=Exchange.parse(cfg.get("exchange", "binance")),
                market_kind=MarketKind.parse(cfg.get("market_kind", "spot")),
                proxy=build_proxy_config(
                    proxy_cfg.get("url"), proxy_cfg.get("username"), proxy_cfg.get("password")
                ),
                cache_ttl_seconds=float(cache.get("ttl_seconds", 30)),
                inter_request_delay_ms=int(reqs.get("inter_request_delay_ms", 500)),
                http_timeout_seconds=float(reqs.get("timeout_seconds", 15.0)),
                ticker_column=int(sheet.get("ticker_column", 1)),
                price_column=int(sheet.get("price_column", 2)),
                timestamp_column=int(ts_col) if ts_col not in (None, "") else None,
                start_row=int(sheet.get("start_row", 2)),
                dry_run=dry_run,
            )
        except TypeError as exc:
            raise ValueError(f"Invalid config value: {exc}") from exc


def normalize_symbol(ticker: str, exchange: Exchange, market_kind: MarketKind) -> str:
    """
    Request form of a sheet ticker.

    MEXC contracts are named BASE_USDT, so BTCUSDT becomes BTC_USDT there;
    tickers already carrying the underscore are left alone. Everything else
    is requested as written.
    """
    symbol = ticker.strip().upper()
    if exchange is Exchange.MEXC and market_kind is MarketKind.FUTURES:
        underscored = "_" + FUTURES_QUOTE_SUFFIX
        if symbol.endswith(FUTURES_QUOTE_SUFFIX) and not symbol.endswith(underscored):
            symbol = symbol[: -len(FUTURES_QUOTE_SUFFIX)] + underscored
    return symbol


def outcome_marker(outcome: FetchOutcome) -> str:
    """Human-readable text written into the price cell for a non-success outcome."""
    if isinstance(outcome, Cancelled):
        return MARKER_CANCELLED
    if isinstance(outcome, SymbolNotFound):
        return MARKER_SYMBOL_NOT_FOUND
    if isinstance(outcome, MalformedResponse):
        return f"ERROR: malformed response ({outcome.detail})"
    if isinstance(outcome, TransportError):
        return f"ERROR: transport ({outcome.detail})"
    raise TypeError(f"No marker for outcome {outcome!r}")


@dataclass
class RunSummary:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    cancelled: int = 0
    cache_hits: int = 0

    def describe(self) -> str:
        return (
            f"processed={self.processed} ok={self.succeeded} failed={self.failed} "
            f"cancelled={self.cancelled} cache_hits={self.cache_hits}"
        )


class UpdateOrchestrator:
    """
    Sequential row driver. Owns the run's PriceCache.

    `sleep` is injected so tests can record pacing without waiting.
    """

    def __init__(
        self,
        sink: ResultSink,
        adapter: ExchangeAdapter,
        settings: UpdateSettings,
        *,
        cache: Optional[PriceCache] = None,
        sleep: Callable[[float], None] = time.sleep,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if adapter.exchange is not settings.exchange:
            raise ValueError(
                f"Adapter serves {adapter.exchange.value}, settings select {settings.exchange.value}"
            )
        self.sink = sink
        self.adapter = adapter
        self.settings = settings
        self.cache = cache if cache is not None else PriceCache()
        self._sleep = sleep
        self._log = log if log is not None else logger

    @classmethod
    def for_settings(
        cls,
        sink: ResultSink,
        settings: UpdateSettings,
        *,
        registry: Optional[AdapterRegistry] = None,
        **kwargs: Any,
    ) -> "UpdateOrchestrator":
        """Resolve the adapter for settings.exchange once and build the orchestrator."""
        reg = registry or create_default_registry()
        adapter = reg.create(settings.exchange, timeout=settings.http_timeout_seconds)
        return cls(sink, adapter, settings, **kwargs)

    def run(self) -> RunSummary:
        """Process rows from start_row until the first empty ticker cell. SinkError propagates."""
        s = self.settings
        summary = RunSummary()
        delay_s = s.inter_request_delay_ms / 1000.0
        row = s.start_row
        while True:
            ticker = self.sink.read_cell(row, s.ticker_column)
            if ticker is None or not ticker.strip():
                break
            self._process_row(row, ticker.strip().upper(), summary)
            summary.processed += 1
            if delay_s > 0:
                self._sleep(delay_s)
            row += 1
        self._log.info("%s %s: %s", s.exchange.value, s.market_kind.value, summary.describe())
        return summary

    def _process_row(self, row: int, ticker: str, summary: RunSummary) -> None:
        s = self.settings
        cached = None if s.dry_run else self.cache.get(ticker, s.exchange)
        if cached is not None:
            self.sink.write_cell(row, s.price_column, cached)
            summary.cache_hits += 1
            summary.succeeded += 1
            self._log.info("row %d %s = %s (cache)", row, ticker, cached)
            return

        symbol = normalize_symbol(ticker, s.exchange, s.market_kind)
        outcome = self._fetch(symbol)

        if isinstance(outcome, Success):
            quote = outcome.quote
            self.cache.put(ticker, s.exchange, quote.price, s.cache_ttl_seconds)
            self.sink.write_cell(row, s.price_column, quote.price)
            if s.timestamp_column is not None:
                self.sink.write_cell(
                    row, s.timestamp_column, quote.observed_at.isoformat(timespec="seconds")
                )
            summary.succeeded += 1
            self._log.info("row %d %s = %s", row, ticker, quote.price)
            return

        self.sink.write_cell(row, s.price_column, outcome_marker(outcome))
        if isinstance(outcome, Cancelled):
            summary.cancelled += 1
            self._log.info("row %d %s: cancelled (dry run)", row, ticker)
        else:
            summary.failed += 1
            self._log.warning("row %d %s: %s", row, ticker, outcome_marker(outcome))

    def _fetch(self, symbol: str) -> FetchOutcome:
        s = self.settings
        try:
            return self.adapter.fetch_price(symbol, s.market_kind, s.proxy, dry_run=s.dry_run)
        except Exception as exc:
            # adapters return outcomes; anything raised is still contained to this row
            return TransportError(f"{type(exc).__name__}: {exc}")


@dataclass
class RefreshContext:
    """Holds the opened sheet and orchestrator for one run. Use as context manager."""

    path: Path
    sheet: Any  # ResultSink with save()
    orchestrator: UpdateOrchestrator
    _saved: bool = field(default=False, repr=False)

    def __enter__(self) -> "RefreshContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_val is not None and not self._saved:
            logger.error("Run aborted; %s left unchanged (in-memory writes discarded)", self.path)


def get_refresh_context(
    path: Union[str, Path],
    settings: UpdateSettings,
    *,
    create: bool = False,
    sheet: Any = None,
    adapter: Optional[ExchangeAdapter] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RefreshContext:
    """
    Open the sheet and build the orchestrator for settings.
    If sheet or adapter are provided, they are used instead of the defaults (for tests).
    """
    path = Path(path)
    if sheet is None:
        sheet = CsvSheet.open(path, create=create)
    if adapter is None:
        orchestrator = UpdateOrchestrator.for_settings(sheet, settings, sleep=sleep)
    else:
        orchestrator = UpdateOrchestrator(sheet, adapter, settings, sleep=sleep)
    return RefreshContext(path=path, sheet=sheet, orchestrator=orchestrator)


def run_refresh(ctx: RefreshContext) -> RunSummary:
    """
    Run all rows, then save the sheet once.
    Dry runs never save. On any exception nothing is saved and the exception is re-raised.
    """
    summary = ctx.orchestrator.run()
    if ctx.orchestrator.settings.dry_run:
        logger.info("Dry run: %s not saved", ctx.path)
        return summary
    ctx.sheet.save()
    ctx._saved = True
    return summary
