"""
Refresh prices in a sheet once.
Use: quote-refresh run --file prices.csv [--exchange bybit|binance|mexc] [--market spot|futures]
Config comes from config.yaml (or --config) and env; flags override both.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from quote_refresh.config import get_config, with_overrides
from quote_refresh.refresh import UpdateSettings, get_refresh_context, run_refresh
from quote_refresh.sheets.base import SinkError

logger = logging.getLogger("quote_refresh.cli.run")


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Console logging; --log-file also appends everything to that file."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if args.exchange:
        out["exchange"] = args.exchange
    if args.market:
        out["market_kind"] = args.market
    proxy = {
        k: v
        for k, v in (
            ("url", args.proxy_url),
            ("username", args.proxy_user),
            ("password", args.proxy_password),
        )
        if v is not None
    }
    if proxy:
        out["proxy"] = proxy
    if args.cache_ttl is not None:
        out["cache"] = {"ttl_seconds": args.cache_ttl}
    reqs = {}
    if args.delay_ms is not None:
        reqs["inter_request_delay_ms"] = args.delay_ms
    if args.timeout is not None:
        reqs["timeout_seconds"] = args.timeout
    if reqs:
        out["requests"] = reqs
    sheet = {
        k: v
        for k, v in (
            ("ticker_column", args.ticker_column),
            ("price_column", args.price_column),
            ("timestamp_column", args.timestamp_column),
            ("start_row", args.start_row),
        )
        if v is not None
    }
    if sheet:
        out["sheet"] = sheet
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="quote-refresh run",
        description="Fetch the last price for every ticker row and write it into the sheet.",
    )
    ap.add_argument("--file", required=True, help="Sheet (CSV) with tickers in the ticker column")
    ap.add_argument("--config", default=None, help="Path to config YAML (default: repo config.yaml)")
    ap.add_argument("--exchange", choices=["bybit", "binance", "mexc"], default=None)
    ap.add_argument("--market", choices=["spot", "futures"], default=None)
    ap.add_argument("--proxy-url", default=None, metavar="URL", help="http://host:port")
    ap.add_argument("--proxy-user", default=None)
    ap.add_argument("--proxy-password", default=None)
    ap.add_argument("--cache-ttl", type=float, default=None, metavar="SEC", help="Price cache TTL (default: 30)")
    ap.add_argument("--delay-ms", type=int, default=None, metavar="MS", help="Pause after each row (default: 500)")
    ap.add_argument("--timeout", type=float, default=None, metavar="SEC", help="HTTP timeout (default: 15)")
    ap.add_argument("--ticker-column", type=int, default=None, metavar="N")
    ap.add_argument("--price-column", type=int, default=None, metavar="N")
    ap.add_argument("--timestamp-column", type=int, default=None, metavar="N")
    ap.add_argument("--start-row", type=int, default=None, metavar="N")
    ap.add_argument("--create", action="store_true", help="Create the sheet with a header row if missing")
    ap.add_argument("--dry-run", action="store_true", help="No network calls, no save; rows show CANCELLED")
    ap.add_argument("--log-file", default=None, help="Also append all log output to this file")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.log_file)

    try:
        cfg = with_overrides(get_config(args.config), _overrides(args))
        settings = UpdateSettings.from_config(cfg, dry_run=args.dry_run)
    except (FileNotFoundError, ValueError) as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2

    try:
        with get_refresh_context(args.file, settings, create=args.create) as ctx:
            summary = run_refresh(ctx)
    except SinkError as e:
        print(f"refresh failed: {e}", file=sys.stderr)
        return 1

    logger.info("%s  OK  %s", args.file, summary.describe())
    return 0
