"""
Top-level CLI dispatcher: quote-refresh <command> [args...].
All commands dispatch to package CLI modules.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional


def _main_show_config(argv: List[str]) -> int:
    from quote_refresh.config import get_config, redacted

    ap = argparse.ArgumentParser(prog="quote-refresh show-config", description="Print merged config")
    ap.add_argument("--config", default=None, help="Path to config YAML (default: repo config.yaml)")
    args = ap.parse_args(argv)
    try:
        cfg = get_config(args.config)
    except FileNotFoundError as e:
        print(f"show-config failed: {e}", file=sys.stderr)
        return 2
    print(json.dumps(redacted(cfg), indent=2, sort_keys=True))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="quote-refresh",
        description="Refresh exchange prices into a sheet",
    )
    subparsers = parser.add_subparsers(dest="command", help="command")
    for name, help_text in (
        ("run", "Refresh prices for every ticker row in a sheet"),
        ("schedule", "Register a recurring run in the user's crontab"),
        ("show-config", "Print the merged configuration"),
    ):
        subparsers.add_parser(name, help=help_text, add_help=False)

    args, rest = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    cmd = args.command
    if cmd == "run":
        from quote_refresh.cli import run as mod

        return mod.main(rest)
    if cmd == "schedule":
        from quote_refresh.cli import schedule as mod

        return mod.main(rest)
    if cmd == "show-config":
        return _main_show_config(rest)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
