"""Allow python -m quote_refresh <command> (same as the quote-refresh script)."""
from __future__ import annotations

from .cli.main import main

if __name__ == "__main__":
    raise SystemExit(main())
