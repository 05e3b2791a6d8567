"""
Single source for "now" time. Supports deterministic mode for tests via
QUOTE_REFRESH_DETERMINISTIC_TIME (ISO format, e.g. 2026-01-01T00:00:00Z).
"""

from __future__ import annotations

import os
from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Return current UTC time as an aware datetime.
    If env QUOTE_REFRESH_DETERMINISTIC_TIME is set, parse and return that value instead.
    """
    fixed = os.environ.get("QUOTE_REFRESH_DETERMINISTIC_TIME", "").strip()
    if fixed:
        parsed = datetime.fromisoformat(fixed.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return datetime.now(timezone.utc)
