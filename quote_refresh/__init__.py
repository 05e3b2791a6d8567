"""
Top-level public API surface for the quote refresher.
Exchange adapters live under quote_refresh.providers, sheet sinks under
quote_refresh.sheets and the row orchestrator under quote_refresh.refresh.
Does not import cli.
"""

from __future__ import annotations

from . import providers, refresh, sheets
from ._version import __version__

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "providers",
    "refresh",
    "sheets",
]
