"""Row/column result sinks: the CSV file sheet and an in-memory sheet."""
from __future__ import annotations

from .base import (
    CellValue,
    ResultSink,
    SheetLockedError,
    SheetNotFoundError,
    SheetSaveError,
    SinkError,
)
from .csv_sheet import CsvSheet
from .memory import InMemorySheet

__all__ = [
    "CellValue",
    "ResultSink",
    "SinkError",
    "SheetNotFoundError",
    "SheetLockedError",
    "SheetSaveError",
    "CsvSheet",
    "InMemorySheet",
]
