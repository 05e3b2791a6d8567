"""
Result sink contract: a row/column grid of cells, 1-indexed.

The refresh orchestrator reads tickers from one column and writes prices or
error markers into another. Any failure of the sink itself is a SinkError and
is fatal for the whole run.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Union, runtime_checkable

CellValue = Union[str, int, float, Decimal]


class SinkError(Exception):
    """The sheet could not be opened, read, written or saved."""


class SheetNotFoundError(SinkError):
    pass


class SheetLockedError(SinkError):
    """Another application holds the sheet open."""


class SheetSaveError(SinkError):
    pass


@runtime_checkable
class ResultSink(Protocol):
    def read_cell(self, row: int, column: int) -> Optional[str]:
        """Cell text, or None when the cell is empty or outside the grid."""
        ...

    def write_cell(self, row: int, column: int, value: CellValue) -> None: ...

    def save(self) -> None:
        """Persist all writes made since the sheet was opened."""
        ...


def check_position(row: int, column: int) -> None:
    if row < 1 or column < 1:
        raise SinkError(f"Cell positions are 1-indexed, got row={row} column={column}")
