"""In-memory sheet: used by tests and dry runs. save() snapshots the working cells."""
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

from .base import CellValue, SheetSaveError, SinkError, check_position

Cell = Tuple[int, int]


class InMemorySheet:
    """
    Grid held in a dict. `committed` is what a durable store would contain.

    fail_on_save / fail_on_read_row let tests simulate sink failures.
    """

    def __init__(
        self,
        cells: Optional[Dict[Cell, CellValue]] = None,
        *,
        fail_on_save: bool = False,
        fail_on_read_row: Optional[int] = None,
    ) -> None:
        self.cells: Dict[Cell, CellValue] = dict(cells or {})
        self.committed: Dict[Cell, CellValue] = dict(self.cells)
        self.fail_on_save = fail_on_save
        self.fail_on_read_row = fail_on_read_row
        self.save_count = 0

    @classmethod
    def from_column(
        cls, values: Iterable[Optional[str]], *, column: int = 1, start_row: int = 2, **kwargs
    ) -> "InMemorySheet":
        cells: Dict[Cell, CellValue] = {}
        for offset, value in enumerate(values):
            if value is not None:
                cells[(start_row + offset, column)] = value
        return cls(cells, **kwargs)

    def read_cell(self, row: int, column: int) -> Optional[str]:
        check_position(row, column)
        if self.fail_on_read_row is not None and row == self.fail_on_read_row:
            raise SinkError(f"simulated read failure at row {row}")
        value = self.cells.get((row, column))
        if value is None:
            return None
        return str(value)

    def write_cell(self, row: int, column: int, value: CellValue) -> None:
        check_position(row, column)
        self.cells[(row, column)] = value

    def save(self) -> None:
        if self.fail_on_save:
            raise SheetSaveError("simulated save failure")
        self.committed = dict(self.cells)
        self.save_count += 1

