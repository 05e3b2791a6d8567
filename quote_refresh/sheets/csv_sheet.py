"""
CSV-backed sheet: open/create, lock detection, cell access and atomic save.

The file is a header-less grid as far as positions go: row 1 is the first line
of the file (usually the column titles), column 1 the first field. Writes stay
in memory until save(); save() writes a temp file next to the target and
replaces the target in one step, so an interrupted or failed save leaves the
previous file as it was.
"""
from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd

from .base import (
    CellValue,
    SheetLockedError,
    SheetNotFoundError,
    SheetSaveError,
    SinkError,
    check_position,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADER = ("Ticker", "Price")


def lock_files(path: Path) -> list[Path]:
    """Office lock files that mark `path` as open elsewhere (LibreOffice, Excel)."""
    return [
        path.with_name(f".~lock.{path.name}#"),
        path.with_name(f"~${path.name}"),
    ]


def _format_cell(value: CellValue) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return repr(value)
    return str(value)


class CsvSheet:
    def __init__(self, path: Union[str, Path], frame: pd.DataFrame) -> None:
        self.path = Path(path)
        self._frame = frame
        self.dirty = False

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        *,
        create: bool = False,
        header: Sequence[str] = DEFAULT_HEADER,
    ) -> "CsvSheet":
        path = Path(path)
        for lock in lock_files(path):
            if lock.exists():
                raise SheetLockedError(f"{path} is open in another application (found {lock.name})")

        if not path.exists():
            if not create:
                raise SheetNotFoundError(f"Sheet not found: {path}")
            logger.info("Creating new sheet %s", path)
            sheet = cls(path, pd.DataFrame([list(header)], dtype=object))
            sheet.dirty = True
            return sheet

        try:
            frame = pd.read_csv(
                path, header=None, dtype=str, keep_default_na=False, skip_blank_lines=False
            )
        except pd.errors.EmptyDataError:
            frame = pd.DataFrame(dtype=object)
        except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
            raise SinkError(f"Cannot read sheet {path}: {exc}") from exc
        # a blank line is a row of empty cells, it ends the ticker column
        frame = frame.astype(object).fillna("")
        frame.columns = range(frame.shape[1])
        return cls(path, frame.reset_index(drop=True))

    @property
    def shape(self) -> tuple[int, int]:
        return self._frame.shape

    def read_cell(self, row: int, column: int) -> Optional[str]:
        check_position(row, column)
        n_rows, n_cols = self._frame.shape
        if row > n_rows or column > n_cols:
            return None
        value = self._frame.iat[row - 1, column - 1]
        if value is None or (isinstance(value, float) and pd.isna(value)):
            return None
        text = str(value)
        return text if text.strip() else None

    def write_cell(self, row: int, column: int, value: CellValue) -> None:
        check_position(row, column)
        n_rows, n_cols = self._frame.shape
        if row > n_rows or column > n_cols:
            self._frame = self._frame.reindex(
                index=range(max(row, n_rows)),
                columns=range(max(column, n_cols)),
                fill_value="",
            )
        self._frame.iat[row - 1, column - 1] = _format_cell(value)
        self.dirty = True

    def save(self) -> None:
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._frame.to_csv(tmp, header=False, index=False)
            os.replace(tmp, self.path)
        except OSError as exc:
            try:
                tmp.unlink()
            except OSError:
                logger.debug("Could not remove temp file %s", tmp)
            raise SheetSaveError(f"Cannot save sheet {self.path}: {exc}") from exc
        self.dirty = False
        logger.debug("Saved sheet %s (%d rows)", self.path, self._frame.shape[0])
