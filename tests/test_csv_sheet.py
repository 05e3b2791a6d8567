"""CsvSheet: open/create, lock detection, cell access, atomic save."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from quote_refresh.sheets.base import (
    ResultSink,
    SheetLockedError,
    SheetNotFoundError,
    SheetSaveError,
    SinkError,
)
from quote_refresh.sheets.csv_sheet import CsvSheet


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_read_cells_one_indexed(tmp_path: Path) -> None:
    path = _write(tmp_path / "p.csv", "Ticker,Price\nBTCUSDT,\nETHUSDT,3000\n")
    sheet = CsvSheet.open(path)

    assert isinstance(sheet, ResultSink)
    assert sheet.read_cell(1, 1) == "Ticker"
    assert sheet.read_cell(2, 1) == "BTCUSDT"
    assert sheet.read_cell(2, 2) is None
    assert sheet.read_cell(3, 2) == "3000"
    assert sheet.read_cell(4, 1) is None
    assert sheet.read_cell(1, 9) is None


def test_tickers_stay_text(tmp_path: Path) -> None:
    path = _write(tmp_path / "p.csv", "Ticker,Price\n1INCHUSDT,\n000123,\n")
    sheet = CsvSheet.open(path)
    assert sheet.read_cell(3, 1) == "000123"


def test_write_and_save_roundtrip(tmp_path: Path) -> None:
    path = _write(tmp_path / "p.csv", "Ticker,Price\nBTCUSDT,\n")
    sheet = CsvSheet.open(path)
    sheet.write_cell(2, 2, Decimal("67890.12"))
    sheet.write_cell(2, 4, "2026-01-01T00:00:00+00:00")
    assert sheet.dirty
    sheet.save()

    assert not sheet.dirty
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[1] == "BTCUSDT,67890.12,,2026-01-01T00:00:00+00:00"
    reopened = CsvSheet.open(path)
    assert reopened.read_cell(2, 2) == "67890.12"



def test_blank_line_kept_as_empty_row(tmp_path: Path) -> None:
    path = _write(tmp_path / "p.csv", "Ticker,Price\nBTCUSDT,\n\nETHUSDT,\n")
    sheet = CsvSheet.open(path)

    assert sheet.shape == (4, 2)
    assert sheet.read_cell(3, 1) is None
    assert sheet.read_cell(4, 1) == "ETHUSDT"

    sheet.write_cell(2, 2, Decimal("1.5"))
    sheet.save()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[1] == "BTCUSDT,1.5"
    assert lines[2].strip(",") == ""
    assert lines[3] == "ETHUSDT,"

def test_decimal_written_without_exponent(tmp_path: Path) -> None:
    sheet = CsvSheet.open(tmp_path / "p.csv", create=True)
    sheet.write_cell(2, 2, Decimal("0.00000123"))
    assert sheet.read_cell(2, 2) == "0.00000123"


def test_write_grows_grid(tmp_path: Path) -> None:
    sheet = CsvSheet.open(tmp_path / "new.csv", create=True)
    assert sheet.shape == (1, 2)
    sheet.write_cell(5, 3, "x")
    assert sheet.shape == (5, 3)
    assert sheet.read_cell(3, 1) is None


def test_missing_file_without_create(tmp_path: Path) -> None:
    with pytest.raises(SheetNotFoundError):
        CsvSheet.open(tmp_path / "missing.csv")


def test_create_writes_header_on_save(tmp_path: Path) -> None:
    path = tmp_path / "new.csv"
    sheet = CsvSheet.open(path, create=True)
    assert not path.exists()
    sheet.save()
    assert path.read_text(encoding="utf-8").splitlines() == ["Ticker,Price"]


def test_empty_file_opens_as_empty_grid(tmp_path: Path) -> None:
    sheet = CsvSheet.open(_write(tmp_path / "empty.csv", ""))
    assert sheet.read_cell(1, 1) is None


@pytest.mark.parametrize("lock_name", [".~lock.p.csv#", "~$p.csv"])
def test_lock_file_refuses_open(tmp_path: Path, lock_name: str) -> None:
    path = _write(tmp_path / "p.csv", "Ticker,Price\n")
    (tmp_path / lock_name).write_text("locked", encoding="utf-8")
    with pytest.raises(SheetLockedError):
        CsvSheet.open(path)


def test_failed_save_keeps_previous_file(tmp_path: Path) -> None:
    original = "Ticker,Price\nBTCUSDT,1\n"
    path = _write(tmp_path / "p.csv", original)
    sheet = CsvSheet.open(path)
    sheet.write_cell(2, 2, Decimal("2"))

    with patch("quote_refresh.sheets.csv_sheet.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(SheetSaveError):
            sheet.save()

    assert path.read_text(encoding="utf-8") == original
    assert not (tmp_path / ".p.csv.tmp").exists()


def test_positions_are_one_indexed(tmp_path: Path) -> None:
    sheet = CsvSheet.open(tmp_path / "p.csv", create=True)
    with pytest.raises(SinkError):
        sheet.read_cell(0, 1)
    with pytest.raises(SinkError):
        sheet.write_cell(1, 0, "x")
