"""CLI: help, run end-to-end with mocked HTTP, exit codes for config and sink errors."""

from __future__ import annotations

import json
from importlib import import_module
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from quote_refresh import config as cfg_mod
from quote_refresh.cli.main import main

_CLI_MODULES = [
    "quote_refresh.cli.run",
    "quote_refresh.cli.schedule",
]


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path: Path):
    for name in cfg_mod._ENV_KEYS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cfg_mod, "_config_yaml_path", lambda: tmp_path / "absent.yaml")
    monkeypatch.setattr("quote_refresh.cli.run.configure_logging", lambda *a, **k: None)


@pytest.mark.parametrize("module_name", _CLI_MODULES)
def test_cli_module_has_main(module_name):
    mod = import_module(module_name)
    assert callable(getattr(mod, "main", None)), f"{module_name} missing main()"


def test_cli_main_help_exits_zero():
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "run" in capsys.readouterr().out


def _binance_resp(symbol_prices):
    def fake_get(url, params=None, **kwargs):
        resp = MagicMock()
        symbol = params["symbol"]
        if symbol in symbol_prices:
            resp.status_code = 200
            resp.json.return_value = {"symbol": symbol, "price": symbol_prices[symbol]}
        else:
            resp.status_code = 400
            resp.json.return_value = {"code": -1121, "msg": "Invalid symbol."}
        return resp

    return fake_get


def test_run_updates_sheet(tmp_path: Path):
    sheet = tmp_path / "prices.csv"
    sheet.write_text("Ticker,Price\nBTCUSDT,\nFAKEUSDT,\nETHUSDT,\n", encoding="utf-8")

    with patch(
        "quote_refresh.providers.transport.requests.get",
        side_effect=_binance_resp({"BTCUSDT": "67890.12", "ETHUSDT": "3456.78"}),
    ) as mock_get:
        rc = main(["run", "--file", str(sheet), "--exchange", "binance", "--delay-ms", "0"])

    assert rc == 0
    assert mock_get.call_count == 3
    assert sheet.read_text(encoding="utf-8").splitlines() == [
        "Ticker,Price",
        "BTCUSDT,67890.12",
        "FAKEUSDT,ERROR: symbol not found",
        "ETHUSDT,3456.78",
    ]


def test_run_dry_run_makes_no_requests(tmp_path: Path):
    sheet = tmp_path / "prices.csv"
    original = "Ticker,Price\nBTCUSDT,\n"
    sheet.write_text(original, encoding="utf-8")

    with patch("quote_refresh.providers.transport.requests.get") as mock_get:
        rc = main(["run", "--file", str(sheet), "--dry-run", "--delay-ms", "0"])

    assert rc == 0
    mock_get.assert_not_called()
    assert sheet.read_text(encoding="utf-8") == original


def test_run_missing_sheet_is_fatal(tmp_path: Path, capsys):
    rc = main(["run", "--file", str(tmp_path / "missing.csv")])
    assert rc == 1
    assert "refresh failed" in capsys.readouterr().err


def test_run_bad_config_exit_2(tmp_path: Path, capsys):
    rc = main(["run", "--file", str(tmp_path / "p.csv"), "--start-row", "0"])
    assert rc == 2
    assert "config error" in capsys.readouterr().err


def test_show_config_masks_password(monkeypatch, capsys):
    monkeypatch.setenv("QUOTE_REFRESH_PROXY_URL", "http://proxy.local:3128")
    monkeypatch.setenv("QUOTE_REFRESH_PROXY_PASSWORD", "hunter2")
    assert main(["show-config"]) == 0
    shown = json.loads(capsys.readouterr().out)
    assert shown["proxy"]["password"] == "***"
    assert shown["proxy"]["url"] == "http://proxy.local:3128"


def test_schedule_print(tmp_path: Path, capsys):
    rc = main(["schedule", "--file", str(tmp_path / "p.csv"), "--interval-hours", "3", "--days", "mon,fri", "--print"])
    assert rc == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("0 9-23/3 * * 1,5 ")
    assert "-m quote_refresh run --file" in out


def test_run_scalar_proxy_section_exit_2(tmp_path: Path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("exchange: binance\nproxy: http://host:3128\n", encoding="utf-8")

    rc = main(["run", "--file", str(tmp_path / "p.csv"), "--config", str(config)])

    assert rc == 2
    assert "section 'proxy' must be a mapping" in capsys.readouterr().err


def test_show_config_with_scalar_proxy(tmp_path: Path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("proxy: http://host:3128\n", encoding="utf-8")

    assert main(["show-config", "--config", str(config)]) == 0
    assert json.loads(capsys.readouterr().out)["proxy"] == "http://host:3128"
