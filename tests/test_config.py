"""Config layering: defaults <- YAML <- env, plus redaction for display."""

from __future__ import annotations

from pathlib import Path

import pytest

from quote_refresh import config as cfg_mod


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in cfg_mod._ENV_KEYS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_yaml(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cfg_mod, "_config_yaml_path", lambda: tmp_path / "absent.yaml")
    cfg = cfg_mod.get_config()
    assert cfg["exchange"] == "binance"
    assert cfg["market_kind"] == "spot"
    assert cfg["cache"]["ttl_seconds"] == 30
    assert cfg["requests"]["inter_request_delay_ms"] == 500
    assert cfg["sheet"] == {"ticker_column": 1, "price_column": 2, "timestamp_column": None, "start_row": 2}


def test_yaml_overrides_defaults_deeply(tmp_path: Path) -> None:
    path = tmp_path / "c.yaml"
    path.write_text("exchange: mexc\nsheet:\n  price_column: 5\n", encoding="utf-8")
    cfg = cfg_mod.get_config(path)
    assert cfg["exchange"] == "mexc"
    assert cfg["sheet"]["price_column"] == 5
    assert cfg["sheet"]["ticker_column"] == 1


def test_env_overrides_yaml(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "c.yaml"
    path.write_text("exchange: mexc\nproxy:\n  url: http://a:1\n", encoding="utf-8")
    monkeypatch.setenv("QUOTE_REFRESH_EXCHANGE", "bybit")
    monkeypatch.setenv("QUOTE_REFRESH_PROXY_PASSWORD", "pw")
    cfg = cfg_mod.get_config(path)
    assert cfg["exchange"] == "bybit"
    assert cfg["proxy"] == {"url": "http://a:1", "username": None, "password": "pw"}


def test_explicit_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cfg_mod.get_config(tmp_path / "nope.yaml")


def test_non_mapping_yaml_ignored(tmp_path: Path) -> None:
    path = tmp_path / "c.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    assert cfg_mod.get_config(path)["exchange"] == "binance"


def test_with_overrides_does_not_mutate() -> None:
    base = dict(cfg_mod._DEFAULTS)
    merged = cfg_mod.with_overrides(base, {"requests": {"timeout_seconds": 3}})
    assert merged["requests"] == {"inter_request_delay_ms": 500, "timeout_seconds": 3}
    assert cfg_mod._DEFAULTS["requests"]["timeout_seconds"] == 15.0


def test_redacted_masks_password() -> None:
    cfg = cfg_mod.with_overrides(cfg_mod._DEFAULTS, {"proxy": {"url": "http://p:1", "password": "pw"}})
    shown = cfg_mod.redacted(cfg)
    assert shown["proxy"]["password"] == "***"
    assert cfg["proxy"]["password"] == "pw"
