"""
Load config from config.yaml with optional env overrides.
Single source of truth for exchange, market kind, proxy, cache TTL, pacing,
sheet columns and schedule defaults.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml

# Defaults if no YAML or env
_DEFAULTS = {
    "exchange": "binance",
    "market_kind": "spot",
    "proxy": {"url": None, "username": None, "password": None},
    "cache": {"ttl_seconds": 30},
    "requests": {"inter_request_delay_ms": 500, "timeout_seconds": 15.0},
    "sheet": {
        "ticker_column": 1,
        "price_column": 2,
        "timestamp_column": None,
        "start_row": 2,
    },
    "schedule": {
        "interval_hours": 1,
        "start_time": "09:00",
        "weekdays": ["mon", "tue", "wed", "thu", "fri"],
    },
}

# env var -> (section, key); section None means top-level key
_ENV_KEYS = {
    "QUOTE_REFRESH_EXCHANGE": (None, "exchange"),
    "QUOTE_REFRESH_MARKET_KIND": (None, "market_kind"),
    "QUOTE_REFRESH_PROXY_URL": ("proxy", "url"),
    "QUOTE_REFRESH_PROXY_USERNAME": ("proxy", "username"),
    "QUOTE_REFRESH_PROXY_PASSWORD": ("proxy", "password"),
    "QUOTE_REFRESH_CACHE_TTL": ("cache", "ttl_seconds"),
    "QUOTE_REFRESH_DELAY_MS": ("requests", "inter_request_delay_ms"),
    "QUOTE_REFRESH_TIMEOUT_S": ("requests", "timeout_seconds"),
}


def _config_yaml_path() -> Path:
    """Config.yaml lives at repo root (parent of package dir)."""
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml(path: Optional[Union[str, Path]] = None) -> dict:
    config_path = Path(path) if path is not None else _config_yaml_path()
    if not config_path.exists():
        if path is not None:
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    for env_name, (section, key) in _ENV_KEYS.items():
        value = os.environ.get(env_name)
        if not value:
            continue
        if section is None:
            overrides[key] = value
        else:
            overrides.setdefault(section, {})[key] = value
    return overrides


def get_config(path: Optional[Union[str, Path]] = None) -> dict:
    """Return merged config: defaults <- config.yaml (or explicit path) <- env."""
    merged = _deep_merge(_DEFAULTS, _load_yaml(path))
    merged = _deep_merge(merged, _env_overrides())
    return merged


def with_overrides(cfg: dict, overrides: dict) -> dict:
    """Return cfg deep-merged with overrides (e.g. CLI flags)."""
    return _deep_merge(cfg, overrides)


def redacted(cfg: dict) -> dict:
    """Copy of cfg with the proxy password masked, for printing."""
    out = _deep_merge(cfg, {})
    proxy = out.get("proxy")
    if isinstance(proxy, dict) and proxy.get("password"):
        out["proxy"] = {**proxy, "password": "***"}
    return out


# Convenience accessors
def schedule_section(cfg: Optional[dict] = None) -> dict[str, Any]:
    return dict((cfg or get_config()).get("schedule") or _DEFAULTS["schedule"])
