"""
Periodic invocation of `quote-refresh run` through the user's crontab.

A schedule fires every `interval_hours` hours from `start_time` until the end
of the day, on the selected weekdays. Entries are tagged with a comment
marker per target file so registering again replaces the previous entry.
"""
from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

WEEKDAYS = ("sun", "mon", "tue", "wed", "thu", "fri", "sat")
MARKER_PREFIX = "# quote-refresh:"


class SchedulerError(Exception):
    pass


@dataclass(frozen=True)
class ScheduleSpec:
    interval_hours: int = 1
    start_time: str = "09:00"
    weekdays: Tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri")

    def __post_init__(self) -> None:
        if not 1 <= int(self.interval_hours) <= 24:
            raise ValueError(f"interval_hours must be 1..24, got {self.interval_hours}")
        self.start_hour_minute()
        if not self.weekdays:
            raise ValueError("at least one weekday is required")
        for day in self.weekdays:
            if day.lower()[:3] not in WEEKDAYS:
                raise ValueError(f"Unknown weekday {day!r}")

    @classmethod
    def from_config(cls, section: Dict[str, Any]) -> "ScheduleSpec":
        weekdays = section.get("weekdays") or cls.weekdays
        if isinstance(weekdays, str):
            weekdays = [d for d in weekdays.replace(",", " ").split() if d]
        return cls(
            interval_hours=int(section.get("interval_hours", 1)),
            start_time=str(section.get("start_time", "09:00")),
            weekdays=tuple(str(d) for d in weekdays),
        )

    def start_hour_minute(self) -> Tuple[int, int]:
        try:
            hour_s, minute_s = self.start_time.split(":")
            hour, minute = int(hour_s), int(minute_s)
        except ValueError:
            raise ValueError(f"start_time must be HH:MM, got {self.start_time!r}") from None
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError(f"start_time out of range: {self.start_time!r}")
        return hour, minute

    def cron_fields(self) -> str:
        hour, minute = self.start_hour_minute()
        if self.interval_hours >= 24 or hour == 23:
            hours = str(hour)
        else:
            hours = f"{hour}-23/{self.interval_hours}"
        days = sorted({WEEKDAYS.index(d.lower()[:3]) for d in self.weekdays})
        dow = "*" if len(days) == 7 else ",".join(str(d) for d in days)
        return f"{minute} {hours} * * {dow}"


def _cron_escape(text: str) -> str:
    # cron turns a bare % into a newline anywhere in the command field
    return text.replace("%", r"\%")


def marker_for(target: Union[str, Path]) -> str:
    return _cron_escape(f"{MARKER_PREFIX}{Path(target).resolve()}")


def render_cron_line(
    spec: ScheduleSpec,
    target: Union[str, Path],
    *,
    python: str = sys.executable,
    config: Optional[Union[str, Path]] = None,
) -> str:
    """One crontab line that runs the refresher against target on the schedule."""
    target_path = Path(target).resolve()
    cmd = [python, "-m", "quote_refresh", "run", "--file", str(target_path)]
    if config is not None:
        cmd += ["--config", str(Path(config).resolve())]
    return f"{spec.cron_fields()} {_cron_escape(shlex.join(cmd))} {marker_for(target_path)}"


def _read_crontab(runner: Callable[..., Any]) -> list[str]:
    result = runner(["crontab", "-l"], capture_output=True, text=True)
    if result.returncode != 0:
        # "no crontab for <user>" is an empty table, anything else is an error
        if "no crontab" in (result.stderr or "").lower():
            return []
        raise SchedulerError(f"crontab -l failed: {(result.stderr or '').strip()}")
    return [line for line in (result.stdout or "").splitlines() if line.strip()]


def register_schedule(
    spec: ScheduleSpec,
    target: Union[str, Path],
    *,
    config: Optional[Union[str, Path]] = None,
    python: str = sys.executable,
    runner: Callable[..., Any] = subprocess.run,
) -> str:
    """Install (or replace) the crontab entry for target. Returns the installed line."""
    line = render_cron_line(spec, target, python=python, config=config)
    marker = marker_for(target)
    try:
        existing = _read_crontab(runner)
    except OSError as exc:
        raise SchedulerError(f"crontab not available: {exc}") from exc
    kept = [entry for entry in existing if not entry.rstrip().endswith(marker)]
    table = "\n".join(kept + [line]) + "\n"
    try:
        result = runner(["crontab", "-"], input=table, capture_output=True, text=True)
    except OSError as exc:
        raise SchedulerError(f"crontab not available: {exc}") from exc
    if result.returncode != 0:
        raise SchedulerError(f"crontab install failed: {(result.stderr or '').strip()}")
    logger.info("Registered schedule for %s: %s", target, spec.cron_fields())
    return line
