"""
Register a recurring refresh for a sheet in the user's crontab.
Use: quote-refresh schedule --file prices.csv [--interval-hours 2] [--start 08:00] [--days mon,wed,fri] [--print]
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from quote_refresh.config import get_config, schedule_section
from quote_refresh.scheduler import ScheduleSpec, SchedulerError, register_schedule, render_cron_line


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    ap = argparse.ArgumentParser(
        prog="quote-refresh schedule",
        description="Run `quote-refresh run --file FILE` every N hours on selected weekdays.",
    )
    ap.add_argument("--file", required=True, help="Sheet the scheduled run refreshes")
    ap.add_argument("--config", default=None, help="Config YAML passed to the scheduled run")
    ap.add_argument("--interval-hours", type=int, default=None, metavar="N")
    ap.add_argument("--start", default=None, metavar="HH:MM", help="First run of the day")
    ap.add_argument("--days", default=None, metavar="CSV", help='Weekdays, e.g. "mon,tue,wed"')
    ap.add_argument("--print", dest="print_only", action="store_true", help="Only print the crontab line")
    args = ap.parse_args(argv)

    try:
        section = schedule_section(get_config(args.config))
        if args.interval_hours is not None:
            section["interval_hours"] = args.interval_hours
        if args.start is not None:
            section["start_time"] = args.start
        if args.days is not None:
            section["weekdays"] = args.days
        spec = ScheduleSpec.from_config(section)
    except (FileNotFoundError, ValueError) as e:
        print(f"config error: {e}", file=sys.stderr)
        return 2

    if args.print_only:
        print(render_cron_line(spec, args.file, config=args.config))
        return 0
    try:
        line = register_schedule(spec, args.file, config=args.config)
    except SchedulerError as e:
        print(f"schedule failed: {e}", file=sys.stderr)
        return 1
    print(f"Registered: {line}")
    return 0
