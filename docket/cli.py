"""
docket.cli
==========

Command-line front-end.

Examples
--------
$ docket add-days 2025-06-27 3                 # Friday + 3 business days
$ docket count-days 2025-06-02 2025-06-30
$ docket stages
$ docket summarize cases.json --chart images/status.png
$ docket initdb
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from .errors import WorkflowError
from .holidays import DEFAULT_HOLIDAYS_FILE, load_holidays
from .settings import LOG_LEVEL, settings

logger = logging.getLogger("docket")


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def _holidays(args):
    path = args.holidays or settings.holidays_file or DEFAULT_HOLIDAYS_FILE
    return load_holidays(path)


# ---------------------------------------------------------------------
# Sub-commands
# ---------------------------------------------------------------------
def cmd_add_days(args) -> int:
    from .models import DayCountPolicy
    from .workdays import add_days

    policy = DayCountPolicy.CALENDAR if args.calendar else DayCountPolicy.BUSINESS
    print(add_days(args.start, args.days, _holidays(args), policy).isoformat())
    return 0


def cmd_count_days(args) -> int:
    from .workdays import count_business_days

    print(count_business_days(args.start, args.end, _holidays(args)))
    return 0


def cmd_stages(args) -> int:
    from .stages import TRANSITIONS, audit_table, display_name

    for stage, targets in TRANSITIONS.items():
        nxt = ", ".join(sorted(t.value for t in targets)) or "-"
        print(f"{stage.value:<24} {display_name(stage):<32} -> {nxt}")

    problems = audit_table()
    for p in problems:
        print(f"!! {p}", file=sys.stderr)
    return 1 if problems else 0


def cmd_summarize(args) -> int:
    from .reporting import case_summary, summarize
    from .serialization import states_from_json
    from .workflow import recompute_all

    now = args.now or datetime.now()
    holidays = _holidays(args)
    cases = []
    for path in args.files:
        raw = Path(path).read_text(encoding="utf-8")
        if raw.lstrip().startswith("{"):
            raw = f"[{raw}]"
        cases.extend(recompute_all(s, now, holidays, settings.thresholds) for s in states_from_json(raw))
    logger.info(f"Loaded {len(cases)} case(s) from {len(args.files)} file(s)")

    summary = summarize(cases)
    report = {
        "total": summary.total,
        "completed": summary.completed,
        "expired": summary.expired,
        "critical": summary.critical,
        "warning": summary.warning,
        "extended": summary.extended,
        "on_track": summary.on_track,
        "completion_rate": round(summary.completion_rate, 4),
        "compliance_rate": round(summary.compliance_rate, 4),
        "next_critical_deadline": summary.next_critical_deadline.id if summary.next_critical_deadline else None,
        "cases": [
            {
                "case_id": c.case_id,
                "stage": c.current_stage.value,
                "progress": c.progress,
                "compliance": c.compliance_status.value,
            }
            for c in map(case_summary, cases)
        ],
    }
    print(json.dumps(report, indent=2))

    if args.chart:
        from .viz import deadline_status_chart
        out = deadline_status_chart(summary, args.chart)
        logger.info(f"Status chart saved to {out}")
    return 0


def cmd_initdb(args) -> int:
    from .db import create_all

    create_all()
    print(f"case_snapshots table ready at {settings.db_url}")
    return 0


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docket", description="Harassment-investigation deadline tracker")
    parser.add_argument("--holidays", type=Path, help="holiday JSON file (default: configured table)")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add-days", help="add business (or calendar) days to a date")
    p.add_argument("start", type=_iso_date)
    p.add_argument("days", type=int)
    p.add_argument("--calendar", action="store_true", help="count calendar days instead")
    p.set_defaults(func=cmd_add_days)

    p = sub.add_parser("count-days", help="inclusive business days between two dates")
    p.add_argument("start", type=_iso_date)
    p.add_argument("end", type=_iso_date)
    p.set_defaults(func=cmd_count_days)

    p = sub.add_parser("stages", help="print and audit the stage table")
    p.set_defaults(func=cmd_stages)

    p = sub.add_parser("summarize", help="portfolio summary of JSON case snapshots")
    p.add_argument("files", nargs="+")
    p.add_argument("--now", type=datetime.fromisoformat, help="evaluate at this ISO timestamp")
    p.add_argument("--chart", type=Path, help="also write a status bar chart PNG")
    p.set_defaults(func=cmd_summarize)

    p = sub.add_parser("initdb", help="create the snapshot table")
    p.set_defaults(func=cmd_initdb)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except WorkflowError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
