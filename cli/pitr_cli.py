"""Command-line utility for inspecting PITR windows and checking recovery targets."""

from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
from pathlib import Path

from app.schemas.calendar import CalendarRequest
from app.schemas.common import PitrWindowDescriptor
from app.schemas.validate import ValidateRequest
from app.services.calendar_service import render_calendar
from app.services.validate_service import validate_selection
from app.services.window_service import describe_window


def _load_window(path: str) -> PitrWindowDescriptor:
    """Read a window descriptor JSON file as returned by the backup API."""
    text = Path(path).read_text(encoding="utf-8")
    return PitrWindowDescriptor.model_validate_json(text)


def cmd_timeline(args: argparse.Namespace) -> None:
    """Print the merged timeline for a window descriptor."""
    payload = describe_window(_load_window(args.window))
    print(json.dumps(payload, indent=2))


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a timestamp, or a day plus time-of-day, against the window."""
    request = ValidateRequest(
        window=_load_window(args.window),
        target_time=args.target_time,
        day=args.day,
        hour=args.hour,
        minute=args.minute,
        second=args.second,
    )
    payload = validate_selection(request)
    print(json.dumps(payload, indent=2))

    result = payload["result"]
    if not result["is_valid"]:
        raise SystemExit(1)


def cmd_calendar(args: argparse.Namespace) -> None:
    """Print navigation flags and in-range days for one month."""
    request = CalendarRequest(window=_load_window(args.window), month=args.month, selected_day=args.day)
    payload = render_calendar(request)

    print(f"{payload['month_label']}  (prev: {'yes' if payload['can_go_previous'] else 'no'}, "
          f"next: {'yes' if payload['can_go_next'] else 'no'})")
    in_range = [str(cell["date"]) for cell in payload["days"] if cell["in_month"] and cell["in_range"]]
    print("Navigable days: " + (", ".join(in_range) if in_range else "none"))
    if payload["allowed_ranges_label"]:
        print(f"Allowed on {payload['selected_day']}: {payload['allowed_ranges_label']}")


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(prog="pitr-window")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command")

    timeline_p = sub.add_parser("timeline")
    timeline_p.add_argument("window", help="Path to a window descriptor JSON file")
    timeline_p.set_defaults(func=cmd_timeline)

    validate_p = sub.add_parser("validate")
    validate_p.add_argument("window")
    validate_p.add_argument("--target-time", dest="target_time")
    validate_p.add_argument("--day", type=dt.date.fromisoformat)
    validate_p.add_argument("--hour", type=int, default=0)
    validate_p.add_argument("--minute", type=int, default=0)
    validate_p.add_argument("--second", type=int, default=0)
    validate_p.set_defaults(func=cmd_validate)

    calendar_p = sub.add_parser("calendar")
    calendar_p.add_argument("window")
    calendar_p.add_argument("--month", type=dt.date.fromisoformat, help="Any date in the month to show")
    calendar_p.add_argument("--day", type=dt.date.fromisoformat, help="Selected day")
    calendar_p.set_defaults(func=cmd_calendar)

    return parser


def main() -> None:
    """CLI entry point invoked via `python -m cli.pitr_cli ...`."""
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
