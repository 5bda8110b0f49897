"""Command-line interface for caregiving_time.

Run:
    python -m caregiving_time events.csv u1 2024-01-01T08:00:00Z 2024-01-01T20:00:00Z
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
from datetime import datetime, timedelta
from typing import NoReturn

from caregiving_time.accumulator import AccumulatorParams, CollectingWarningSink, iter_steps
from caregiving_time.csv_io import load_event_records
from caregiving_time.errors import CaregivingTimeError, InvalidWindowError, UsageError
from caregiving_time.models import DEFAULT_TZ, MAX_RELEVANCE_HOURS, EventRecord
from caregiving_time.report import build_report
from caregiving_time.selector import select_events
from caregiving_time.timeutils import iso_instant, parse_instant, tzinfo_from_name

logger = logging.getLogger(__name__)

# argparse messages for missing or surplus positionals
_COUNT_ERRORS = ("the following arguments are required", "unrecognized arguments")


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, so main() owns the exit status."""

    def error(self, message: str) -> NoReturn:
        if message.startswith(_COUNT_ERRORS):
            raise UsageError(f"Incorrect number of arguments. {message}")
        raise UsageError(message)


def _relevance_hours(text: str) -> float:
    """argparse type for --relevance-hours: a finite, non-negative number of hours."""

    try:
        hours = float(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from exc
    if not math.isfinite(hours) or not 0.0 <= hours <= MAX_RELEVANCE_HOURS:
        raise argparse.ArgumentTypeError(f"must be between 0 and {MAX_RELEVANCE_HOURS:g} hours, got {text!r}")
    return hours


def _print_explain(
    args: argparse.Namespace,
    records: list[EventRecord],
    start: datetime,
    end: datetime,
    params: AccumulatorParams,
) -> None:
    events = select_events(records, args.subject_id, start, end)
    print(f"### {len(events)} events for {args.subject_id!r}", file=sys.stderr)
    # warnings are logged once, by build_report
    for s in iter_steps(events, start, CollectingWarningSink(), params):
        ev = s.event
        print(
            f"{s.index:>4} {iso_instant(ev.event_at)} {ev.event_tag:<6} {ev.location.name:<16} "
            f"{s.transition.value:<21} +{s.caregiving_delta} care +{s.traveling_delta} travel "
            f"(total {s.state.caregiving_minutes}/{s.state.traveling_minutes})",
            file=sys.stderr,
        )


def _cmd_report(args: argparse.Namespace) -> int:
    try:
        tzinfo_from_name(args.tz)
    except ValueError as exc:
        raise UsageError(str(exc)) from exc

    try:
        start = parse_instant(args.start, args.tz)
        end = parse_instant(args.end, args.tz)
    except ValueError as exc:
        raise InvalidWindowError("Invalid start or end time.") from exc
    if start >= end:
        logger.warning("Window start %s is not before end %s; no events can match", args.start, args.end)

    params = AccumulatorParams(relevance_window=timedelta(hours=args.relevance_hours))
    records, _ = load_event_records(args.csv, args.tz)

    if args.explain:
        _print_explain(args, records, start, end, params)

    report = build_report(records, args.subject_id, start, end, params=params)
    print(report.text)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = _Parser(
        prog="caregiving-time",
        description="Summarize one user's caregiving and travelling time from a location-event CSV.",
    )
    p.add_argument("csv", type=str, help="Events CSV path")
    p.add_argument("subject_id", type=str, help="User id to report on")
    p.add_argument("start", type=str, help="Window start, inclusive (e.g. 2024-01-01T08:00:00Z)")
    p.add_argument("end", type=str, help="Window end, exclusive (e.g. 2024-01-01T20:00:00Z)")
    p.add_argument("--tz", type=str, default=DEFAULT_TZ, help="Time zone (IANA) for timestamps without an offset")
    p.add_argument(
        "--relevance-hours",
        type=_relevance_hours,
        default=2.0,
        help="Longest LEAVE -> ENTER gap still counted as travel, in hours",
    )
    p.add_argument("--explain", action="store_true", help="Print the per-event breakdown to stderr")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for stderr diagnostics",
    )
    p.set_defaults(func=_cmd_report)
    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(exc, file=sys.stderr)
        print(parser.format_usage().strip(), file=sys.stderr)
        return 1

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    try:
        return int(args.func(args))
    except CaregivingTimeError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
