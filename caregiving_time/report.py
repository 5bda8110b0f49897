"""Caregiving report building and text rendering."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from caregiving_time.accumulator import AccumulatorParams, WarningSink, accumulate
from caregiving_time.models import EventRecord
from caregiving_time.selector import select_events
from caregiving_time.timeutils import iso_instant, split_hours_minutes


def format_unit(count: int, unit: str) -> str:
    """Render "1 hour", "3 hours"; a zero count renders as ""."""

    if count == 0:
        return ""
    label = unit if count == 1 else f"{unit}s"
    return f"{count} {label}"


def format_duration(total_minutes: int) -> str:
    """Render a minute count as e.g. "1 hour and 5 minutes"."""

    hours, minutes = split_hours_minutes(total_minutes)
    parts = [p for p in (format_unit(hours, "hour"), format_unit(minutes, "minute")) if p]
    return " and ".join(parts)


def format_report(
    caregiving_minutes: int,
    traveling_minutes: int,
    subject_id: str,
    start: datetime,
    end: datetime,
) -> str:
    """Render the one-line summary sentence."""

    window = f"between {iso_instant(start)} and {iso_instant(end)}"
    if caregiving_minutes == 0:
        return f'The user with id "{subject_id}" did not spend time performing caregiving {window}.'

    travel = ""
    if traveling_minutes > 0:
        travel = f", of which {format_duration(traveling_minutes)} was spent travelling"
    return (
        f'The user with id "{subject_id}" spent {format_duration(caregiving_minutes)} '
        f"performing caregiving duties {window}{travel}."
    )


@dataclass(frozen=True, slots=True)
class CaregivingReport:
    """Totals for one subject and window."""

    subject_id: str
    start: datetime
    end: datetime
    events: int
    caregiving_minutes: int
    traveling_minutes: int

    @property
    def text(self) -> str:
        return format_report(
            self.caregiving_minutes,
            self.traveling_minutes,
            self.subject_id,
            self.start,
            self.end,
        )


def build_report(
    records: Iterable[EventRecord],
    subject_id: str,
    start: datetime,
    end: datetime,
    sink: WarningSink | None = None,
    params: AccumulatorParams = AccumulatorParams(),
) -> CaregivingReport:
    """Select the subject's events in ``[start, end)`` and total them.

    Args:
        records: All normalized events, any order, any subject.
        subject_id: Subject to report on.
        start: Window start (inclusive).
        end: Window end (exclusive).
        sink: Receives inconsistent-chain warnings.
        params: Accumulation parameters.

    Returns:
        CaregivingReport; ``.text`` is the printable sentence.
    """

    events = select_events(records, subject_id, start, end)
    totals = accumulate(events, start, sink, params)
    return CaregivingReport(
        subject_id=subject_id,
        start=start,
        end=end,
        events=len(events),
        caregiving_minutes=totals.caregiving_minutes,
        traveling_minutes=totals.traveling_minutes,
    )
