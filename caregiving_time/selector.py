"""Subject and window selection over normalized events."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from caregiving_time.models import EventRecord


def select_events(
    records: Iterable[EventRecord],
    subject_id: str,
    start: datetime,
    end: datetime,
) -> list[EventRecord]:
    """Keep one subject's events inside ``[start, end)``, oldest first.

    The sort is stable, so events sharing a timestamp keep their input order.
    """

    picked = [r for r in records if r.subject_id == subject_id and start <= r.event_at < end]
    picked.sort(key=lambda r: r.event_at)
    return picked


def subjects_in(records: Iterable[EventRecord]) -> list[str]:
    """Distinct subject ids, sorted."""

    return sorted({r.subject_id for r in records})
