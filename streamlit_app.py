from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from pathlib import Path

import streamlit as st

from caregiving_time.accumulator import AccumulatorParams, CollectingWarningSink, iter_steps
from caregiving_time.csv_io import load_event_records
from caregiving_time.errors import CaregivingTimeError
from caregiving_time.models import DEFAULT_TZ, MAX_RELEVANCE_HOURS, EventRecord
from caregiving_time.report import build_report
from caregiving_time.selector import select_events, subjects_in
from caregiving_time.timeutils import iso_instant, tzinfo_from_name


def _window(start_d: date, start_t: time, end_d: date, end_t: time, tz_name: str) -> tuple[datetime, datetime]:
    """Combine the sidebar date/time inputs into a UTC [start, end) pair."""

    tz = tzinfo_from_name(tz_name)
    return (
        datetime.combine(start_d, start_t).replace(tzinfo=tz).astimezone(UTC),
        datetime.combine(end_d, end_t).replace(tzinfo=tz).astimezone(UTC),
    )


@st.cache_data(show_spinner=False)
def _load_events(events_csv: str, tz_name: str, mtime: float) -> list[EventRecord]:
    _ = mtime  # part of cache key so updated files reload automatically
    records, _ = load_event_records(events_csv, tz_name)
    return records


def main() -> None:
    st.set_page_config(page_title="Caregiving time", layout="wide")
    st.title("Caregiving and travelling time per user")

    with st.sidebar:
        st.subheader("Data and time zone")
        tz_name = st.text_input("Time zone (IANA)", value=DEFAULT_TZ)
        events_csv = st.text_input("Events CSV path", value="events.csv")

        with st.expander("Advanced", expanded=False):
            relevance_hours = st.number_input(
                "Travel relevance window (hours)",
                value=2.0,
                step=0.5,
                min_value=0.0,
                max_value=MAX_RELEVANCE_HOURS,
            )

    p = Path(events_csv)
    if not p.exists():
        st.error(f"File not found: {events_csv!r}")
        return

    try:
        tzinfo_from_name(tz_name)
        records = _load_events(events_csv, tz_name, p.stat().st_mtime)
    except (CaregivingTimeError, ValueError) as exc:
        st.error(str(exc))
        return

    subjects = subjects_in(records)
    if not subjects:
        st.warning("The file contains no events.")
        return

    with st.sidebar:
        st.subheader("User and window")
        subject_id = st.selectbox("User id", subjects)
        today = datetime.now(tzinfo_from_name(tz_name)).date()
        start_d = st.date_input("Start date", value=today - timedelta(days=1))
        start_t = st.time_input("Start time", value=time.min)
        end_d = st.date_input("End date", value=today)
        end_t = st.time_input("End time", value=time.min)

    start, end = _window(start_d, start_t, end_d, end_t, tz_name)
    if start >= end:
        st.error("The start must be before the end.")
        return

    params = AccumulatorParams(relevance_window=timedelta(hours=float(relevance_hours)))
    sink = CollectingWarningSink()
    report = build_report(records, subject_id, start, end, sink=sink, params=params)

    st.subheader("Summary")
    st.write(report.text)
    c1, c2, c3 = st.columns(3)
    c1.metric("Caregiving (min)", str(report.caregiving_minutes))
    c2.metric("Travelling (min)", str(report.traveling_minutes))
    c3.metric("Events in window", str(report.events))

    for w in sink.warnings:
        st.warning(f"{w.message} ({w.current.location.name} at {iso_instant(w.current.event_at)})")

    st.subheader("Per-event breakdown")
    events = select_events(records, subject_id, start, end)
    rows: list[dict[str, object]] = [
        {
            "index": s.index,
            "time": iso_instant(s.event.event_at),
            "event_type": s.event.event_tag,
            "location": s.event.location.name,
            "rule": s.transition.value,
            "caregiving_added": s.caregiving_delta,
            "travelling_added": s.traveling_delta,
            "caregiving_total": s.state.caregiving_minutes,
            "travelling_total": s.state.traveling_minutes,
        }
        for s in iter_steps(events, start, CollectingWarningSink(), params)
    ]
    st.dataframe(rows, use_container_width=True, height=520)

    st.caption(
        "The window is [start, end) in the chosen time zone. Time after the last event in the window is not counted."
    )


if __name__ == "__main__":
    main()
