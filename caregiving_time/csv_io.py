"""CSV input utilities for the exported location-event file."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Iterator

from caregiving_time.errors import InvalidTimestampError, RowParseError, SourceUnavailableError
from caregiving_time.models import EventRecord, EventType, Location, RawEventRow
from caregiving_time.timeutils import parse_instant

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Final[tuple[str, ...]] = (
    "user_id",
    "location_name",
    "coordinates_latitude",
    "coordinates_longitude",
    "timestamp",
    "event_type",
)


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    subjects: int


def iter_raw_rows(csv_path: str | Path) -> Iterator[RawEventRow]:
    """Yield RawEventRow objects from an events CSV.

    Args:
        csv_path: Path to the exported CSV.

    Yields:
        One RawEventRow per data row, in file order.

    Raises:
        SourceUnavailableError: The file cannot be opened or read.
        RowParseError: A required column is missing or a row has the wrong
            number of fields.

    Notes:
        The export uses these columns:
          - user_id, location_name
          - coordinates_latitude/coordinates_longitude: decimal degrees, unused
          - timestamp: ISO-8601 text
          - event_type: ENTER or LEAVE
    """

    p = Path(csv_path)
    try:
        f = p.open("r", encoding="utf-8", newline="")
    except OSError as exc:
        raise SourceUnavailableError(f"Unable to read CSV file: {p}") from exc

    with f:
        try:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                return

            missing = [c for c in REQUIRED_COLUMNS if c not in reader.fieldnames]
            if missing:
                raise RowParseError(
                    f"Unable to parse CSV file: missing columns {missing}. Found: {reader.fieldnames}"
                )

            for row in reader:
                # DictReader files surplus fields under None and fills short rows with None
                if None in row or any(v is None for v in row.values()):
                    raise RowParseError(f"Unable to parse CSV file: invalid record length on line {reader.line_num}")
                yield RawEventRow(
                    subject_id=row["user_id"],
                    location_name=row["location_name"],
                    latitude=row["coordinates_latitude"],
                    longitude=row["coordinates_longitude"],
                    timestamp=row["timestamp"],
                    event_type=row["event_type"],
                )
        except csv.Error as exc:
            raise RowParseError(f"Unable to parse CSV file: {exc}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceUnavailableError(f"Unable to read CSV file: {p}") from exc


def normalize_row(row: RawEventRow, tz_name: str) -> EventRecord:
    """Convert a raw row into an EventRecord.

    Only the timestamp is validated; unknown event types are kept as-is.

    Raises:
        InvalidTimestampError: If the timestamp is not a valid calendar instant.
    """

    try:
        event_at = parse_instant(row.timestamp, tz_name)
    except ValueError as exc:
        raise InvalidTimestampError(f"Invalid timestamp in event records: {row.timestamp!r}") from exc

    return EventRecord(
        subject_id=row.subject_id,
        location=Location.from_name(row.location_name),
        event_type=EventType.from_tag(row.event_type),
        event_at=event_at,
        latitude=row.latitude,
        longitude=row.longitude,
        timestamp_text=row.timestamp,
    )


def load_event_records(csv_path: str | Path, tz_name: str) -> tuple[list[EventRecord], CsvSummary]:
    """Load and normalize every row into memory.

    A single bad row aborts the whole load.

    Args:
        csv_path: Path to the exported CSV.
        tz_name: Timezone for timestamps without an offset.

    Returns:
        (records, summary)
    """

    records = [normalize_row(row, tz_name) for row in iter_raw_rows(csv_path)]
    summary = CsvSummary(
        rows_total=len(records),
        subjects=len({r.subject_id for r in records}),
    )
    logger.debug("Loaded %s rows for %s subjects from %s", summary.rows_total, summary.subjects, csv_path)
    return records, summary
