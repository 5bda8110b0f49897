"""Tests for reading and normalizing the events CSV."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from caregiving_time.csv_io import iter_raw_rows, load_event_records, normalize_row
from caregiving_time.errors import InvalidTimestampError, RowParseError, SourceUnavailableError
from caregiving_time.models import EventType, LocationKind, RawEventRow

HEADER = "user_id,location_name,coordinates_latitude,coordinates_longitude,timestamp,event_type\n"


def _write(tmp_path: Path, body: str, header: str = HEADER) -> Path:
    p = tmp_path / "events.csv"
    p.write_text(header + body, encoding="utf-8")
    return p


def _raw(**overrides) -> RawEventRow:
    fields = {
        "subject_id": "u1",
        "location_name": "WORK",
        "latitude": "38.7",
        "longitude": "-9.1",
        "timestamp": "2024-01-01T09:00:00Z",
        "event_type": "ENTER",
    }
    fields.update(overrides)
    return RawEventRow(**fields)


class TestIterRawRows:
    def test_reads_rows_in_file_order(self, tmp_path: Path) -> None:
        p = _write(
            tmp_path,
            "u1,WORK,38.7,-9.1,2024-01-01T09:00:00Z,ENTER\n"
            "u2,HOME,38.8,-9.2,2024-01-01T08:00:00Z,LEAVE\n",
        )
        rows = list(iter_raw_rows(p))
        assert [r.subject_id for r in rows] == ["u1", "u2"]
        assert rows[1].location_name == "HOME"
        assert rows[1].latitude == "38.8"

    def test_empty_file_yields_nothing(self, tmp_path: Path) -> None:
        p = _write(tmp_path, "", header="")
        assert list(iter_raw_rows(p)) == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SourceUnavailableError):
            list(iter_raw_rows(tmp_path / "nope.csv"))

    def test_directory_is_unavailable(self, tmp_path: Path) -> None:
        with pytest.raises(SourceUnavailableError):
            list(iter_raw_rows(tmp_path))

    def test_missing_column(self, tmp_path: Path) -> None:
        p = _write(tmp_path, "u1,WORK,2024-01-01T09:00:00Z,ENTER\n", header="user_id,location_name,timestamp,event_type\n")
        with pytest.raises(RowParseError, match="missing columns"):
            list(iter_raw_rows(p))

    @pytest.mark.parametrize(
        "line",
        ["u1,WORK,38.7,-9.1,2024-01-01T09:00:00Z\n", "u1,WORK,38.7,-9.1,2024-01-01T09:00:00Z,ENTER,extra\n"],
    )
    def test_ragged_row(self, tmp_path: Path, line: str) -> None:
        p = _write(tmp_path, line)
        with pytest.raises(RowParseError, match="record length"):
            list(iter_raw_rows(p))


class TestNormalizeRow:
    def test_typed_fields(self) -> None:
        rec = normalize_row(_raw(), "UTC")
        assert rec.subject_id == "u1"
        assert rec.event_type is EventType.ENTER
        assert rec.location.kind is LocationKind.NAMED
        assert rec.event_at == datetime(2024, 1, 1, 9, tzinfo=timezone.utc)
        assert (rec.latitude, rec.longitude) == ("38.7", "-9.1")
        assert rec.timestamp_text == "2024-01-01T09:00:00Z"

    def test_home_sentinel(self) -> None:
        assert normalize_row(_raw(location_name="HOME"), "UTC").location.is_home
        assert not normalize_row(_raw(location_name="home"), "UTC").location.is_home

    def test_unknown_event_type_passes_through(self) -> None:
        rec = normalize_row(_raw(event_type="PING"), "UTC")
        assert rec.event_type == "PING"
        assert rec.event_tag == "PING"

    def test_invalid_timestamp(self) -> None:
        with pytest.raises(InvalidTimestampError):
            normalize_row(_raw(timestamp="not a date"), "UTC")


class TestLoadEventRecords:
    def test_summary(self, tmp_path: Path) -> None:
        p = _write(
            tmp_path,
            "u1,WORK,38.7,-9.1,2024-01-01T09:00:00Z,ENTER\n"
            "u1,WORK,38.7,-9.1,2024-01-01T10:00:00Z,LEAVE\n"
            "u2,HOME,38.8,-9.2,2024-01-01T08:00:00Z,LEAVE\n",
        )
        records, summary = load_event_records(p, "UTC")
        assert len(records) == 3
        assert summary.rows_total == 3
        assert summary.subjects == 2

    def test_one_bad_timestamp_aborts_everything(self, tmp_path: Path) -> None:
        p = _write(
            tmp_path,
            "u1,WORK,38.7,-9.1,2024-01-01T09:00:00Z,ENTER\n"
            "u9,WORK,38.7,-9.1,garbage,LEAVE\n",
        )
        with pytest.raises(InvalidTimestampError):
            load_event_records(p, "UTC")
