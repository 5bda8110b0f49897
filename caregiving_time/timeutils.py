"""Time parsing and formatting utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_ONE_MINUTE = timedelta(minutes=1)


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Europe/Lisbon" or "UTC".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Invalid time zone: {tz_name!r}. Example: UTC") from exc


def parse_instant(text: str, tz_name: str) -> datetime:
    """Parse an ISO-8601 date or date-time into a timezone-aware instant.

    Supported formats:
      - "YYYY-MM-DD"
      - "YYYY-MM-DDTHH:MM[:SS[.fff]]" (a space instead of "T" is accepted)
      - with optional "Z" or offset suffix, e.g. "+02:00"

    A date-only value means midnight UTC. Other values without an offset are
    read in tz_name. The result is truncated to millisecond precision and
    returned in UTC, so arithmetic between results is real elapsed time.

    Args:
        text: Datetime string.
        tz_name: IANA timezone name for naive date-times.

    Returns:
        UTC datetime.

    Raises:
        ValueError: If the text is not a valid calendar instant.
    """

    s = text.strip()
    if not s:
        raise ValueError("Empty timestamp")
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ValueError(f"Cannot parse timestamp: {text!r}. Example: 2024-01-01T08:00:00Z") from exc

    if dt.tzinfo is None:
        date_only = "T" not in s and " " not in s
        dt = dt.replace(tzinfo=UTC if date_only else tzinfo_from_name(tz_name))
    try:
        return dt.replace(microsecond=dt.microsecond // 1000 * 1000).astimezone(UTC)
    except OverflowError as exc:
        raise ValueError(f"Timestamp out of range: {text!r}") from exc


def minutes_between(earlier: datetime, later: datetime) -> int:
    """Elapsed whole minutes between two instants, always rounded up.

    ``ceil(elapsed_ms / 60000)``: 30.001 seconds is 1 minute, a zero gap is 0.
    """

    whole, rest = divmod(later - earlier, _ONE_MINUTE)
    return whole + (1 if rest else 0)


def iso_instant(dt: datetime) -> str:
    """Render an instant in UTC as e.g. "2024-01-01T08:00:00.000Z"."""

    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def split_hours_minutes(total_minutes: int) -> tuple[int, int]:
    """Split a minute count into whole hours and the remaining minutes."""

    return total_minutes // 60, total_minutes % 60
