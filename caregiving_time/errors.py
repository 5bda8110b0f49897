"""Exceptions raised while building a caregiving report."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caregiving_time.models import EventRecord, EventType


class CaregivingTimeError(Exception):
    """Base class for fatal errors; the CLI turns these into exit status 1."""


class UsageError(CaregivingTimeError):
    """Wrong number of command-line arguments."""


class InvalidWindowError(CaregivingTimeError):
    """The window start or end does not parse."""


class SourceUnavailableError(CaregivingTimeError):
    """The events file cannot be opened or read."""


class RowParseError(CaregivingTimeError):
    """The events file is structurally malformed."""


class InvalidTimestampError(CaregivingTimeError):
    """A row carries a timestamp that is not a valid calendar instant."""


class InconsistentChainWarning(UserWarning):
    """Two consecutive events for the subject do not alternate ENTER/LEAVE.

    Never raised; reported to a warning sink and the fold carries on.
    """

    def __init__(self, previous_type: EventType | str | None, current: EventRecord, message: str) -> None:
        super().__init__(message)
        self.previous_type = previous_type
        self.current = current
        self.message = message
