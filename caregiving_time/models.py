"""Data models for location events and the accumulator state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Final


HOME_LOCATION_NAME: Final[str] = "HOME"
DEFAULT_TZ: Final[str] = "UTC"
RELEVANCE_WINDOW: Final[timedelta] = timedelta(hours=2)
MAX_RELEVANCE_HOURS: Final[float] = 1_000_000.0


class EventType(str, Enum):
    """Location transition tags understood by the accumulator."""

    ENTER = "ENTER"
    LEAVE = "LEAVE"

    @classmethod
    def from_tag(cls, tag: str) -> EventType | str:
        """Return the matching member, or the tag itself when it is unknown."""

        try:
            return cls(tag)
        except ValueError:
            return tag


class LocationKind(str, Enum):
    HOME = "home"
    NAMED = "named"


@dataclass(frozen=True, slots=True)
class Location:
    """A place the subject entered or left.

    The home sentinel is resolved once, here; everything downstream looks at
    ``kind`` instead of comparing names.
    """

    kind: LocationKind
    name: str

    @classmethod
    def from_name(cls, name: str, home_name: str = HOME_LOCATION_NAME) -> Location:
        kind = LocationKind.HOME if name == home_name else LocationKind.NAMED
        return cls(kind=kind, name=name)

    @property
    def is_home(self) -> bool:
        return self.kind is LocationKind.HOME


@dataclass(frozen=True, slots=True)
class RawEventRow:
    """One row as read from the events CSV, still untyped."""

    subject_id: str
    location_name: str
    latitude: str
    longitude: str
    timestamp: str
    event_type: str


@dataclass(frozen=True, slots=True)
class EventRecord:
    """A normalized location event.

    Attributes:
        subject_id: Identifier of the tracked person, compared by equality.
        location: Where the event happened.
        event_type: ENTER/LEAVE, or the raw tag when the source used something else.
        event_at: Timezone-aware instant with millisecond precision.
        latitude: Coordinate text, passed through untouched.
        longitude: Coordinate text, passed through untouched.
        timestamp_text: The timestamp exactly as it appeared in the source.
    """

    subject_id: str
    location: Location
    event_type: EventType | str
    event_at: datetime
    latitude: str = ""
    longitude: str = ""
    timestamp_text: str = ""

    @property
    def event_tag(self) -> str:
        """The event type as text, whether or not it is a known tag."""

        return self.event_type.value if isinstance(self.event_type, EventType) else self.event_type


@dataclass(frozen=True, slots=True)
class AccumulatorState:
    """Running totals threaded through the fold, one instance per step."""

    query_start: datetime
    last_event_type: EventType | str | None = None
    last_location: Location | None = None
    last_event_at: datetime | None = None
    caregiving_minutes: int = 0
    traveling_minutes: int = 0


@dataclass(frozen=True, slots=True)
class CaregivingTotals:
    caregiving_minutes: int
    traveling_minutes: int
