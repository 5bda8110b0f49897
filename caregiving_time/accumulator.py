"""Caregiving and travelling time accumulation.

The accumulator folds one subject's ordered events into two running minute
totals. Every step takes the previous ``AccumulatorState`` and returns a new
one, so single transitions can be exercised in isolation.

Rules, comparing the previous event with the current one:

    first event, LEAVE at a non-home place  -> caregiving since the window start
    first event, anything else              -> nothing
    ENTER -> LEAVE, previous place not home -> caregiving += session length
    ENTER -> LEAVE, previous place home     -> nothing
    LEAVE -> ENTER, within the relevance window
                                            -> caregiving and travelling += gap
    LEAVE -> ENTER, beyond the window       -> nothing
    anything else                           -> warning, nothing
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, Iterator, Protocol

from caregiving_time.errors import InconsistentChainWarning
from caregiving_time.models import (
    RELEVANCE_WINDOW,
    AccumulatorState,
    CaregivingTotals,
    EventRecord,
    EventType,
)
from caregiving_time.timeutils import minutes_between

logger = logging.getLogger(__name__)

INCONSISTENT_CHAIN_MESSAGE = "Inconsistent data. Encountered ENTER/ENTER or LEAVE/LEAVE event chain."


@dataclass(frozen=True, slots=True)
class AccumulatorParams:
    """Parameters controlling accumulation."""

    # A LEAVE -> ENTER gap longer than this is not counted as travel
    # (overnight, or the subject went somewhere unrelated).
    relevance_window: timedelta = RELEVANCE_WINDOW


class Transition(str, Enum):
    """Which rule a single step applied."""

    INITIAL_BACKDATED = "initial_backdated"
    INITIAL = "initial"
    SESSION = "session"
    HOME_SESSION = "home_session"
    TRAVEL = "travel"
    TRAVEL_OUT_OF_WINDOW = "travel_out_of_window"
    INCONSISTENT = "inconsistent"


class WarningSink(Protocol):
    def warn(self, warning: InconsistentChainWarning) -> None: ...


class LoggingWarningSink:
    """Report chain warnings through the module logger."""

    def warn(self, warning: InconsistentChainWarning) -> None:
        logger.warning(
            "%s (subject=%s, at=%s)",
            warning.message,
            warning.current.subject_id,
            warning.current.event_at.isoformat(),
        )


@dataclass
class CollectingWarningSink:
    """Keep chain warnings in memory."""

    warnings: list[InconsistentChainWarning] = field(default_factory=list)

    def warn(self, warning: InconsistentChainWarning) -> None:
        self.warnings.append(warning)


@dataclass(frozen=True, slots=True)
class StepRecord:
    """What one step did, for tracing."""

    index: int
    event: EventRecord
    transition: Transition
    caregiving_delta: int
    traveling_delta: int
    state: AccumulatorState


def initial_state(query_start: datetime) -> AccumulatorState:
    return AccumulatorState(query_start=query_start)


def classify_transition(
    state: AccumulatorState,
    event: EventRecord,
    index: int,
    params: AccumulatorParams = AccumulatorParams(),
) -> Transition:
    """Decide which rule applies to ``event`` given the previous state."""

    if index == 0:
        if event.event_type == EventType.LEAVE and not event.location.is_home:
            return Transition.INITIAL_BACKDATED
        return Transition.INITIAL

    prev_type = state.last_event_type
    if prev_type == EventType.ENTER and event.event_type == EventType.LEAVE:
        if state.last_location is not None and state.last_location.is_home:
            return Transition.HOME_SESSION
        return Transition.SESSION
    if prev_type == EventType.LEAVE and event.event_type == EventType.ENTER:
        if state.last_event_at is not None and event.event_at - state.last_event_at <= params.relevance_window:
            return Transition.TRAVEL
        return Transition.TRAVEL_OUT_OF_WINDOW
    return Transition.INCONSISTENT


def _deltas(state: AccumulatorState, event: EventRecord, transition: Transition) -> tuple[int, int]:
    """(caregiving, travelling) minutes a transition contributes."""

    if transition is Transition.INITIAL_BACKDATED:
        return minutes_between(state.query_start, event.event_at), 0
    if state.last_event_at is None:
        return 0, 0
    if transition is Transition.SESSION:
        return minutes_between(state.last_event_at, event.event_at), 0
    if transition is Transition.TRAVEL:
        gap = minutes_between(state.last_event_at, event.event_at)
        return gap, gap
    return 0, 0


def _apply(
    state: AccumulatorState,
    event: EventRecord,
    index: int,
    sink: WarningSink | None,
    params: AccumulatorParams,
) -> StepRecord:
    transition = classify_transition(state, event, index, params)
    if transition is Transition.INCONSISTENT:
        warning = InconsistentChainWarning(state.last_event_type, event, INCONSISTENT_CHAIN_MESSAGE)
        (sink or LoggingWarningSink()).warn(warning)

    caregiving, traveling = _deltas(state, event, transition)
    new_state = replace(
        state,
        last_event_type=event.event_type,
        last_location=event.location,
        last_event_at=event.event_at,
        caregiving_minutes=state.caregiving_minutes + caregiving,
        traveling_minutes=state.traveling_minutes + traveling,
    )
    return StepRecord(
        index=index,
        event=event,
        transition=transition,
        caregiving_delta=caregiving,
        traveling_delta=traveling,
        state=new_state,
    )


def step(
    state: AccumulatorState,
    event: EventRecord,
    index: int,
    sink: WarningSink | None = None,
    params: AccumulatorParams = AccumulatorParams(),
) -> AccumulatorState:
    """Fold one event into the state and return the new state.

    Args:
        state: State after the previous event (or ``initial_state``).
        event: The current event.
        index: Position of ``event`` in the filtered sequence; 0 is the first.
        sink: Receives inconsistent-chain warnings. Defaults to logging.
        params: Accumulation parameters.

    Returns:
        A new AccumulatorState; ``state`` is left untouched.
    """

    return _apply(state, event, index, sink, params).state


def iter_steps(
    events: Iterable[EventRecord],
    query_start: datetime,
    sink: WarningSink | None = None,
    params: AccumulatorParams = AccumulatorParams(),
) -> Iterator[StepRecord]:
    """Yield a StepRecord per event, in order.

    ``events`` must already be filtered to one subject and sorted.
    """

    state = initial_state(query_start)
    for index, event in enumerate(events):
        record = _apply(state, event, index, sink, params)
        state = record.state
        yield record


def accumulate(
    events: Iterable[EventRecord],
    query_start: datetime,
    sink: WarningSink | None = None,
    params: AccumulatorParams = AccumulatorParams(),
) -> CaregivingTotals:
    """Fold an ordered event sequence into caregiving and travelling minutes.

    Nothing is counted between the last event and the end of the window.
    """

    state = initial_state(query_start)
    for index, event in enumerate(events):
        state = step(state, event, index, sink, params)
    return CaregivingTotals(
        caregiving_minutes=state.caregiving_minutes,
        traveling_minutes=state.traveling_minutes,
    )
