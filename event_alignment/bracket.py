"""
Event-to-sample bracketing.

Experiment messages ('trial 3 start', 'stimulus on', ...) are sparse and
irregular; gaze samples are dense and regular. To analyse gaze per trial,
every sample needs to know which message came last and which comes next.

For each sample time t the bracket is the pair of adjacent events

    prior.timestamp <= t < post.timestamp

- A sample that coincides with an event takes that event as its prior
- Samples before the first event have no prior
- Samples at or after the last event have no post

Engineering approach:
- Both inputs are sorted, so a single forward cursor over the events is
  enough (O(n + m) instead of a binary search per sample)
- Sortedness and unique event timestamps are preconditions and are not
  re-checked inside the loop
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, Union

from table_assembly.accumulator import MISSING, Cell, TableAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """
    Timestamped message.

    Attributes:
        timestamp: Event time (same clock as the sample times)
        message: Message text
    """
    timestamp: Union[int, float]
    message: str


@dataclass
class EventBrackets:
    """
    Four parallel columns, one entry per sample.

    Attributes:
        prior_message: Message of the last event at or before the sample ('' if none)
        prior_time: Timestamp of that event (MISSING if none)
        post_message: Message of the first event after the sample ('' if none)
        post_time: Timestamp of that event (MISSING if none)
    """
    prior_message: List[str] = field(default_factory=list)
    prior_time: List[Cell] = field(default_factory=list)
    post_message: List[str] = field(default_factory=list)
    post_time: List[Cell] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.prior_message)

    def emit(
        self,
        prior: Optional[Event],
        post: Optional[Event]
    ) -> None:
        """Append one sample's bracket; None leaves that side empty."""
        self.prior_message.append(prior.message if prior else "")
        self.prior_time.append(prior.timestamp if prior else MISSING)
        self.post_message.append(post.message if post else "")
        self.post_time.append(post.timestamp if post else MISSING)


@dataclass(frozen=True)
class BracketColumnNames:
    """Resolved column names for the four bracket columns."""
    prior_time: str = "prior message timestamp"
    prior_message: str = "prior message"
    post_time: str = "post message timestamp"
    post_message: str = "post message"


def as_events(items: Sequence[Any]) -> List[Event]:
    """Accept Event objects or (timestamp, message) pairs."""
    events = []
    for item in items:
        if isinstance(item, Event):
            events.append(item)
        else:
            timestamp, message = item
            events.append(Event(timestamp=timestamp, message=message))
    return events


def bracket_events(
    events: Sequence[Union[Event, Tuple[Any, str]]],
    sample_times: Sequence[Union[int, float]]
) -> EventBrackets:
    """
    Find the surrounding events for every sample.

    Args:
        events: Events sorted by timestamp, no duplicate timestamps
        sample_times: Sample timestamps sorted ascending

    Returns:
        EventBrackets with len(sample_times) entries per column

    Example:
        events = [(10, 'A'), (20, 'B'), (30, 'C')]
        samples = [5, 15, 25, 35]
        -> prior_message ['', 'A', 'B', 'C'], post_message ['A', 'B', 'C', '']
    """
    events = as_events(events)
    brackets = EventBrackets()

    if not events:
        logger.warning("No events to bracket; all brackets left empty")
        for _ in sample_times:
            brackets.emit(None, None)
        return brackets

    last = len(events) - 1
    cursor: Optional[int] = None

    for sample_time in sample_times:
        if cursor is None:
            if sample_time < events[0].timestamp:
                brackets.emit(None, events[0])
                continue
            cursor = 0

        while cursor < last and events[cursor + 1].timestamp <= sample_time:
            cursor += 1

        if cursor == last:
            brackets.emit(events[cursor], None)
        else:
            brackets.emit(events[cursor], events[cursor + 1])

    logger.debug(f"Bracketed {len(brackets)} samples against {len(events)} events")
    return brackets


def attach_event_brackets(
    accumulator: TableAccumulator,
    table_id: str,
    brackets: EventBrackets,
    names: BracketColumnNames = BracketColumnNames()
) -> None:
    """
    Append the four bracket columns to a table.

    Raises:
        ShapeError: propagated from the accumulator
    """
    accumulator.append(table_id, names.prior_time, brackets.prior_time)
    accumulator.append(table_id, names.prior_message, brackets.prior_message)
    accumulator.append(table_id, names.post_time, brackets.post_time)
    accumulator.append(table_id, names.post_message, brackets.post_message)
