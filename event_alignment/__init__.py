"""
Event alignment: sparse timestamped messages -> dense sample time series.

Each sample gets the nearest event at or before it (prior) and the nearest
event strictly after it (post), so gaze data can be split by experiment
messages after export.
"""

from .bracket import (
    BracketColumnNames,
    Event,
    EventBrackets,
    as_events,
    attach_event_brackets,
    bracket_events
)

__all__ = [
    'BracketColumnNames',
    'Event',
    'EventBrackets',
    'as_events',
    'attach_event_brackets',
    'bracket_events',
]
