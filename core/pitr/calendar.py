"""Day and month bounds for the PITR date picker.

Two notions are kept apart on purpose.  A day is *navigable* when it touches
the overall window (first start to last end), even if it sits wholly inside a
gap.  A time is *recoverable* only when it lies inside one interval; that is
decided by :mod:`core.pitr.validator`, not here.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import List, Sequence

from app.utils.time_windows import TimeWindow
from core.pitr.timeline import Timeline


@dataclass(frozen=True)
class AllowedRange:
    """Recoverable span clipped to a single UTC calendar day."""

    min: dt.datetime
    max: dt.datetime


def day_span(day: dt.date) -> TimeWindow:
    """Return ``[00:00:00, 23:59:59]`` UTC for ``day``."""
    start = dt.datetime(day.year, day.month, day.day, tzinfo=dt.timezone.utc)
    end = dt.datetime(day.year, day.month, day.day, 23, 59, 59, tzinfo=dt.timezone.utc)
    return TimeWindow(start=start, end=end)


def allowed_ranges_for_day(day: dt.date, timeline: Timeline) -> List[AllowedRange]:
    """Intersect every interval with the day's span; display only."""
    span = day_span(day)
    ranges: List[AllowedRange] = []
    for window in timeline:
        clipped = window.intersection(span)
        if clipped is not None:
            ranges.append(AllowedRange(min=clipped.start, max=clipped.end))
    return ranges


def is_day_within_window(day: dt.date, timeline: Timeline) -> bool:
    """True when the day touches the overall window bounds."""
    bounds = timeline.bounds
    if bounds is None:
        return False
    return day_span(day).intersects(bounds)


def first_of_month(value: dt.date) -> dt.date:
    return dt.date(value.year, value.month, 1)


def shift_month(month: dt.date, delta: int) -> dt.date:
    """Return the first day of the month ``delta`` months away from ``month``."""
    index = month.year * 12 + (month.month - 1) + delta
    return dt.date(index // 12, index % 12 + 1, 1)


def can_go_previous(month: dt.date, timeline: Timeline) -> bool:
    """Allow stepping back while the displayed month is after the earliest one."""
    if timeline.is_empty:
        return True
    return first_of_month(month) > first_of_month(timeline.earliest.date())


def can_go_next(month: dt.date, timeline: Timeline) -> bool:
    """Allow stepping forward while the displayed month is before the latest one."""
    if timeline.is_empty:
        return True
    return first_of_month(month) < first_of_month(timeline.latest.date())


def allowed_ranges_label(ranges: Sequence[AllowedRange]) -> str:
    """Human-readable summary such as ``00:00:00–06:30:00 UTC``."""
    if not ranges:
        return "No recoverable time on this day"
    parts = [f"{item.min:%H:%M:%S}–{item.max:%H:%M:%S}" for item in ranges]
    return ", ".join(parts) + " UTC"
