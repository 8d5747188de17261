"""Summaries of a timeline for badges and headers."""

from __future__ import annotations

from core.pitr.timeline import Timeline

STATUS_CONTINUOUS = "continuous"
STATUS_SEGMENTED = "segmented"
STATUS_UNAVAILABLE = "unavailable"


def window_status(timeline: Timeline) -> str:
    if timeline.is_empty:
        return STATUS_UNAVAILABLE
    if len(timeline) == 1:
        return STATUS_CONTINUOUS
    return STATUS_SEGMENTED


def window_span_label(timeline: Timeline) -> str:
    """Length of the overall window in whole days, hours, or minutes."""
    bounds = timeline.bounds
    if bounds is None:
        return "N/A"
    seconds = int(bounds.duration.total_seconds())
    days = seconds // 86400
    if days >= 1:
        return f"{days} days"
    hours = seconds // 3600
    if hours >= 1:
        return f"{hours} hours"
    return f"{seconds // 60} mins"
