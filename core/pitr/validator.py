"""Validate a chosen recovery instant against a merged PITR timeline."""

from __future__ import annotations

import bisect
import datetime as dt
import math
from dataclasses import dataclass
from typing import Any, Optional

from app.utils.time_windows import ensure_utc, format_utc, parse_timestamp
from core.pitr.timeline import Timeline

CODE_UNAVAILABLE = "PITR_UNAVAILABLE"
CODE_TARGET_BEFORE_EARLIEST = "PITR_TARGET_BEFORE_EARLIEST"
CODE_TARGET_AFTER_LATEST = "PITR_TARGET_AFTER_LATEST"
CODE_TARGET_IN_GAP = "PITR_TARGET_IN_GAP"
CODE_TARGET_NOT_RECOVERABLE = "PITR_TARGET_NOT_RECOVERABLE"

MESSAGE_UNAVAILABLE = "Point-in-time recovery is unavailable: no recoverable intervals"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a candidate; ``message`` is a user-facing advisory."""

    is_valid: bool
    message: Optional[str] = None
    code: Optional[str] = None
    nearest_before: Optional[dt.datetime] = None
    nearest_after: Optional[dt.datetime] = None


VALID = ValidationResult(is_valid=True)


def validate(candidate: dt.datetime, timeline: Timeline) -> ValidationResult:
    """Decide whether ``candidate`` is recoverable, interval bounds inclusive."""
    candidate = ensure_utc(candidate)
    if timeline.is_empty:
        return ValidationResult(is_valid=False, message=MESSAGE_UNAVAILABLE, code=CODE_UNAVAILABLE)

    earliest, latest = timeline.earliest, timeline.latest
    if candidate < earliest:
        return ValidationResult(
            is_valid=False,
            message=f"Selected time is before the earliest recoverable time ({format_utc(earliest)})",
            code=CODE_TARGET_BEFORE_EARLIEST,
            nearest_after=earliest,
        )
    if candidate > latest:
        return ValidationResult(
            is_valid=False,
            message=f"Selected time is after the latest recoverable time ({format_utc(latest)})",
            code=CODE_TARGET_AFTER_LATEST,
            nearest_before=latest,
        )

    starts = [window.start for window in timeline]
    idx = bisect.bisect_right(starts, candidate) - 1
    # idx >= 0 because candidate >= earliest
    if timeline[idx].contains(candidate):
        return VALID
    gap_start = timeline[idx].end
    gap_end = timeline[idx + 1].start
    return ValidationResult(
        is_valid=False,
        message=(
            "Selected time falls in a non-recoverable gap between "
            f"{format_utc(gap_start)} and {format_utc(gap_end)}"
        ),
        code=CODE_TARGET_IN_GAP,
        nearest_before=gap_start,
        nearest_after=gap_end,
    )


def validate_text(text: Optional[str], timeline: Timeline) -> ValidationResult:
    """Parse ``text`` and validate it; unparseable input is never recoverable."""
    candidate = parse_timestamp(text)
    if candidate is None and not timeline.is_empty:
        return ValidationResult(
            is_valid=False,
            message="Selected time could not be parsed",
            code=CODE_TARGET_NOT_RECOVERABLE,
        )
    if candidate is None:
        return ValidationResult(is_valid=False, message=MESSAGE_UNAVAILABLE, code=CODE_UNAVAILABLE)
    return validate(candidate, timeline)


def _clamp(value: Any, upper: int) -> int:
    """Coerce a time-of-day field into ``[0, upper]``; unusable input becomes 0."""
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return 0
    if isinstance(value, float):
        if math.isnan(value):
            return 0
        if math.isinf(value):
            return upper if value > 0 else 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(upper, number))


def build_candidate(day: dt.date, hour: Any = 0, minute: Any = 0, second: Any = 0) -> dt.datetime:
    """Assemble a UTC instant from a calendar day and clamped time-of-day fields."""
    return dt.datetime(
        day.year,
        day.month,
        day.day,
        _clamp(hour, 23),
        _clamp(minute, 59),
        _clamp(second, 59),
        tzinfo=dt.timezone.utc,
    )
