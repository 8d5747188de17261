"""Timestamp parsing and time-window primitives for PITR recovery windows.

Backup subsystems report recovery boundaries as text in a handful of shapes:
fully qualified ISO-8601 strings, and naive strings that differ only in the
date/time separator.  Recovery windows are a server-side UTC concept, so every
naive timestamp is interpreted as UTC and never as local time.  Parsing never
raises: unrecognised text yields ``None`` and callers decide what that means.
"""

from __future__ import annotations

import datetime as dt
import enum
import re
from dataclasses import dataclass
from typing import Optional

_DATE_TIME = r"(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
_OFFSET_PATTERN = re.compile(_DATE_TIME + r"(Z|[+-]\d{2}:\d{2})")
_SPACE_NAIVE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:\.\d+)?")
_T_NAIVE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?")
_NAIVE_PATTERN = re.compile(_DATE_TIME)


class TimestampShape(str, enum.Enum):
    """Textual shapes a recovery timestamp may arrive in, in priority order."""

    OFFSET = "offset"
    SPACE_NAIVE = "space_naive"
    T_NAIVE = "t_naive"
    OTHER = "other"


def classify_timestamp(text: str) -> TimestampShape:
    """Return the shape of ``text`` without attempting to parse it."""
    if text.endswith("Z") or re.search(r"[+-]\d{2}:\d{2}$", text):
        return TimestampShape.OFFSET
    if _SPACE_NAIVE_PATTERN.fullmatch(text):
        return TimestampShape.SPACE_NAIVE
    if _T_NAIVE_PATTERN.fullmatch(text):
        return TimestampShape.T_NAIVE
    return TimestampShape.OTHER


def ensure_utc(value: dt.datetime) -> dt.datetime:
    """Normalise a datetime so that it is explicitly expressed in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def truncate_to_millis(value: dt.datetime) -> dt.datetime:
    """Drop sub-millisecond precision; recovery instants have ms resolution."""
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def _millis(fraction: Optional[str]) -> int:
    if not fraction:
        return 0
    return int(fraction[:3].ljust(3, "0"))


def _build(match: "re.Match[str]", tzinfo: dt.tzinfo) -> dt.datetime:
    year, month, day, hour, minute, second = (int(match.group(i)) for i in range(1, 7))
    return dt.datetime(
        year,
        month,
        day,
        hour,
        minute,
        second,
        _millis(match.group(7)) * 1000,
        tzinfo=tzinfo,
    )


def _parse_offset(text: str) -> Optional[dt.datetime]:
    match = _OFFSET_PATTERN.fullmatch(text)
    if match is None:
        # Offset-bearing text in a shape we do not model (e.g. no seconds).
        return _parse_other(text)
    marker = match.group(8)
    if marker == "Z":
        tzinfo: dt.tzinfo = dt.timezone.utc
    else:
        sign = 1 if marker[0] == "+" else -1
        hours, minutes = int(marker[1:3]), int(marker[4:6])
        if hours > 23 or minutes > 59:
            return None
        tzinfo = dt.timezone(sign * dt.timedelta(hours=hours, minutes=minutes))
    return _build(match, tzinfo).astimezone(dt.timezone.utc)


def _parse_naive(text: str) -> Optional[dt.datetime]:
    match = _NAIVE_PATTERN.fullmatch(text)
    if match is None:
        return None
    return _build(match, dt.timezone.utc)


def _parse_other(text: str) -> Optional[dt.datetime]:
    try:
        parsed = dt.datetime.fromisoformat(text)
    except ValueError:
        return None
    return ensure_utc(parsed)


_PARSERS = {
    TimestampShape.OFFSET: _parse_offset,
    TimestampShape.SPACE_NAIVE: _parse_naive,
    TimestampShape.T_NAIVE: _parse_naive,
    TimestampShape.OTHER: _parse_other,
}


def parse_timestamp(text: Optional[str]) -> Optional[dt.datetime]:
    """Parse recovery-window text into a UTC datetime, or ``None``.

    Explicit ``Z`` or ``+HH:MM``/``-HH:MM`` offsets are honoured; the naive
    ``YYYY-MM-DD HH:MM:SS`` and ``YYYY-MM-DDTHH:MM:SS`` shapes (with optional
    fraction) are taken as UTC.  Anything else goes to the ISO parser as-is.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None
    try:
        parsed = _PARSERS[classify_timestamp(text)](text)
    except (ValueError, OverflowError):
        return None
    if parsed is None:
        return None
    return truncate_to_millis(parsed)


def format_utc(value: dt.datetime) -> str:
    """Render ``YYYY-MM-DDTHH:MM:SS.mmmZ``, the canonical restore-request form."""
    value = ensure_utc(value)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


@dataclass(frozen=True)
class TimeWindow:
    """Closed interval ``[start, end]`` of recoverable instants."""

    start: dt.datetime
    end: dt.datetime

    @property
    def duration(self) -> dt.timedelta:
        return self.end - self.start

    def contains(self, instant: dt.datetime) -> bool:
        """Return True when ``instant`` lies inside the window, bounds included."""
        return self.start <= instant <= self.end

    def intersects(self, other: "TimeWindow") -> bool:
        """Return True when two closed windows share at least one instant."""
        return self.start <= other.end and other.start <= self.end

    def intersection(self, other: "TimeWindow") -> Optional["TimeWindow"]:
        """Return the shared segment between windows, or None when disjoint."""
        if not self.intersects(other):
            return None
        return TimeWindow(start=max(self.start, other.start), end=min(self.end, other.end))


def make_window(start: dt.datetime, end: dt.datetime) -> Optional[TimeWindow]:
    """Build a UTC-aligned window, or None when ``start`` is after ``end``."""
    start = ensure_utc(start)
    end = ensure_utc(end)
    if start > end:
        return None
    return TimeWindow(start=start, end=end)
