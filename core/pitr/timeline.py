"""Merge raw recovery intervals into a canonical PITR timeline.

Backup subsystems report one recovery range per physical backup chain.  Chains
overlap, arrive out of order, and abut with sub-second rounding noise, so the
raw list is parsed, filtered, sorted, and swept into a minimal set of closed
intervals.  The result is a value: callers rebuild it whenever their inputs
change and never mutate it.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from app.utils.time_windows import TimeWindow, format_utc, make_window, parse_timestamp

logger = logging.getLogger(__name__)

MERGE_TOLERANCE_MS = 1000


@dataclass(frozen=True)
class Timeline:
    """Sorted, non-overlapping recovery intervals; empty means PITR unavailable."""

    intervals: Tuple[TimeWindow, ...] = ()

    def __iter__(self) -> Iterator[TimeWindow]:
        return iter(self.intervals)

    def __len__(self) -> int:
        return len(self.intervals)

    def __getitem__(self, index: int) -> TimeWindow:
        return self.intervals[index]

    @property
    def is_empty(self) -> bool:
        return not self.intervals

    @property
    def earliest(self) -> Optional[dt.datetime]:
        return self.intervals[0].start if self.intervals else None

    @property
    def latest(self) -> Optional[dt.datetime]:
        return self.intervals[-1].end if self.intervals else None

    @property
    def bounds(self) -> Optional[TimeWindow]:
        """Overall window from the first start to the last end."""
        if not self.intervals:
            return None
        return TimeWindow(start=self.intervals[0].start, end=self.intervals[-1].end)


def _raw_bounds(raw: Any) -> Tuple[Optional[str], Optional[str]]:
    """Pull start/end text out of a dict, a model-like object, or a pair."""
    if isinstance(raw, dict):
        start = raw.get("startTime", raw.get("start_time"))
        end = raw.get("endTime", raw.get("end_time"))
        return start, end
    if isinstance(raw, (list, tuple)):
        if len(raw) != 2:
            return None, None
        return raw[0], raw[1]
    start = getattr(raw, "start_time", getattr(raw, "startTime", None))
    end = getattr(raw, "end_time", getattr(raw, "endTime", None))
    return start, end


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return None


def parse_intervals(raw_intervals: Iterable[Any]) -> List[TimeWindow]:
    """Parse raw intervals, dropping unparseable or inverted entries."""
    parsed: List[TimeWindow] = []
    for idx, raw in enumerate(raw_intervals):
        start_text, end_text = _raw_bounds(raw)
        start = parse_timestamp(_as_text(start_text))
        end = parse_timestamp(_as_text(end_text))
        if start is None or end is None:
            logger.debug("Dropping interval %d: unparseable bounds %r..%r", idx, start_text, end_text)
            continue
        window = make_window(start, end)
        if window is None:
            logger.debug("Dropping interval %d: start %s after end %s", idx, start_text, end_text)
            continue
        parsed.append(window)
    return parsed


def _fallback_window(earliest: Optional[str], latest: Optional[str]) -> Optional[TimeWindow]:
    start = parse_timestamp(earliest)
    end = parse_timestamp(latest)
    if start is None or end is None:
        return None
    return make_window(start, end)


def merge_windows(windows: Iterable[TimeWindow], tolerance_ms: int = MERGE_TOLERANCE_MS) -> Tuple[TimeWindow, ...]:
    """Sort windows by start and coalesce any that overlap or sit within tolerance."""
    tolerance = dt.timedelta(milliseconds=tolerance_ms)
    ordered = sorted(windows, key=lambda window: (window.start, window.end))
    merged: List[TimeWindow] = []
    for window in ordered:
        if merged and window.start <= merged[-1].end + tolerance:
            running = merged[-1]
            if window.end > running.end:
                merged[-1] = TimeWindow(start=running.start, end=window.end)
            continue
        merged.append(window)
    return tuple(merged)


def build_timeline(
    raw_intervals: Optional[Iterable[Any]],
    fallback_earliest: Optional[str] = None,
    fallback_latest: Optional[str] = None,
    tolerance_ms: int = MERGE_TOLERANCE_MS,
) -> Timeline:
    """Return the merged recovery timeline for the supplied raw intervals.

    The earliest/latest pair is a last resort: it is only consulted when no raw
    interval survives parsing, and it is never combined with API intervals.
    """
    windows = parse_intervals(raw_intervals or [])
    if not windows:
        fallback = _fallback_window(fallback_earliest, fallback_latest)
        if fallback is None:
            return Timeline()
        logger.debug("No usable intervals; using fallback window %s..%s", fallback_earliest, fallback_latest)
        windows = [fallback]
    return Timeline(intervals=merge_windows(windows, tolerance_ms))


def timeline_to_raw(timeline: Timeline) -> List[Dict[str, str]]:
    """Render a timeline back into ``startTime``/``endTime`` records."""
    return [{"startTime": format_utc(window.start), "endTime": format_utc(window.end)} for window in timeline]
