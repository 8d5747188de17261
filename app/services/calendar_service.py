"""Month grid rendering for the PITR date picker.

The grid itself is presentation: six Sunday-first weeks with padding days from
the neighbouring months.  Every flag on a cell comes from the pure predicates
in :mod:`core.pitr.calendar`.
"""

from __future__ import annotations

import calendar
import datetime as dt
from typing import Dict, List, Optional

from app.deps import get_app_state
from app.schemas.calendar import CalendarRequest
from app.services.window_service import timeline_for
from app.utils.payloads import ranges_to_payload
from app.utils.tracing import traced_span
from core.pitr.calendar import (
    allowed_ranges_for_day,
    allowed_ranges_label,
    can_go_next,
    can_go_previous,
    first_of_month,
    is_day_within_window,
    shift_month,
)
from core.pitr.timeline import Timeline


def _padding_cell(day: int) -> Dict:
    return {"date": day, "in_month": False, "in_range": False, "is_selected": False, "is_today": False}


def month_grid(
    month: dt.date,
    timeline: Timeline,
    selected_day: Optional[dt.date],
    today: dt.date,
    cells: int = 42,
) -> List[Dict]:
    """Return the cells for ``month``; padding cells are never in range."""
    first = first_of_month(month)
    _, days_in_month = calendar.monthrange(first.year, first.month)
    # Sunday-first: date.weekday() is Monday=0
    lead = (first.weekday() + 1) % 7
    previous = shift_month(first, -1)
    _, days_in_previous = calendar.monthrange(previous.year, previous.month)

    days: List[Dict] = [_padding_cell(days_in_previous - i) for i in range(lead - 1, -1, -1)]
    for number in range(1, days_in_month + 1):
        current = first.replace(day=number)
        days.append(
            {
                "date": number,
                "in_month": True,
                "in_range": is_day_within_window(current, timeline),
                "is_selected": current == selected_day,
                "is_today": current == today,
            }
        )
    days.extend(_padding_cell(number) for number in range(1, cells - len(days) + 1))
    return days


def _default_month(timeline: Timeline, today: dt.date) -> dt.date:
    if timeline.latest is not None:
        return first_of_month(timeline.latest.date())
    return first_of_month(today)


def render_calendar(payload: CalendarRequest) -> Dict:
    """Return the grid, navigation flags and the selected day's allowed ranges."""
    with traced_span("pitr.render_calendar"):
        timeline = timeline_for(payload.window)
        today = payload.today or dt.datetime.now(dt.timezone.utc).date()
        month = first_of_month(payload.month) if payload.month else _default_month(timeline, today)
        response: Dict = {
            "month": month,
            "month_label": f"{calendar.month_name[month.month]} {month.year}",
            "can_go_previous": can_go_previous(month, timeline),
            "can_go_next": can_go_next(month, timeline),
            "days": month_grid(month, timeline, payload.selected_day, today, get_app_state().grid_cells),
            "selected_day": payload.selected_day,
            "allowed_ranges": [],
            "allowed_ranges_label": None,
        }
        if payload.selected_day is not None:
            ranges = allowed_ranges_for_day(payload.selected_day, timeline)
            response["allowed_ranges"] = ranges_to_payload(ranges)
            response["allowed_ranges_label"] = allowed_ranges_label(ranges)
        return response
