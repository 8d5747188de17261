from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.common import PitrWindowDescriptor


class CalendarRequest(BaseModel):
    window: PitrWindowDescriptor
    month: Optional[date] = Field(None, description="Any day in the displayed month; defaults to the latest window month")
    selected_day: Optional[date] = None
    today: Optional[date] = None


class CalendarDay(BaseModel):
    date: int
    in_month: bool
    in_range: bool
    is_selected: bool
    is_today: bool


class AllowedRangePayload(BaseModel):
    min: str
    max: str


class CalendarResponse(BaseModel):
    month: date
    month_label: str
    can_go_previous: bool
    can_go_next: bool
    days: List[CalendarDay]
    selected_day: Optional[date] = None
    allowed_ranges: List[AllowedRangePayload]
    allowed_ranges_label: Optional[str] = None
