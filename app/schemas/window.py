from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from app.schemas.common import PitrInterval


class TimelineResponse(BaseModel):
    available: bool
    status: Optional[str] = None
    unavailable_reason: Optional[str] = None
    timeline_status: str
    earliest: Optional[str] = None
    latest: Optional[str] = None
    span_label: str
    intervals: List[PitrInterval]
