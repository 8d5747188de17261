from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.schemas.calendar import CalendarRequest, CalendarResponse
from app.schemas.common import PitrWindowDescriptor
from app.schemas.restore import RestoreBuildRequest
from app.schemas.validate import ValidateRequest, ValidateResponse
from app.schemas.window import TimelineResponse
from app.services.calendar_service import render_calendar
from app.services.restore_service import PitrValidationError, build_restore_request
from app.services.validate_service import validate_selection
from app.services.window_service import describe_window

router = APIRouter(prefix="/pitr")


@router.post("/timeline", response_model=TimelineResponse)
def timeline_endpoint(payload: PitrWindowDescriptor) -> TimelineResponse:
    return TimelineResponse(**describe_window(payload))


@router.post("/validate", response_model=ValidateResponse)
def validate_endpoint(payload: ValidateRequest) -> ValidateResponse:
    return ValidateResponse(**validate_selection(payload))


@router.post("/calendar", response_model=CalendarResponse)
def calendar_endpoint(payload: CalendarRequest) -> CalendarResponse:
    return CalendarResponse(**render_calendar(payload))


@router.post("/restore-request")
def restore_request_endpoint(payload: RestoreBuildRequest) -> dict:
    try:
        return build_restore_request(payload.window, payload.restore)
    except PitrValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.to_dict(),
        ) from exc
