from __future__ import annotations

from typing import Dict

from app.schemas.validate import ValidateRequest
from app.services.window_service import timeline_for
from app.utils.payloads import instant_to_payload, validation_to_payload
from app.utils.time_windows import parse_timestamp
from app.utils.tracing import traced_span
from core.pitr.validator import build_candidate, validate, validate_text


def validate_selection(payload: ValidateRequest) -> Dict:
    """Validate either an explicit timestamp or a picked day plus time-of-day."""
    with traced_span("pitr.validate_selection"):
        timeline = timeline_for(payload.window)
        if payload.target_time is not None:
            candidate = parse_timestamp(payload.target_time)
            result = validate_text(payload.target_time, timeline)
        else:
            candidate = build_candidate(payload.day, payload.hour, payload.minute, payload.second)
            result = validate(candidate, timeline)
        return {
            "target_time": instant_to_payload(candidate),
            "result": validation_to_payload(result),
        }
