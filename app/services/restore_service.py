"""Assemble PITR restore request bodies for a validated recovery instant."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, Optional

from app.schemas.common import PitrWindowDescriptor
from app.schemas.restore import PitrRestoreRequest
from app.services.window_service import timeline_for
from app.utils.payloads import instant_to_payload
from app.utils.time_windows import format_utc, parse_timestamp
from app.utils.tracing import traced_span
from core.pitr.timeline import Timeline
from core.pitr.validator import validate_text

logger = logging.getLogger(__name__)


class PitrValidationError(Exception):
    """Raised when a restore is requested for a non-recoverable instant."""

    def __init__(
        self,
        message: str,
        code: str,
        requested_target_time: str,
        timeline: Timeline,
        nearest_before: Optional[dt.datetime] = None,
        nearest_after: Optional[dt.datetime] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.requested_target_time = requested_target_time
        self.nearest_before = nearest_before
        self.nearest_after = nearest_after
        self.earliest_pitr_time = timeline.earliest
        self.latest_pitr_time = timeline.latest

    def to_dict(self) -> Dict:
        return {
            "message": self.message,
            "code": self.code,
            "requestedTargetTime": self.requested_target_time,
            "nearestBefore": instant_to_payload(self.nearest_before),
            "nearestAfter": instant_to_payload(self.nearest_after),
            "earliestPitrTime": instant_to_payload(self.earliest_pitr_time),
            "latestPitrTime": instant_to_payload(self.latest_pitr_time),
        }


def build_restore_request(window: PitrWindowDescriptor, restore: PitrRestoreRequest) -> Dict:
    """Return the restore body, or raise PitrValidationError for a bad target."""
    with traced_span("pitr.build_restore_request"):
        timeline = timeline_for(window)
        result = validate_text(restore.target_time, timeline)
        if not result.is_valid:
            logger.info("Rejecting PITR restore to %s: %s", restore.target_time, result.code)
            raise PitrValidationError(
                result.message or "Target time is not recoverable",
                result.code,
                restore.target_time,
                timeline,
                nearest_before=result.nearest_before,
                nearest_after=result.nearest_after,
            )
        body = restore.model_dump(by_alias=True, exclude_none=True)
        body["targetTime"] = format_utc(parse_timestamp(restore.target_time))
        return body
