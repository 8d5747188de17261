"""Utilities for serialising engine values into API payloads."""

from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Sequence

from app.utils.time_windows import format_utc
from core.pitr.calendar import AllowedRange
from core.pitr.validator import ValidationResult


def instant_to_payload(value: Optional[dt.datetime]) -> Optional[str]:
    return format_utc(value) if value is not None else None


def validation_to_payload(result: ValidationResult) -> Dict:
    """Serialise a ValidationResult with canonical UTC strings."""
    return {
        "is_valid": result.is_valid,
        "message": result.message,
        "code": result.code,
        "nearest_before": instant_to_payload(result.nearest_before),
        "nearest_after": instant_to_payload(result.nearest_after),
    }


def ranges_to_payload(ranges: Sequence[AllowedRange]) -> List[Dict[str, str]]:
    return [{"min": format_utc(item.min), "max": format_utc(item.max)} for item in ranges]
