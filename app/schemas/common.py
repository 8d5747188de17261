from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PitrInterval(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")


class PitrWindowDescriptor(BaseModel):
    """Recovery window as reported by the backup subsystem."""

    model_config = ConfigDict(populate_by_name=True)

    available: bool = False
    earliest_pitr_time: Optional[str] = Field(None, alias="earliestPitrTime")
    latest_pitr_time: Optional[str] = Field(None, alias="latestPitrTime")
    intervals: List[PitrInterval] = Field(default_factory=list)
    status: Optional[str] = None
    unavailable_reason: Optional[str] = Field(None, alias="unavailableReason")


class ValidationPayload(BaseModel):
    is_valid: bool
    message: Optional[str] = None
    code: Optional[str] = None
    nearest_before: Optional[str] = None
    nearest_after: Optional[str] = None
