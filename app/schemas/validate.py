from __future__ import annotations

from datetime import date
from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import PitrWindowDescriptor, ValidationPayload

TimeField = Optional[Union[int, float, str]]


class ValidateRequest(BaseModel):
    window: PitrWindowDescriptor
    target_time: Optional[str] = Field(None, description="Explicit timestamp; wins over day/time fields")
    day: Optional[date] = Field(None, description="UTC calendar day picked in the date picker")
    hour: TimeField = 0
    minute: TimeField = 0
    second: TimeField = 0

    @model_validator(mode="after")
    def ensure_candidate(self) -> "ValidateRequest":
        if self.target_time is None and self.day is None:
            raise ValueError("Provide either target_time or a day to validate")
        return self


class ValidateResponse(BaseModel):
    target_time: Optional[str]
    result: ValidationPayload
