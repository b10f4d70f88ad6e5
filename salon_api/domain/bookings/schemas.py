"""Booking domain schemas"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import BookingStatus
from ...shared.validators import normalize_time, parse_date


class BookingCreate(BaseModel):
    serviceId: int
    date: str
    time: str
    comment: Optional[str] = None
    telegramNotification: bool = True

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        parse_date(v)
        return v

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return normalize_time(v)


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class AvailabilityResponse(BaseModel):
    allSlots: list[str]
    availableSlots: list[str]
