"""Report schemas"""

import enum
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import parse_date


class ReportType(str, enum.Enum):
    FINANCIAL = "financial"
    BOOKINGS = "bookings"
    CLIENTS = "clients"
    SERVICES = "services"


class ReportRequest(BaseModel):
    type: ReportType
    name: Optional[str] = None
    startDate: Optional[str] = None
    endDate: Optional[str] = None

    @field_validator("startDate", "endDate")
    @classmethod
    def validate_dates(cls, v):
        if v:
            parse_date(v)
        return v
