"""Service catalog schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class ServiceCreate(BaseModel):
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    price: float
    duration: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Service name must not be empty")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("Price must not be negative")
        return v

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("Duration must be a positive number of minutes")
        return v


class ServiceUpdate(ServiceCreate):
    """Full replacement of a service's fields"""


class ServiceResponse(BaseModel):
    id: int
    name: str
    category: Optional[str]
    description: Optional[str]
    price: float
    duration: Optional[int]
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
