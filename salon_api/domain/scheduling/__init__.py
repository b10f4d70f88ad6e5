"""Scheduling domain - slot availability and the daily schedule view"""

from .availability import (
    AvailabilityResult,
    ExistingBooking,
    InvalidTimeFormat,
    SlotGrid,
    compute_available_slots,
    generate_time_slots,
    time_to_minutes,
)

__all__ = [
    "AvailabilityResult",
    "ExistingBooking",
    "InvalidTimeFormat",
    "SlotGrid",
    "compute_available_slots",
    "generate_time_slots",
    "time_to_minutes",
]
