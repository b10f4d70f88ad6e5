"""
Slot Availability Engine

Computes which start times on the salon's daily grid can still be booked
for a service, given the bookings already placed on that day.

The engine is a pure function over its inputs: it performs no I/O, reads no
configuration and keeps no state. Callers resolve the requested service and
load the day's bookings first, then pass plain values in.

Algorithm:
    1. Build the grid of HH:MM start times from ``start_hour`` (inclusive) to
       ``end_hour`` (exclusive) in ``step_minutes`` increments.
    2. For each existing booking compute its blocked window
       ``[start, start + duration + buffer)``.
    3. Reject a candidate slot ``s`` when, for any booking:
        a. ``s`` equals the booking start, or
        b. ``s`` falls inside the blocked window, or
        c. the requested service ``[s, s + requested_duration)`` intersects
           the blocked window.
    4. Return the full grid and the surviving slots, both in grid order.

All arithmetic is in integer minutes since midnight; times are naive
salon-local values.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Union

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")

CANCELLED_STATUS = "cancelled"


class InvalidTimeFormat(ValueError):
    """Raised when a time-of-day value is not a valid HH:MM string"""

    def __init__(self, value):
        super().__init__(f"Invalid time format: {value!r}. Use HH:MM")
        self.value = value


@dataclass(frozen=True)
class SlotGrid:
    """Fixed daily grid and blocking policy"""

    start_hour: int = 9
    end_hour: int = 18
    step_minutes: int = 30
    buffer_minutes: int = 30
    default_duration: int = 60


@dataclass(frozen=True)
class ExistingBooking:
    """A booking already on the calendar, joined with its service duration"""

    time: str
    duration_minutes: Optional[int] = None
    status: str = "pending"


@dataclass(frozen=True)
class AvailabilityResult:
    all_slots: list[str]
    available_slots: list[str]

    def to_dict(self) -> dict:
        return {"allSlots": list(self.all_slots), "availableSlots": list(self.available_slots)}


def time_to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight"""
    if not isinstance(value, str):
        raise InvalidTimeFormat(value)
    match = _TIME_RE.match(value.strip())
    if not match:
        raise InvalidTimeFormat(value)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(value)
    return hours * 60 + minutes


def minutes_to_time(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def generate_time_slots(start_hour: int = 9, end_hour: int = 18, step_minutes: int = 30) -> list[str]:
    """Generate the daily grid, e.g. 09:00, 09:30, ... 17:30 for the defaults"""
    if step_minutes <= 0:
        raise ValueError("step_minutes must be positive")
    return [
        minutes_to_time(m) for m in range(start_hour * 60, end_hour * 60, step_minutes)
    ]


def effective_duration(duration: Optional[int], default: int = 60) -> int:
    """Missing, zero or negative durations fall back to ``default``"""
    if not duration or duration <= 0:
        return default
    return int(duration)


def is_slot_blocked(
    slot_start: int,
    requested_duration: int,
    booking_start: int,
    booking_duration: int,
    buffer_minutes: int,
) -> bool:
    """Check one candidate slot against one existing booking (all values in minutes)"""
    booking_end = booking_start + booking_duration + buffer_minutes

    if slot_start == booking_start:
        return True

    if booking_start <= slot_start < booking_end:
        return True

    # The requested service would run into the booking or its prep buffer
    return slot_start < booking_end and slot_start + requested_duration > booking_start


def compute_available_slots(
    target_date: Union[date, str],
    requested_duration: Optional[int],
    existing_bookings: Iterable[ExistingBooking],
    grid: SlotGrid = SlotGrid(),
) -> AvailabilityResult:
    """
    Compute bookable start times for one day.

    Args:
        target_date: the day being queried; only used as a label
        requested_duration: duration in minutes of the service being booked
        existing_bookings: the day's bookings; cancelled ones are ignored
        grid: grid bounds, step, buffer and default duration

    Returns:
        AvailabilityResult with the full grid and the available subset

    Raises:
        InvalidTimeFormat: if any booking carries a malformed time
    """
    all_slots = generate_time_slots(grid.start_hour, grid.end_hour, grid.step_minutes)
    requested = effective_duration(requested_duration, grid.default_duration)

    blocking = [
        (time_to_minutes(b.time), effective_duration(b.duration_minutes, grid.default_duration))
        for b in existing_bookings
        if b.status != CANCELLED_STATUS
    ]

    available_slots = []
    for slot in all_slots:
        slot_start = time_to_minutes(slot)
        if any(
            is_slot_blocked(slot_start, requested, start, duration, grid.buffer_minutes)
            for start, duration in blocking
        ):
            continue
        available_slots.append(slot)

    logger.debug(
        f"📊 Availability for {target_date}: {len(available_slots)}/{len(all_slots)} slots free "
        f"(service {requested} min, {len(blocking)} active bookings)"
    )
    return AvailabilityResult(all_slots=all_slots, available_slots=available_slots)
