"""Tests for the slot availability engine."""

from datetime import date

import pytest

from salon_api.domain.scheduling.availability import (
    AvailabilityResult,
    ExistingBooking,
    InvalidTimeFormat,
    SlotGrid,
    compute_available_slots,
    effective_duration,
    generate_time_slots,
    is_slot_blocked,
    minutes_to_time,
    time_to_minutes,
)

DAY = date(2030, 5, 15)

FULL_GRID = [
    "09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
    "12:00", "12:30", "13:00", "13:30", "14:00", "14:30",
    "15:00", "15:30", "16:00", "16:30", "17:00", "17:30",
]


def _without(*slots: str) -> list[str]:
    return [s for s in FULL_GRID if s not in slots]


class TestTimeConversion:
    def test_time_to_minutes(self):
        assert time_to_minutes("00:00") == 0
        assert time_to_minutes("09:30") == 570
        assert time_to_minutes("9:30") == 570
        assert time_to_minutes("23:59") == 1439

    def test_minutes_to_time_is_zero_padded(self):
        assert minutes_to_time(540) == "09:00"
        assert minutes_to_time(1050) == "17:30"

    @pytest.mark.parametrize("value", ["", "10", "ab:cd", "10:5", "24:00", "12:60", "10:00:00", None, 600])
    def test_malformed_time_raises(self, value):
        with pytest.raises(InvalidTimeFormat):
            time_to_minutes(value)

    def test_invalid_time_format_is_value_error(self):
        with pytest.raises(ValueError) as exc_info:
            time_to_minutes("noon")
        assert exc_info.value.value == "noon"


class TestGrid:
    def test_default_grid(self):
        assert generate_time_slots() == FULL_GRID

    def test_custom_bounds(self):
        assert generate_time_slots(10, 12, 60) == ["10:00", "11:00"]

    def test_step_must_be_positive(self):
        with pytest.raises(ValueError):
            generate_time_slots(9, 18, 0)

    def test_effective_duration_fallback(self):
        assert effective_duration(None) == 60
        assert effective_duration(0) == 60
        assert effective_duration(-15) == 60
        assert effective_duration(45) == 45


class TestSlotBlocking:
    def test_exact_start_collision(self):
        assert is_slot_blocked(600, 30, 600, 60, 30)

    def test_inside_buffered_window(self):
        # 10:00 booking for 60 min blocks until 11:30
        assert is_slot_blocked(660, 30, 600, 60, 30)
        assert not is_slot_blocked(690, 30, 600, 60, 30)

    def test_requested_service_reaching_into_booking(self):
        assert is_slot_blocked(570, 90, 630, 60, 30)

    def test_slot_ending_exactly_at_booking_start_is_free(self):
        assert not is_slot_blocked(570, 30, 600, 60, 30)


class TestComputeAvailableSlots:
    def test_empty_day_returns_full_grid(self):
        result = compute_available_slots(DAY, 60, [])
        assert result.all_slots == FULL_GRID
        assert result.available_slots == FULL_GRID

    def test_grid_is_independent_of_bookings(self):
        bookings = [ExistingBooking("09:00", 60), ExistingBooking("13:00", 120)]
        result = compute_available_slots(DAY, 60, bookings)
        assert result.all_slots == FULL_GRID
        assert len(result.all_slots) == 18

    @pytest.mark.parametrize("duration", [15, 30, 60, 180])
    def test_exact_collision_is_excluded(self, duration):
        result = compute_available_slots(DAY, 30, [ExistingBooking("10:00", duration)])
        assert "10:00" not in result.available_slots

    def test_buffer_excludes_following_slots(self):
        result = compute_available_slots(DAY, 30, [ExistingBooking("10:00", 60)])
        assert result.available_slots == _without("10:00", "10:30", "11:00")

    def test_long_request_cannot_reach_into_next_booking(self):
        result = compute_available_slots(DAY, 90, [ExistingBooking("10:30", 60)])
        assert "09:30" not in result.available_slots
        assert "10:00" not in result.available_slots
        # 09:00 + 90 min ends exactly at 10:30
        assert "09:00" in result.available_slots
        assert "12:00" in result.available_slots

    def test_cancelled_bookings_are_ignored(self):
        bookings = [
            ExistingBooking("10:00", 60, status="cancelled"),
            ExistingBooking("14:00", 120, status="cancelled"),
        ]
        result = compute_available_slots(DAY, 60, bookings)
        assert result.available_slots == FULL_GRID

    def test_missing_duration_matches_sixty_minutes(self):
        booked = [ExistingBooking("12:00", None)]
        explicit = [ExistingBooking("12:00", 60)]
        assert compute_available_slots(DAY, None, booked) == compute_available_slots(DAY, 60, explicit)
        assert compute_available_slots(DAY, 0, booked) == compute_available_slots(DAY, 60, explicit)

    def test_identical_inputs_give_identical_results(self):
        bookings = [ExistingBooking("11:00", 45), ExistingBooking("15:30", 90, status="confirmed")]
        first = compute_available_slots(DAY, 60, bookings)
        second = compute_available_slots(DAY, 60, bookings)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_available_slots_keep_grid_order(self):
        result = compute_available_slots(DAY, 60, [ExistingBooking("13:00", 60)])
        assert result.available_slots == sorted(result.available_slots)
        assert set(result.available_slots) <= set(result.all_slots)

    def test_late_slot_blocked_by_following_booking(self):
        # 16:00 + 60 min would run into a 16:30 booking
        result = compute_available_slots(DAY, 60, [ExistingBooking("16:30", 60)])
        assert "16:00" not in result.available_slots
        assert "15:30" in result.available_slots
        assert result.available_slots[-1] == "15:30"

    def test_custom_grid(self):
        grid = SlotGrid(start_hour=10, end_hour=12, step_minutes=30, buffer_minutes=0, default_duration=30)
        result = compute_available_slots(DAY, None, [ExistingBooking("10:30", None)], grid)
        assert result.all_slots == ["10:00", "10:30", "11:00", "11:30"]
        assert result.available_slots == ["10:00", "11:00", "11:30"]

    def test_malformed_booking_time_raises(self):
        with pytest.raises(InvalidTimeFormat):
            compute_available_slots(DAY, 60, [ExistingBooking("10h00", 60)])

    def test_wire_payload(self):
        result = AvailabilityResult(all_slots=["09:00", "09:30"], available_slots=["09:30"])
        assert result.to_dict() == {"allSlots": ["09:00", "09:30"], "availableSlots": ["09:30"]}
