"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

from ..domain.scheduling.availability import InvalidTimeFormat, minutes_to_time, time_to_minutes


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number to digits with an optional leading ``+``.

    Raises:
        ValueError: If the number doesn't have 10-15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)

    if not 10 <= len(digits) <= 15:
        raise ValueError("Phone number must contain 10 to 15 digits")

    return f"+{digits}" if phone.startswith("+") else digits


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string"""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValueError("Invalid date format. Use YYYY-MM-DD") from None


def normalize_time(value: str) -> str:
    """Validate a time of day and return it zero-padded as HH:MM"""
    try:
        return minutes_to_time(time_to_minutes(value))
    except InvalidTimeFormat:
        raise ValueError("Invalid time format. Use HH:MM") from None
