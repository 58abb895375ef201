"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase, trimmed email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email


def parse_date(value: Optional[str]) -> date:
    """Parse YYYY-MM-DD; raises ValueError on anything else"""
    if not value:
        raise ValueError("Date is required")
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)"""
    parsed = datetime.strptime(value, "%Y-%m")
    return parsed.year, parsed.month


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return parse_date(value[:10])
