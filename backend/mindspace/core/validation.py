"""Input Validation - Checks applied to user input before it is stored.

All functions are pure: same input always produces same output, no side effects.
"""

import html
import re
from datetime import date

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")
_NAME_RE = re.compile(r"[A-Za-z -]{2,20}")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def validate_entry_date(value: str, today: date) -> str:
    """Check that an entry date is a real YYYY-MM-DD date, not in the future.

    Args:
        value: Date string supplied by the user
        today: The current date

    Returns:
        The date string unchanged

    Raises:
        ValueError: If the format is wrong, the date does not exist,
            or it is after today
    """
    if not value or not _DATE_RE.fullmatch(value):
        raise ValueError("Date must be in YYYY-MM-DD format")

    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Not a calendar date: {value}")

    if parsed > today:
        raise ValueError("Cannot log entries for future dates")

    return value


def sanitize_input(text: str) -> str:
    """Trim text and HTML-escape the characters < > & " '."""
    return html.escape(text.strip(), quote=True)


def validate_name(value: str | None) -> str:
    """Check a display name: 2 to 20 letters, spaces or hyphens.

    Returns:
        The trimmed name

    Raises:
        ValueError: If the name is missing or has other characters
    """
    name = (value or "").strip()
    if not _NAME_RE.fullmatch(name):
        raise ValueError("Name must be 2-20 letters, spaces or hyphens")
    return name


def validate_email(value: str | None) -> str:
    """Check that an address looks like local@domain.tld.

    Returns:
        The trimmed, lower-cased address

    Raises:
        ValueError: If the address is missing or malformed
    """
    email = (value or "").strip().lower()
    if not _EMAIL_RE.fullmatch(email):
        raise ValueError("Valid email is required")
    return email
