"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim a free-text field; blank strings are stored as NULL"""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Normalize an optional email address.

    Raises:
        ValueError: If the address is present but malformed
    """
    email = clean_optional(email)
    if email is None:
        return None
    email = email.lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email address")
    return email
