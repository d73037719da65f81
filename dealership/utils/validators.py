# dealership/utils/validators.py
"""Input checks shared by checkout, moderation and user management."""

import re
from typing import Optional

NAME_RE = re.compile(r"^[a-zA-ZÀ-ÿ\s'-]+$")
DIGITS_RE = re.compile(r"^[0-9]+$")
MIN_PHONE_DIGITS = 8


def is_valid_name(value: Optional[str]) -> bool:
    """Letters only (accented Latin included), spaces, apostrophes and hyphens."""
    return bool(value) and NAME_RE.match(value) is not None


def clean_phone(value: str) -> str:
    """Strip every character outside ASCII 0-9."""
    return re.sub(r"[^0-9]", "", value or "")


def is_valid_phone(value: Optional[str]) -> bool:
    return len(clean_phone(value)) >= MIN_PHONE_DIGITS


def is_digits(value: Optional[str]) -> bool:
    return bool(value) and DIGITS_RE.match(value.strip()) is not None


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
