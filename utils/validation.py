"""
Input validation utilities for reminder form data.
"""

import re
from typing import Optional

from utils.exceptions import ValidationError

_POSITIVE_INT_PATTERN = re.compile(r"^[0-9]+$")


def sanitize_text(text: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize user input text.

    Args:
        text: Input text
        max_length: Optional maximum length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Remove control characters except newlines and tabs
    sanitized = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]', '', str(text))
    sanitized = sanitized.strip()

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized


def parse_time_value(value: str) -> int:
    """
    Parse the raw time value entered by the user.

    Only plain decimal digits are accepted, so "2.5", "-3" and "1e3"
    are rejected rather than truncated.

    Args:
        value: Raw input string

    Returns:
        Positive integer magnitude

    Raises:
        ValidationError: If the value is not a positive integer
    """
    cleaned = str(value).strip() if value is not None else ""
    if not _POSITIVE_INT_PATTERN.match(cleaned):
        raise ValidationError(f"Not a positive integer: {value!r}")

    try:
        number = int(cleaned)
    except ValueError:
        # more digits than the interpreter will convert
        raise ValidationError(f"Time value too large: {len(cleaned)} digits") from None
    if number <= 0:
        raise ValidationError(f"Time value must be positive: {value!r}")
    return number

