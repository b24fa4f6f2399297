"""
Input Validators and Sanitizers

This module provides validation and coercion functions for user inputs.

Security Considerations:
- Length limits on content prevent storage abuse
- Paths shorter than the minimum never reach the database
"""

import math
import re
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def sanitize_path(path: str, min_length: int = 4) -> Optional[str]:
    """
    Validate a snippet path.

    Only empty or too-short paths are rejected; anything else is looked up
    as-is and simply comes back as not found if it does not exist.

    Args:
        path: The raw path segment from the request
        min_length: Shortest acceptable path

    Returns:
        The path if valid, None otherwise
    """
    if not path or not isinstance(path, str):
        return None

    if len(path) < min_length:
        return None

    return path


def content_byte_length(content: str) -> int:
    """Size of content in UTF-8 encoded bytes (not characters)."""
    return len(content.encode("utf-8"))


def coerce_ttl(
    value: Any,
    minimum: int = 60,
    maximum: int = 604800,
    default: int = 86400
) -> int:
    """
    Turn a requested lifetime into a clamped number of seconds.

    Mirrors integer parsing of loosely typed JSON input:
    - None, booleans and non-numeric strings fall back to the default
    - Strings use their leading integer ("120s" -> 120)
    - Floats are truncated toward zero
    - A value of zero also falls back to the default

    Examples:
        coerce_ttl(10) -> 60
        coerce_ttl(99999999) -> 604800
        coerce_ttl("abc") -> 86400
    """
    seconds: Optional[int] = None

    if isinstance(value, bool) or value is None:
        seconds = None
    elif isinstance(value, int):
        seconds = value
    elif isinstance(value, float):
        if math.isfinite(value):
            seconds = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            seconds = int(match.group(1))

    if not seconds:
        seconds = default

    return max(minimum, min(seconds, maximum))
