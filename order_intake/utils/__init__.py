"""
Shared utilities and helpers.
"""

import re
from typing import Any, Optional


# Leading numeric prefix, e.g. "12.5 pcs" -> 12.5
_NUMBER_PREFIX = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def parse_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """
    Leniently parse a number from backend or form input.

    Accepts ints and floats as-is. For strings, the leading numeric prefix
    is used ("3 boxes" -> 3.0). Anything else, including None, empty strings,
    booleans and NaN/inf, yields the default.

    Args:
        value: Raw value
        default: Value returned when nothing parses

    Returns:
        Parsed float
    """
    if isinstance(value, bool) or value is None:
        return default

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if not match:
            return default
        number = float(match.group(0))
    else:
        return default

    # Reject NaN and infinities
    if number != number or number in (float("inf"), float("-inf")):
        return default
    return number
