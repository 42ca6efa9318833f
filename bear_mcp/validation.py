"""Input validation helpers shared by the facade, CLI and MCP layers.

Canonical helpers:
- ``sanitize_string``: string validation + control-char stripping
- ``sanitize_int``: bounded integer validation, NaN/bool rejection
- ``sanitize_list``: string array validation + null-item rejection
"""

import logging
import math
import re
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

MIN_LIMIT, MAX_LIMIT = 1, 100
MIN_DAYS, MAX_DAYS = 1, 365

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_string(
    value: Any, field_name: str, max_length: int = 1000, required: bool = True
) -> str:
    """Sanitize and validate string inputs.

    Args:
        value: The value to sanitize.
        field_name: Name of the field for error messages.
        max_length: Maximum allowed string length.
        required: If True, empty or whitespace-only strings are rejected.

    Returns:
        Sanitized string (control characters other than newline/tab removed).

    Raises:
        ValueError: If validation fails.
    """
    if value is None and not required:
        return ""

    if not isinstance(value, str):
        raise ValueError(f"{field_name} must be a string, got {type(value).__name__}")

    if required and not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"{field_name} too long (max {max_length} characters, got {len(value)})")

    return _CONTROL_CHARS.sub("", value)


def sanitize_int(
    value: Any,
    field_name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    default: Optional[int] = None,
) -> int:
    """Validate an integer within ``[min_val, max_val]``.

    Integral floats (``5.0``) are accepted; booleans, NaN and fractions are not.
    """
    if value is None:
        if default is not None:
            return default
        raise ValueError(f"{field_name} is required")

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{field_name} must be an integer, got {type(value).__name__}")

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"{field_name} must be a finite number, got {value}")
        if not value.is_integer():
            raise ValueError(f"{field_name} must be an integer, got {value}")
        value = int(value)

    if min_val is not None and value < min_val:
        raise ValueError(f"{field_name} must be >= {min_val}, got {value}")

    if max_val is not None and value > max_val:
        raise ValueError(f"{field_name} must be <= {max_val}, got {value}")

    return value


def sanitize_list(
    value: Any, field_name: str, item_max_length: int = 200, max_items: int = 50
) -> Optional[List[str]]:
    """Validate an optional list of strings. None stays None; empty items are dropped."""
    if value is None:
        return None

    if not isinstance(value, list):
        raise ValueError(f"{field_name} must be an array, got {type(value).__name__}")

    if len(value) > max_items:
        raise ValueError(f"{field_name} too many items (max {max_items}, got {len(value)})")

    if any(item is None for item in value):
        raise ValueError(f"{field_name} must not contain null items")

    sanitized = []
    for i, item in enumerate(value):
        cleaned = sanitize_string(item, f"{field_name}[{i}]", item_max_length, required=False)
        if cleaned.strip():
            sanitized.append(cleaned)
    return sanitized
