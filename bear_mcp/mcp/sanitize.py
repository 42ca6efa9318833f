"""Shared sanitization utilities for the MCP layer.

These functions provide input validation and sanitization
for all MCP tools to ensure consistent handling.
"""

from typing import Any, List, Optional

from bear_mcp.validation import sanitize_int, sanitize_list, sanitize_string  # noqa: F401


def sanitize_array(
    value: Any, field_name: str, item_max_length: int = 200, max_items: int = 50
) -> Optional[List[str]]:
    """Sanitize an optional array of strings.

    Args:
        value: The array to sanitize
        field_name: Name of the field for error messages
        item_max_length: Maximum length for each item
        max_items: Maximum number of items allowed

    Returns:
        List of sanitized strings (empty items removed), or None if absent

    Raises:
        ValueError: If validation fails
    """
    return sanitize_list(value, field_name, item_max_length, max_items)


def validate_bool(value: Any, field_name: str, default: bool = False) -> bool:
    """Validate an optional boolean flag.

    Raises:
        ValueError: If the value is present but not a boolean
    """
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean, got {type(value).__name__}")
    return value


def validate_number(
    value: Any,
    field_name: str,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
    default: Optional[int] = None,
) -> int:
    """Validate a bounded integer argument (limits, day windows)."""
    return sanitize_int(value, field_name, min_val, max_val, default)
