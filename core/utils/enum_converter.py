"""
Enum conversion utilities.

Provides standardized methods for converting between enums and strings,
with support for case-insensitive parsing and fallback defaults.
"""

import logging
from typing import Any, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_enum(
    value: Any,
    enum_class: Type[T],
    default: Optional[T],
    normalize: bool = False,
    warn: bool = False,
) -> Optional[T]:
    """
    Parse value to enum with fallback to default.

    Unifies enum parsing across transform kinds, edge methods and color schemes.

    Args:
        value: Value to parse (string, enum, or None)
        enum_class: Enum class to parse to
        default: Value returned if parsing fails (may be None)
        normalize: Whether to lowercase string before parsing
            (for case-insensitive matching)
        warn: Whether to log a warning when a non-None value is not a member
            and the default is returned

    Returns:
        Parsed enum value or default

    Example:
        >>> kind = parse_enum("SOBEL", TransformKind, None, normalize=True)
        >>> # Returns TransformKind.SOBEL for "sobel", "Sobel", "SOBEL"
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    # None or missing value
    if value is None:
        return default

    # String value - try to parse
    try:
        str_value = value.lower() if normalize else value
        return enum_class(str_value)
    except (ValueError, AttributeError):
        if warn:
            logger.warning(
                f"Unknown {enum_class.__name__} {value!r}, falling back to {enum_to_string(default)}"
            )
        return default


def enum_to_string(value: Any) -> str:
    """
    Convert enum to string value, or pass through if already string.

    Args:
        value: Enum instance or string

    Returns:
        String value (enum.value if enum, otherwise the value itself)

    Example:
        >>> enum_to_string(TransformKind.CANNY)
        >>> # Returns "canny"
    """
    return value.value if hasattr(value, "value") else value
