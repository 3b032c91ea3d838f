"""
Utility modules for core functionality.

Modules:
- decorators: Timing helpers (timer, log_timing)
- enum_converter: Enum parsing and conversion
"""

from .decorators import log_timing, timer
from .enum_converter import enum_to_string, parse_enum

__all__ = [
    "timer",
    "log_timing",
    "parse_enum",
    "enum_to_string",
]
