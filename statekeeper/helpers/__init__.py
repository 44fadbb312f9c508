"""
Helpers package.

Stdlib-only utilities (pure or thin I/O wrappers) shared by all layers.
"""

from .exceptions import StateManagerError
from .files import atomic_write_text, create_or_touch, delete_if_exists, read_first_line
from .time_helper import Clock, FixedClock, format_time_ns

__all__ = [
    "Clock",
    "FixedClock",
    "StateManagerError",
    "atomic_write_text",
    "create_or_touch",
    "delete_if_exists",
    "format_time_ns",
    "read_first_line",
]
