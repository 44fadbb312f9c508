"""Custom exceptions used across multiple layers.

Rules:
- Only put exceptions here if they need to be raised in one layer and caught in another.
- Expected runtime failures (I/O, parsing, registration conflicts) never raise;
  they degrade to a fallback value and a log line.
"""

from __future__ import annotations


class StateManagerError(Exception):
    """Raised when a state manager cannot be constructed in a usable shape."""
