"""Time utility helpers."""

from __future__ import annotations

import time


def format_time_ns(epoch_ns: int) -> str:
    """
    Format an epoch timestamp as ISO-8601 (UTC) with nanosecond precision.

    Example:
        >>> format_time_ns(1_700_000_000_123_456_789)
        '2023-11-14T22:13:20.123456789'
    """
    seconds, nanos = divmod(epoch_ns, 1_000_000_000)
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(seconds)) + f".{nanos:09d}"


class Clock:
    """Wall clock used for report timestamps and heartbeat mtimes."""

    def now_ns(self) -> int:
        return time.time_ns()

    def now_ms(self) -> int:
        return self.now_ns() // 1_000_000

    def format_now(self) -> str:
        """Current time rendered by format_time_ns()."""
        return format_time_ns(self.now_ns())


class FixedClock(Clock):
    """Clock frozen at a given instant. Advance it explicitly with advance_ms()."""

    def __init__(self, epoch_ns: int) -> None:
        self._epoch_ns = epoch_ns

    def now_ns(self) -> int:
        return self._epoch_ns

    def advance_ms(self, millis: int) -> None:
        self._epoch_ns += millis * 1_000_000
