"""Conversions for tick-integrated rusage memory fields.

``ru_ixrss``, ``ru_idrss`` and ``ru_isrss`` are reported as kilobytes
multiplied by the clock ticks the process ran for. Dividing by the tick rate
and by the CPU seconds used gives an approximate average size in KB.
"""

from __future__ import annotations

import os


def clock_ticks_per_second() -> int:
    """Return the configured scheduler tick rate (``_SC_CLK_TCK``)."""
    return os.sysconf("SC_CLK_TCK")


def cpu_time_divisor(user_seconds: int, system_seconds: int) -> int:
    """
    Seconds used to average the tick-integrated sizes.

    This is user time minus system time, not their sum. Anything below one
    second counts as one second.
    """
    total_time = user_seconds - system_seconds
    if total_time < 1:
        total_time = 1
    return total_time


def find_mem_tick_size(total_time: int, size: int, ticks_per_second: int | None = None) -> int:
    """
    Convert a KB * ticks quantity into KB.

    Args:
        total_time: CPU seconds divisor, see ``cpu_time_divisor``.
        size: Raw tick-integrated field from getrusage.
        ticks_per_second: Tick rate; defaults to the host's ``SC_CLK_TCK``.
    """
    if ticks_per_second is None:
        ticks_per_second = clock_ticks_per_second()
    return int(size) // ticks_per_second // total_time
