from __future__ import annotations

from datetime import time

SECONDS_PER_DAY = 86400


def seconds_of_day(t: time) -> int:
    return t.hour * 3600 + t.minute * 60 + t.second


def time_of_day(clock_s: int) -> time:
    """Convert a clock (seconds from some midnight, any sign) to a time of day."""

    s = int(clock_s) % SECONDS_PER_DAY
    return time(hour=s // 3600, minute=(s % 3600) // 60, second=s % 60)


def weekday_after(day: int, offset_days: int) -> int:
    # 1=Monday .. 7=Sunday, cyclic in both directions.
    return (day - 1 + offset_days) % 7 + 1
