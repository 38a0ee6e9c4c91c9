from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass

from tripplanner.domain.models.clock import (
    SECONDS_PER_DAY,
    seconds_of_day,
    time_of_day,
    weekday_after,
)
from tripplanner.domain.models.line import Line


@dataclass(frozen=True, slots=True)
class Departure:
    """A resolved boarding opportunity.

    Clocks are seconds since midnight of the query day; they exceed 86400 on
    later service days and are negative for the previous day's service.
    """

    board_clock_s: int
    first_stop_clock_s: int
    service_day_offset: int


def next_departure(
    line: Line,
    day: int,
    ready_clock_s: int,
    offset_s: int,
    *,
    wrap: bool = True,
) -> Departure | None:
    """Earliest departure of `line` reaching a stop at or after `ready_clock_s`.

    `offset_s` is the ride time from the line's first stop to the boarding
    stop, so the bus must leave the first stop no earlier than
    `ready_clock_s - offset_s`. That instant may fall on the previous service
    day when the rider is ready just after midnight.

    With `wrap` the lookup rolls over to the following day's departures when
    none are left; without it nothing later than the query day is returned.
    """

    required = ready_clock_s - offset_s
    first_day = required // SECONDS_PER_DAY
    last_day = max(first_day, 0) + 1 if wrap else 0

    for k in range(first_day, last_day + 1):
        times = line.departures_on(weekday_after(day, k))
        if not times:
            continue

        if k == first_day:
            idx = bisect_left(times, time_of_day(required))
        else:
            idx = 0
        if idx >= len(times):
            continue

        first_stop_clock = k * SECONDS_PER_DAY + seconds_of_day(times[idx])
        return Departure(
            board_clock_s=first_stop_clock + offset_s,
            first_stop_clock_s=first_stop_clock,
            service_day_offset=k,
        )

    return None
