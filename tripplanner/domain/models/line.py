from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Mapping

DAYS_OF_WEEK = range(1, 8)


def _check_day(day: int) -> None:
    if day not in DAYS_OF_WEEK:
        raise ValueError(f"Invalid day of week: {day} (expected 1..7)")


@dataclass(frozen=True, slots=True)
class Line:
    """Scheduled transit line.

    `stops` is the ordered path of stop codes. `departures` maps a day of week
    (1=Monday .. 7=Sunday/holiday) to the departure times from the first stop.
    Departures are stored sorted so lookups can bisect them.
    """

    code: str
    name: str
    stops: tuple[int, ...] = ()
    departures: Mapping[int, tuple[time, ...]] = field(
        default_factory=dict, compare=False
    )

    def __post_init__(self) -> None:
        normalized: dict[int, tuple[time, ...]] = {}
        for day, times in self.departures.items():
            _check_day(day)
            normalized[day] = tuple(sorted(times))
        object.__setattr__(self, "stops", tuple(self.stops))
        object.__setattr__(self, "departures", normalized)

    def departures_on(self, day: int) -> tuple[time, ...]:
        _check_day(day)
        return self.departures.get(day, ())
