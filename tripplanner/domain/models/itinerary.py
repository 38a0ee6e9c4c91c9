from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time

from .clock import seconds_of_day, time_of_day
from .line import Line
from .stop import Stop


@dataclass(frozen=True, slots=True)
class Segment:
    """One leg of an itinerary.

    A ride covers every stop from boarding to alighting; a walk has exactly its
    two endpoints and no line. `wait_s` is the time spent at the first stop
    before `departure`.
    """

    line: Line | None
    stops: tuple[Stop, ...]
    departure: time
    duration_s: int
    wait_s: int = 0
    day_of_week: int | None = None

    def __post_init__(self) -> None:
        if len(self.stops) < 2:
            raise ValueError("A segment needs at least two stops")
        if self.duration_s < 0 or self.wait_s < 0:
            raise ValueError("Segment durations must be non-negative")

    @property
    def is_walk(self) -> bool:
        return self.line is None

    @property
    def first_stop(self) -> Stop:
        return self.stops[0]

    @property
    def last_stop(self) -> Stop:
        return self.stops[-1]

    @property
    def arrival(self) -> time:
        return time_of_day(seconds_of_day(self.departure) + self.duration_s)


@dataclass(frozen=True, slots=True)
class Itinerary:
    segments: tuple[Segment, ...]
    ready_time: time
    day_of_week: int
    elapsed_s: int = field(default=0)

    def __post_init__(self) -> None:
        if not self.segments:
            raise ValueError("An itinerary needs at least one segment")

    @property
    def origin(self) -> Stop:
        return self.segments[0].first_stop

    @property
    def destination(self) -> Stop:
        return self.segments[-1].last_stop

    @property
    def departure(self) -> time:
        return self.segments[0].departure

    @property
    def arrival(self) -> time:
        return self.segments[-1].arrival

    @property
    def rides(self) -> tuple[Segment, ...]:
        return tuple(s for s in self.segments if not s.is_walk)

    @property
    def transfers(self) -> int:
        return max(0, len(self.rides) - 1)

    @property
    def total_wait_s(self) -> int:
        return sum(s.wait_s for s in self.segments)

    @property
    def total_travel_s(self) -> int:
        return sum(s.duration_s for s in self.segments)

    @property
    def lines(self) -> tuple[str | None, ...]:
        return tuple(s.line.code if s.line else None for s in self.segments)
