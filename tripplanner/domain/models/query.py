from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from tripplanner.domain.exceptions import InvalidQuery

from .line import DAYS_OF_WEEK


@dataclass(frozen=True, slots=True)
class RouteQuery:
    origin: int | None
    destination: int | None
    day_of_week: int
    ready_time: time | None

    def validate(self) -> None:
        if self.origin is None or self.destination is None:
            raise InvalidQuery("origin and destination are required")
        if self.ready_time is None:
            raise InvalidQuery("ready_time is required")
        if self.day_of_week not in DAYS_OF_WEEK:
            raise InvalidQuery(
                f"day_of_week must be between 1 and 7, got {self.day_of_week}"
            )
