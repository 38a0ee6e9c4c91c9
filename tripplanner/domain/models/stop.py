from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class Stop:
    code: int
    address: str
    location: GeoPoint

    @property
    def latitude(self) -> float:
        return self.location.lat

    @property
    def longitude(self) -> float:
        return self.location.lon

    def __str__(self) -> str:
        return f"{self.code} {self.address}"
