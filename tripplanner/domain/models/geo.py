from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")

    @staticmethod
    def parse(lat_raw: str, lon_raw: str) -> "GeoPoint":
        # Stop files may use a decimal comma (e.g. "-42,7689").
        lat = float(lat_raw.strip().replace(",", "."))
        lon = float(lon_raw.strip().replace(",", "."))
        return GeoPoint(lat=lat, lon=lon)
