from __future__ import annotations

from datetime import time

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class StopSchema(BaseModel):
    code: int
    address: str
    location: GeoPointSchema


class LineSchema(BaseModel):
    code: str
    name: str
    stops: list[int] = []
    departures: dict[int, list[time]] = {}


class SegmentSchema(BaseModel):
    mode: str
    line: str | None = None
    stops: list[int]
    day_of_week: int | None = None
    departure: time
    arrival: time
    wait_s: int
    duration_s: int


class ItinerarySchema(BaseModel):
    origin: int
    destination: int
    departure: time
    arrival: time
    transfers: int
    total_wait_s: int
    total_travel_s: int
    elapsed_s: int
    elapsed: str
    segments: list[SegmentSchema] = []


class RouteRequestSchema(BaseModel):
    origin: int
    destination: int
    day_of_week: int = Field(..., ge=1, le=7)
    ready_time: time
    max_results: int | None = Field(default=None, ge=1, le=50)


class RoutesResponseSchema(BaseModel):
    itineraries: list[ItinerarySchema] = []
    summary: list[str] = []


class ReloadResponseSchema(BaseModel):
    stops: int
    lines: int
