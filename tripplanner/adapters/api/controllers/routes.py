from __future__ import annotations

from fastapi import APIRouter, Depends

from tripplanner.adapters.api.dependencies import get_route_planner_service
from tripplanner.adapters.api.schemas.routes import (
    GeoPointSchema,
    ItinerarySchema,
    LineSchema,
    ReloadResponseSchema,
    RouteRequestSchema,
    RoutesResponseSchema,
    SegmentSchema,
    StopSchema,
)
from tripplanner.app.services.itinerary_summary import format_seconds, summarize
from tripplanner.app.services.route_planner_service import RoutePlannerService
from tripplanner.domain.models import Itinerary

router = APIRouter(tags=["routes"])


def _itinerary_to_schema(itinerary: Itinerary) -> ItinerarySchema:
    return ItinerarySchema(
        origin=itinerary.origin.code,
        destination=itinerary.destination.code,
        departure=itinerary.departure,
        arrival=itinerary.arrival,
        transfers=itinerary.transfers,
        total_wait_s=itinerary.total_wait_s,
        total_travel_s=itinerary.total_travel_s,
        elapsed_s=itinerary.elapsed_s,
        elapsed=format_seconds(itinerary.elapsed_s),
        segments=[
            SegmentSchema(
                mode="walk" if seg.is_walk else "bus",
                line=seg.line.code if seg.line else None,
                stops=[s.code for s in seg.stops],
                day_of_week=seg.day_of_week,
                departure=seg.departure,
                arrival=seg.arrival,
                wait_s=seg.wait_s,
                duration_s=seg.duration_s,
            )
            for seg in itinerary.segments
        ],
    )


@router.post("/routes", response_model=RoutesResponseSchema)
def calculate_routes(
    req: RouteRequestSchema,
    service: RoutePlannerService = Depends(get_route_planner_service),
) -> RoutesResponseSchema:
    itineraries = service.find_routes(
        origin=req.origin,
        destination=req.destination,
        day_of_week=req.day_of_week,
        ready_time=req.ready_time,
        max_results=req.max_results,
    )
    return RoutesResponseSchema(
        itineraries=[_itinerary_to_schema(it) for it in itineraries],
        summary=summarize(itineraries),
    )


@router.get("/stops", response_model=list[StopSchema])
def list_stops(
    service: RoutePlannerService = Depends(get_route_planner_service),
) -> list[StopSchema]:
    return [
        StopSchema(
            code=s.code,
            address=s.address,
            location=GeoPointSchema(lat=s.latitude, lon=s.longitude),
        )
        for s in service.stops()
    ]


@router.get("/lines", response_model=list[LineSchema])
def list_lines(
    service: RoutePlannerService = Depends(get_route_planner_service),
) -> list[LineSchema]:
    return [
        LineSchema(
            code=line.code,
            name=line.name,
            stops=list(line.stops),
            departures={d: list(t) for d, t in sorted(line.departures.items())},
        )
        for line in service.lines()
    ]


@router.post("/network/reload", response_model=ReloadResponseSchema)
def reload_network(
    service: RoutePlannerService = Depends(get_route_planner_service),
) -> ReloadResponseSchema:
    graph = service.reload()
    return ReloadResponseSchema(
        stops=len(graph.stops_by_code), lines=len(graph.lines_by_code)
    )
