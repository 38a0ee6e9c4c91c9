from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import time

from tripplanner.app.ports.output import ITransitRepository
from tripplanner.domain.algorithms.graph import TransitGraph, build_graph
from tripplanner.domain.algorithms.search import SearchOptions, find_routes
from tripplanner.domain.exceptions import NetworkNotLoaded
from tripplanner.domain.models import Itinerary, Line, RouteQuery, Stop

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RoutePlannerService:
    """Application service (use case) for itinerary search.

    Owns the published graph snapshot. Queries capture the snapshot once and
    never see a half-built graph: `reload` assembles a new graph off to the
    side and swaps the reference under a lock.
    """

    repository: ITransitRepository
    options: SearchOptions = field(default_factory=SearchOptions)
    auto_load: bool = True

    _graph: TransitGraph | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False
    )

    def reload(self) -> TransitGraph:
        network = self.repository.load_network()
        # GraphIntegrityError propagates; the previous snapshot stays published.
        graph = build_graph(network)
        with self._lock:
            self._graph = graph
        logger.info(
            "Published network snapshot with %d stops and %d lines",
            len(graph.stops_by_code),
            len(graph.lines_by_code),
        )
        return graph

    @property
    def snapshot(self) -> TransitGraph:
        graph = self._graph
        if graph is not None:
            return graph
        if not self.auto_load:
            raise NetworkNotLoaded("No transit network has been loaded")
        return self.reload()

    def find_routes(
        self,
        *,
        origin: int | None,
        destination: int | None,
        day_of_week: int,
        ready_time: time | None,
        max_results: int | None = None,
    ) -> list[Itinerary]:
        graph = self.snapshot
        options = self.options
        if max_results is not None:
            options = replace(options, max_results=max_results)

        query = RouteQuery(
            origin=origin,
            destination=destination,
            day_of_week=day_of_week,
            ready_time=ready_time,
        )
        return find_routes(graph, query, options)

    def stops(self) -> tuple[Stop, ...]:
        graph = self.snapshot
        return tuple(graph.stops_by_code[c] for c in sorted(graph.stops_by_code))

    def lines(self) -> tuple[Line, ...]:
        graph = self.snapshot
        return tuple(graph.lines_by_code[c] for c in sorted(graph.lines_by_code))
