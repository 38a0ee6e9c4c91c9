from __future__ import annotations

import heapq
import logging
import time
from collections import Counter
from dataclasses import dataclass
from typing import Iterator

from tripplanner.domain.algorithms.graph import TransitGraph
from tripplanner.domain.algorithms.timetable import next_departure
from tripplanner.domain.exceptions import SearchBoundExceeded
from tripplanner.domain.models import Itinerary, RouteQuery, Segment
from tripplanner.domain.models.clock import (
    SECONDS_PER_DAY,
    seconds_of_day,
    time_of_day,
    weekday_after,
)

logger = logging.getLogger(__name__)

SegmentPattern = tuple[tuple[str | None, int, int], ...]


@dataclass(frozen=True, slots=True)
class SearchOptions:
    """Bounds and policies for a route search.

    - max_results: number of distinct itineraries to collect
    - max_segments: rides + walks allowed in one itinerary
    - horizon_s: maximum elapsed time (wait + travel) from the ready time
    - max_labels_per_stop: how many partial paths may leave a single stop
    - max_expansions / time_budget_s: ceilings that abort the search
    - wrap_days: roll over to the next day's first departure when a line has
      no departure left on the current day
    """

    max_results: int = 5
    max_segments: int = 5
    horizon_s: int = 2 * SECONDS_PER_DAY
    max_labels_per_stop: int = 5
    max_expansions: int = 200_000
    time_budget_s: float | None = None
    wrap_days: bool = True

    def __post_init__(self) -> None:
        for name in (
            "max_results",
            "max_segments",
            "horizon_s",
            "max_labels_per_stop",
            "max_expansions",
        ):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive")
        if self.time_budget_s is not None and self.time_budget_s <= 0:
            raise ValueError("time_budget_s must be positive")


@dataclass(frozen=True, slots=True)
class _Label:
    """Partial itinerary: the traveller is at `stop`, ready at `clock_s`."""

    stop: int
    clock_s: int
    segments: tuple[Segment, ...]
    visited: frozenset[int]
    last_line: str | None = None
    rides: int = 0

    @property
    def transfers(self) -> int:
        return max(0, self.rides - 1)


def _pattern(segments: tuple[Segment, ...]) -> SegmentPattern:
    return tuple(
        (s.line.code if s.line else None, s.first_stop.code, s.last_stop.code)
        for s in segments
    )


def _service_day(query: RouteQuery, clock_s: int) -> int:
    return weekday_after(query.day_of_week, clock_s // SECONDS_PER_DAY)


def _expand(
    graph: TransitGraph, label: _Label, query: RouteQuery, options: SearchOptions
) -> Iterator[_Label]:
    here = graph.stop(label.stop)

    for edge in graph.walks_from(label.stop):
        if edge.destination in label.visited:
            continue
        segment = Segment(
            line=None,
            stops=(here, graph.stop(edge.destination)),
            departure=time_of_day(label.clock_s),
            duration_s=edge.duration_s,
            day_of_week=_service_day(query, label.clock_s),
        )
        yield _Label(
            stop=edge.destination,
            clock_s=label.clock_s + edge.duration_s,
            segments=label.segments + (segment,),
            visited=label.visited | {edge.destination},
            rides=label.rides,
        )

    for boarding in graph.boardings_at(label.stop):
        line = boarding.line
        # Getting off and back on the same line never helps.
        if line.code == label.last_line:
            continue

        offsets = graph.line_offsets(line.code)
        departure = next_departure(
            line,
            query.day_of_week,
            label.clock_s,
            offsets[boarding.index],
            wrap=options.wrap_days,
        )
        if departure is None:
            continue

        board_clock = departure.board_clock_s
        wait_s = board_clock - label.clock_s
        covered = [here]
        visited = set(label.visited)

        # One segment per alighting stop, each spanning the whole ride so far.
        for j in range(boarding.index + 1, len(line.stops)):
            code = line.stops[j]
            if code in visited:
                break
            covered.append(graph.stop(code))
            visited.add(code)

            ride_s = offsets[j] - offsets[boarding.index]
            segment = Segment(
                line=line,
                stops=tuple(covered),
                departure=time_of_day(board_clock),
                duration_s=ride_s,
                wait_s=wait_s,
                day_of_week=_service_day(query, board_clock),
            )
            yield _Label(
                stop=code,
                clock_s=board_clock + ride_s,
                segments=label.segments + (segment,),
                visited=frozenset(visited),
                last_line=line.code,
                rides=label.rides + 1,
            )


def find_routes(
    graph: TransitGraph, query: RouteQuery, options: SearchOptions | None = None
) -> list[Itinerary]:
    """Bounded best-first search for itineraries from origin to destination.

    Partial itineraries are expanded in order of elapsed time since the ready
    time, then transfers so far, then segment count and discovery order, so
    completed itineraries come out in their final ranking. Only one itinerary
    is kept per segment pattern (same lines, boarding and alighting stops);
    later copies of a pattern are just later buses.

    Returns an empty list when origin and destination are the same stop or
    when nothing reaches the destination within the bounds.

    Raises:
        InvalidQuery: missing values or a day outside 1..7.
        UnknownStop: origin or destination not in the graph.
        SearchBoundExceeded: the expansion or wall-clock ceiling was hit.
    """

    options = options or SearchOptions()
    query.validate()

    origin = graph.stop(query.origin)
    destination = graph.stop(query.destination)
    if origin.code == destination.code:
        return []

    if not graph.is_reachable(origin.code, destination.code):
        logger.debug("Stop %s is not reachable from %s", destination, origin)
        return []

    start_clock = seconds_of_day(query.ready_time)
    deadline = (
        time.monotonic() + options.time_budget_s
        if options.time_budget_s
        else None
    )

    heap: list[tuple[int, int, int, int, _Label]] = [
        (0, 0, 0, 0, _Label(origin.code, start_clock, (), frozenset({origin.code})))
    ]
    counter = 1
    settled: Counter[int] = Counter()
    seen: set[SegmentPattern] = set()
    results: list[Itinerary] = []
    expansions = 0

    while heap and len(results) < options.max_results:
        elapsed, _, _, _, label = heapq.heappop(heap)

        if label.stop == destination.code:
            pattern = _pattern(label.segments)
            if pattern in seen:
                continue
            seen.add(pattern)
            results.append(
                Itinerary(
                    segments=label.segments,
                    ready_time=query.ready_time,
                    day_of_week=query.day_of_week,
                    elapsed_s=elapsed,
                )
            )
            continue

        if settled[label.stop] >= options.max_labels_per_stop:
            continue
        settled[label.stop] += 1

        expansions += 1
        if expansions > options.max_expansions or (
            deadline is not None and time.monotonic() > deadline
        ):
            logger.warning(
                "Search %s -> %s aborted after %d expansions (%d found)",
                origin.code,
                destination.code,
                expansions - 1,
                len(results),
            )
            raise SearchBoundExceeded(
                f"Search from {origin.code} to {destination.code} exceeded its bound",
                expansions=expansions - 1,
                found=len(results),
            )

        for nxt in _expand(graph, label, query, options):
            nxt_elapsed = nxt.clock_s - start_clock
            if nxt_elapsed > options.horizon_s:
                continue
            # Only the destination may be reached on the last allowed segment.
            if (
                nxt.stop != destination.code
                and len(nxt.segments) >= options.max_segments
            ):
                continue
            heapq.heappush(
                heap,
                (nxt_elapsed, nxt.transfers, len(nxt.segments), counter, nxt),
            )
            counter += 1

    logger.debug(
        "Search %s -> %s on day %d at %s: %d itineraries, %d expansions",
        origin.code,
        destination.code,
        query.day_of_week,
        query.ready_time,
        len(results),
        expansions,
    )

    results.sort(key=lambda it: (it.elapsed_s, it.transfers))
    return results
