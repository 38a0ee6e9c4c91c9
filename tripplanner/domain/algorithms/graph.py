from __future__ import annotations

import logging
from dataclasses import dataclass

import networkx as nx

from tripplanner.domain.exceptions import GraphIntegrityError, UnknownStop
from tripplanner.domain.models import Edge, EdgeKind, Line, Stop, TransitNetwork

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Boarding:
    """A line that can be boarded at a stop, with the stop's index in its path."""

    line: Line
    index: int


@dataclass(frozen=True, slots=True)
class TransitGraph:
    """Read-only, query-ready snapshot of a transit network.

    The adjacency lives in a networkx MultiDiGraph whose nodes are stop codes
    and whose edge keys are `EdgeKind`s. Only RIDE edges owned by some line
    are part of it. Per-stop lookups are precomputed in stable (sorted) order.
    """

    stops_by_code: dict[int, Stop]
    lines_by_code: dict[str, Line]
    digraph: nx.MultiDiGraph
    walks_by_stop: dict[int, tuple[Edge, ...]]
    boardings_by_stop: dict[int, tuple[Boarding, ...]]
    offsets_by_line: dict[str, tuple[int, ...]]
    hops: dict[tuple[str, int], Edge]
    orphan_rides: tuple[Edge, ...] = ()

    def has_stop(self, code: int) -> bool:
        return code in self.stops_by_code

    def stop(self, code: int) -> Stop:
        try:
            return self.stops_by_code[code]
        except KeyError:
            raise UnknownStop(code) from None

    def walks_from(self, code: int) -> tuple[Edge, ...]:
        return self.walks_by_stop.get(code, ())

    def boardings_at(self, code: int) -> tuple[Boarding, ...]:
        return self.boardings_by_stop.get(code, ())

    def next_hop(self, line_code: str, code: int) -> Edge | None:
        return self.hops.get((line_code, code))

    def line_offsets(self, line_code: str) -> tuple[int, ...]:
        return self.offsets_by_line[line_code]

    def ride_seconds(self, line_code: str, start: int, end: int) -> int:
        offsets = self.offsets_by_line[line_code]
        return offsets[end] - offsets[start]

    def is_reachable(self, origin: int, destination: int) -> bool:
        """Static reachability over walks and line hops (ignores schedules)."""

        return nx.has_path(self.digraph, origin, destination)


def _check_edges(network: TransitNetwork) -> None:
    stops = network.stops_by_code
    edges = network.edges_by_key

    for key in sorted(edges):
        edge = edges[key]
        if edge.key != key:
            raise GraphIntegrityError(f"Edge stored under {key} has key {edge.key}")

        for code in (edge.origin, edge.destination):
            if code not in stops:
                raise GraphIntegrityError(
                    f"Edge {edge.origin}->{edge.destination} "
                    f"references unknown stop {code}"
                )

        if edge.kind == EdgeKind.WALK:
            mirror = edges.get((edge.destination, edge.origin, EdgeKind.WALK))
            if mirror is None:
                raise GraphIntegrityError(
                    f"Walking edge {edge.origin}->{edge.destination} has no mirror"
                )
            if mirror.duration_s != edge.duration_s:
                raise GraphIntegrityError(
                    f"Walking edge {edge.origin}<->{edge.destination} has asymmetric "
                    f"durations ({edge.duration_s}s vs {mirror.duration_s}s)"
                )


def build_graph(network: TransitNetwork) -> TransitGraph:
    """Validate `network` and assemble a `TransitGraph`.

    Raises `GraphIntegrityError` for dangling stop references, walking edges
    without a matching mirror, and line paths that repeat a stop or have a hop
    with no RIDE edge. The input network is never modified.
    """

    stops = network.stops_by_code
    edges = network.edges_by_key

    _check_edges(network)

    boardings: dict[int, list[Boarding]] = {}
    offsets_by_line: dict[str, tuple[int, ...]] = {}
    hops: dict[tuple[str, int], Edge] = {}
    owned: set[tuple[int, int, EdgeKind]] = set()

    for code in sorted(network.lines_by_code):
        line = network.lines_by_code[code]
        if line.code != code:
            raise GraphIntegrityError(
                f"Line stored under {code!r} has code {line.code!r}"
            )

        seen: set[int] = set()
        for stop_code in line.stops:
            if stop_code not in stops:
                raise GraphIntegrityError(
                    f"Line {code} references unknown stop {stop_code}"
                )
            if stop_code in seen:
                raise GraphIntegrityError(f"Line {code} visits stop {stop_code} twice")
            seen.add(stop_code)

        offsets = [0]
        for i, (a, b) in enumerate(zip(line.stops, line.stops[1:])):
            edge = edges.get((a, b, EdgeKind.RIDE))
            if edge is None:
                raise GraphIntegrityError(
                    f"Line {code} has no ride edge between stops {a} and {b}"
                )
            offsets.append(offsets[-1] + edge.duration_s)
            hops[(code, a)] = edge
            owned.add(edge.key)
            boardings.setdefault(a, []).append(Boarding(line=line, index=i))

        offsets_by_line[code] = tuple(offsets)

    digraph = nx.MultiDiGraph()
    digraph.add_nodes_from(sorted(stops))

    orphans: list[Edge] = []
    for key in sorted(edges):
        edge = edges[key]
        if edge.kind == EdgeKind.RIDE and key not in owned:
            orphans.append(edge)
            continue
        digraph.add_edge(edge.origin, edge.destination, key=edge.kind, edge=edge)

    if orphans:
        logger.warning(
            "Ignoring %d ride edges not served by any line (first: %s->%s)",
            len(orphans),
            orphans[0].origin,
            orphans[0].destination,
        )

    walks_by_stop: dict[int, tuple[Edge, ...]] = {}
    for code in digraph.nodes:
        walks = tuple(
            data["edge"]
            for _, _, kind, data in digraph.out_edges(code, keys=True, data=True)
            if kind == EdgeKind.WALK
        )
        if walks:
            walks_by_stop[code] = walks

    logger.info(
        "Transit graph assembled: %d stops, %d lines, %d edges (%d walking)",
        digraph.number_of_nodes(),
        len(offsets_by_line),
        digraph.number_of_edges(),
        sum(len(w) for w in walks_by_stop.values()),
    )

    return TransitGraph(
        stops_by_code=dict(stops),
        lines_by_code=dict(network.lines_by_code),
        digraph=digraph,
        walks_by_stop=walks_by_stop,
        boardings_by_stop={k: tuple(v) for k, v in boardings.items()},
        offsets_by_line=offsets_by_line,
        hops=hops,
        orphan_rides=tuple(orphans),
    )
