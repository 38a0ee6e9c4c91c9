from __future__ import annotations

from datetime import time
from typing import Callable, Iterable

import pytest

from tripplanner.domain.algorithms.graph import TransitGraph, build_graph
from tripplanner.domain.models import (
    Edge,
    EdgeKind,
    GeoPoint,
    Line,
    Stop,
    TransitNetwork,
)


def make_stop(code: int) -> Stop:
    return Stop(
        code=code,
        address=f"Stop {code}",
        location=GeoPoint(lat=-42.76 - code / 1000, lon=-65.03),
    )


def make_line(
    code: str, stops: Iterable[int], departures: dict[int, Iterable[str]]
) -> Line:
    """`departures` maps day of week to "HH:MM" strings."""

    return Line(
        code=code,
        name=f"Line {code}",
        stops=tuple(stops),
        departures={
            day: tuple(time.fromisoformat(t) for t in times)
            for day, times in departures.items()
        },
    )


def make_network(
    stops: Iterable[int],
    lines: Iterable[Line] = (),
    rides: Iterable[tuple[int, int, int]] = (),
    walks: Iterable[tuple[int, int, int]] = (),
) -> TransitNetwork:
    edges: dict = {}
    for origin, destination, seconds in rides:
        edge = Edge(origin, destination, seconds, EdgeKind.RIDE)
        edges[edge.key] = edge
    for origin, destination, seconds in walks:
        edge = Edge(origin, destination, seconds, EdgeKind.WALK)
        edges[edge.key] = edge
        edges[edge.mirrored().key] = edge.mirrored()

    return TransitNetwork(
        stops_by_code={code: make_stop(code) for code in stops},
        lines_by_code={line.code: line for line in lines},
        edges_by_key=edges,
    )


@pytest.fixture
def network_factory() -> Callable[..., TransitNetwork]:
    return make_network


@pytest.fixture
def line_factory() -> Callable[..., Line]:
    return make_line


@pytest.fixture
def transfer_graph() -> TransitGraph:
    """Lines 10 (1-2-3) and 20 (4-5), with a 120 s walk between 3 and 4.

    Line 10 leaves stop 1 at 10:00 and 10:30 on Mondays; line 20 leaves stop 4
    at 10:15 and 10:45.
    """

    return build_graph(
        make_network(
            stops=[1, 2, 3, 4, 5],
            lines=[
                make_line("10", [1, 2, 3], {1: ["10:00", "10:30"]}),
                make_line("20", [4, 5], {1: ["10:15", "10:45"]}),
            ],
            rides=[(1, 2, 300), (2, 3, 300), (4, 5, 600)],
            walks=[(3, 4, 120)],
        )
    )
