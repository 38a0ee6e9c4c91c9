from __future__ import annotations

from datetime import time
from itertools import count

import pytest

from tripplanner.app.services.itinerary_summary import summarize
from tripplanner.domain.algorithms import search
from tripplanner.domain.algorithms.graph import build_graph
from tripplanner.domain.algorithms.search import SearchOptions, find_routes
from tripplanner.domain.exceptions import (
    InvalidQuery,
    SearchBoundExceeded,
    UnknownStop,
)
from tripplanner.domain.models import RouteQuery

DAILY = range(1, 8)


def _single_ride_graph(network_factory, line_factory):
    return build_graph(
        network_factory(
            stops=[1, 2],
            lines=[line_factory("10", [1, 2], {d: ["08:00"] for d in DAILY})],
            rides=[(1, 2, 600)],
        )
    )


def test_direct_ride_boards_next_departure(network_factory, line_factory) -> None:
    graph = _single_ride_graph(network_factory, line_factory)

    result = find_routes(graph, RouteQuery(1, 2, 1, time(7, 50)))

    assert len(result) == 1
    itinerary = result[0]
    assert len(itinerary.segments) == 1
    seg = itinerary.segments[0]
    assert seg.line is not None and seg.line.code == "10"
    assert seg.departure == time(8, 0)
    assert seg.duration_s == 600
    assert seg.wait_s == 600
    assert itinerary.arrival == time(8, 10)
    assert itinerary.elapsed_s == 1200


def test_missed_departure_rolls_over_to_next_day(
    network_factory, line_factory
) -> None:
    graph = _single_ride_graph(network_factory, line_factory)

    result = find_routes(graph, RouteQuery(1, 2, 1, time(8, 5)))

    assert len(result) == 1
    seg = result[0].segments[0]
    assert seg.departure == time(8, 0)
    assert seg.day_of_week == 2
    # 23h55m waiting plus the 10 minute ride.
    assert result[0].elapsed_s == 86_100 + 600


def test_missed_departure_without_wrap_returns_nothing(
    network_factory, line_factory
) -> None:
    graph = _single_ride_graph(network_factory, line_factory)

    result = find_routes(
        graph, RouteQuery(1, 2, 1, time(8, 5)), SearchOptions(wrap_days=False)
    )

    assert result == []


def test_rollover_from_sunday_uses_monday_schedule(
    network_factory, line_factory
) -> None:
    graph = build_graph(
        network_factory(
            stops=[1, 2],
            lines=[line_factory("10", [1, 2], {1: ["06:00"]})],
            rides=[(1, 2, 60)],
        )
    )

    result = find_routes(graph, RouteQuery(1, 2, 7, time(22, 0)))

    assert [it.segments[0].day_of_week for it in result] == [1]
    assert result[0].elapsed_s == 8 * 3600 + 60


def test_walk_then_ride_accounts_for_wait(network_factory, line_factory) -> None:
    graph = build_graph(
        network_factory(
            stops=[1, 2, 3],
            lines=[line_factory("5", [2, 3], {1: ["09:00"]})],
            rides=[(2, 3, 900)],
            walks=[(1, 2, 300)],
        )
    )

    result = find_routes(graph, RouteQuery(1, 3, 1, time(8, 50)))

    assert len(result) == 1
    walk, ride = result[0].segments
    assert walk.is_walk
    assert walk.departure == time(8, 50)
    assert walk.duration_s == 300
    assert ride.wait_s == 300
    assert ride.departure == time(9, 0)
    assert result[0].arrival == time(9, 15)
    assert result[0].elapsed_s == 300 + 300 + 900


def test_parallel_lines_are_ranked_by_arrival(network_factory, line_factory) -> None:
    graph = build_graph(
        network_factory(
            stops=[1, 2],
            lines=[
                line_factory("A", [1, 2], {1: ["08:30"]}),
                line_factory("B", [1, 2], {1: ["08:10"]}),
            ],
            rides=[(1, 2, 600)],
        )
    )

    result = find_routes(graph, RouteQuery(1, 2, 1, time(8, 0)))

    assert [it.lines for it in result] == [("B",), ("A",)]
    assert result[0].departure == time(8, 10)
    assert result[1].departure == time(8, 30)


def test_line_is_chained_through_intermediate_stops(
    network_factory, line_factory
) -> None:
    graph = build_graph(
        network_factory(
            stops=[1, 2, 3, 4],
            lines=[line_factory("7", [1, 2, 3, 4], {3: ["12:00"]})],
            rides=[(1, 2, 60), (2, 3, 120), (3, 4, 180)],
        )
    )

    result = find_routes(graph, RouteQuery(2, 4, 3, time(12, 0)))

    assert len(result) == 1
    seg = result[0].segments[0]
    assert [s.code for s in seg.stops] == [2, 3, 4]
    # The bus reaches stop 2 one minute after leaving the first stop.
    assert seg.departure == time(12, 1)
    assert seg.duration_s == 300
    assert result[0].arrival == time(12, 6)


def test_transfer_with_walk_between_lines(transfer_graph) -> None:
    result = find_routes(transfer_graph, RouteQuery(1, 5, 1, time(9, 50)))

    assert len(result) == 1
    itinerary = result[0]
    assert itinerary.lines == ("10", None, "20")
    assert itinerary.transfers == 1
    assert itinerary.arrival == time(10, 25)
    assert itinerary.elapsed_s == 35 * 60
    assert summarize(result) == ["[1] 10 -> P3 walking P4 -> 20"]


def test_elapsed_equals_sum_of_waits_and_durations(transfer_graph) -> None:
    result = find_routes(transfer_graph, RouteQuery(1, 5, 1, time(9, 0)))

    for itinerary in result:
        assert itinerary.elapsed_s == itinerary.total_wait_s + itinerary.total_travel_s


def test_search_is_deterministic(transfer_graph) -> None:
    query = RouteQuery(1, 5, 1, time(9, 50))

    first = find_routes(transfer_graph, query)
    second = find_routes(transfer_graph, query)

    assert first == second


def test_same_origin_and_destination_returns_empty(transfer_graph) -> None:
    assert find_routes(transfer_graph, RouteQuery(3, 3, 1, time(10, 0))) == []


def test_unreachable_destination_returns_empty(transfer_graph) -> None:
    # Line 20 only runs 4 -> 5.
    assert find_routes(transfer_graph, RouteQuery(5, 1, 1, time(10, 0))) == []


def test_unknown_stop_raises(transfer_graph) -> None:
    with pytest.raises(UnknownStop) as excinfo:
        find_routes(transfer_graph, RouteQuery(1, 99, 1, time(10, 0)))

    assert excinfo.value.code == 99


@pytest.mark.parametrize(
    "query",
    [
        RouteQuery(None, 5, 1, time(10, 0)),
        RouteQuery(1, None, 1, time(10, 0)),
        RouteQuery(1, 5, 0, time(10, 0)),
        RouteQuery(1, 5, 8, time(10, 0)),
        RouteQuery(1, 5, 1, None),
    ],
)
def test_invalid_query_raises(transfer_graph, query: RouteQuery) -> None:
    with pytest.raises(InvalidQuery):
        find_routes(transfer_graph, query)


def test_max_segments_limits_itinerary_length(transfer_graph) -> None:
    result = find_routes(
        transfer_graph, RouteQuery(1, 5, 1, time(9, 50)), SearchOptions(max_segments=2)
    )

    assert result == []


def test_horizon_excludes_late_arrivals(transfer_graph) -> None:
    result = find_routes(
        transfer_graph,
        RouteQuery(1, 5, 1, time(9, 50)),
        SearchOptions(horizon_s=30 * 60),
    )

    assert result == []


def test_expansion_ceiling_raises(transfer_graph) -> None:
    with pytest.raises(SearchBoundExceeded) as excinfo:
        find_routes(
            transfer_graph,
            RouteQuery(1, 5, 1, time(9, 50)),
            SearchOptions(max_expansions=1),
        )

    assert excinfo.value.expansions == 1
    assert excinfo.value.found == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_results": 0},
        {"max_segments": 0},
        {"horizon_s": 0},
        {"max_labels_per_stop": 0},
        {"max_expansions": 0},
        {"time_budget_s": 0.0},
    ],
)
def test_search_options_reject_non_positive_bounds(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SearchOptions(**kwargs)


def _tied_graph(network_factory, line_factory):
    """Two ways from 1 to 4, both arriving 10:20 when leaving at 10:00.

    Lines 1 and 2 with a transfer at stop 2, or a walk to stop 3, line 3 to
    stop 5 and a walk to stop 4.
    """

    return build_graph(
        network_factory(
            stops=[1, 2, 3, 4, 5],
            lines=[
                line_factory("L1", [1, 2], {1: ["10:00"]}),
                line_factory("L2", [2, 4], {1: ["10:10"]}),
                line_factory("L3", [3, 5], {1: ["10:05"]}),
            ],
            rides=[(1, 2, 300), (2, 4, 600), (3, 5, 600)],
            walks=[(1, 3, 120), (5, 4, 300)],
        )
    )


def test_ties_on_elapsed_rank_fewer_transfers_first(
    network_factory, line_factory
) -> None:
    graph = _tied_graph(network_factory, line_factory)
    query = RouteQuery(1, 4, 1, time(10, 0))

    result = find_routes(graph, query)

    assert [(it.lines, it.elapsed_s, it.transfers) for it in result] == [
        ((None, "L3", None), 1200, 0),
        (("L1", "L2"), 1200, 1),
    ]


def test_truncated_results_keep_the_best_itinerary(
    network_factory, line_factory
) -> None:
    graph = _tied_graph(network_factory, line_factory)
    query = RouteQuery(1, 4, 1, time(10, 0))

    result = find_routes(graph, query, SearchOptions(max_results=1))

    assert [it.lines for it in result] == [(None, "L3", None)]


def test_long_walks_at_segment_limit_do_not_hide_shorter_routes(
    network_factory, line_factory
) -> None:
    # Five quick five-walk chains reach stop 99 before the direct 600 s walk,
    # but only the direct walk leaves a segment for line X.
    walks = [(1, 99, 600)]
    for k in range(1, 6):
        chain = [1, 10 * k + 1, 10 * k + 2, 10 * k + 3, 10 * k + 4, 99]
        walks.extend((a, b, 10) for a, b in zip(chain, chain[1:]))
    stops = {code for a, b, _ in walks for code in (a, b)} | {100}
    graph = build_graph(
        network_factory(
            stops=sorted(stops),
            lines=[line_factory("X", [99, 100], {1: ["10:00"]})],
            rides=[(99, 100, 300)],
            walks=walks,
        )
    )

    result = find_routes(graph, RouteQuery(1, 100, 1, time(9, 0)))

    assert len(result) == 1
    assert result[0].lines == (None, "X")
    assert result[0].arrival == time(10, 5)


def test_segments_chain_stop_to_stop(
    transfer_graph, network_factory, line_factory
) -> None:
    results = [
        find_routes(transfer_graph, RouteQuery(1, 5, 1, ready))
        for ready in (time(9, 0), time(9, 55), time(10, 5))
    ]
    results.append(
        find_routes(
            _tied_graph(network_factory, line_factory),
            RouteQuery(1, 4, 1, time(10, 0)),
        )
    )

    assert all(results)
    for itineraries in results:
        for it in itineraries:
            for prev, nxt in zip(it.segments, it.segments[1:]):
                assert prev.last_stop == nxt.first_stop
            assert it.elapsed_s == it.total_wait_s + it.total_travel_s


def test_time_budget_raises(transfer_graph, monkeypatch: pytest.MonkeyPatch) -> None:
    # Every clock reading is ten seconds after the previous one.
    ticks = count(0.0, 10.0)
    monkeypatch.setattr(search.time, "monotonic", lambda: next(ticks))

    with pytest.raises(SearchBoundExceeded) as excinfo:
        find_routes(
            transfer_graph,
            RouteQuery(1, 5, 1, time(9, 50)),
            SearchOptions(time_budget_s=1.0),
        )

    assert excinfo.value.expansions == 0
    assert excinfo.value.found == 0
