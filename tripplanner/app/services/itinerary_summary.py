from __future__ import annotations

from typing import Iterable

from tripplanner.domain.models import Itinerary, Segment


def _describe(segment: Segment) -> str:
    if segment.line is not None:
        return segment.line.code
    return f"P{segment.first_stop.code} walking P{segment.last_stop.code}"


def summarize(itineraries: Iterable[Itinerary]) -> list[str]:
    """One line per itinerary, e.g. ``[1] 10 -> P3 walking P4 -> 5``."""

    return [
        f"[{i}] " + " -> ".join(_describe(s) for s in itinerary.segments)
        for i, itinerary in enumerate(itineraries, start=1)
    ]


def format_seconds(seconds: int) -> str:
    hours, rest = divmod(int(seconds), 3600)
    return f"{hours:02d}:{rest // 60:02d}:{rest % 60:02d}"
