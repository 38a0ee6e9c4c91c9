from __future__ import annotations

from dataclasses import dataclass, field

from .edge import Edge, EdgeKey
from .line import Line
from .stop import Stop


@dataclass(frozen=True, slots=True)
class TransitNetwork:
    """Raw stops, lines and edges as handed over by a data loader."""

    stops_by_code: dict[int, Stop] = field(default_factory=dict)
    lines_by_code: dict[str, Line] = field(default_factory=dict)
    edges_by_key: dict[EdgeKey, Edge] = field(default_factory=dict)
