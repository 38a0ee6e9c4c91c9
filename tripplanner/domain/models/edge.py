from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class EdgeKind(IntEnum):
    """Edge types, using the numeric codes of the segment files."""

    RIDE = 1
    WALK = 2


EdgeKey = tuple[int, int, EdgeKind]


@dataclass(frozen=True, slots=True)
class Edge:
    """Directed connection between two stops.

    RIDE edges are one-directional hops along some line's path. WALK edges can
    be used at any time and always come with a mirror edge.
    """

    origin: int
    destination: int
    duration_s: int
    kind: EdgeKind

    def __post_init__(self) -> None:
        if self.duration_s < 0:
            raise ValueError(
                f"Negative duration for edge {self.origin}->{self.destination}: "
                f"{self.duration_s}"
            )

    @property
    def key(self) -> EdgeKey:
        return (self.origin, self.destination, self.kind)

    def mirrored(self) -> "Edge":
        return Edge(
            origin=self.destination,
            destination=self.origin,
            duration_s=self.duration_s,
            kind=self.kind,
        )
