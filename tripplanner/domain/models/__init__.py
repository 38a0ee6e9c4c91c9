from .edge import Edge, EdgeKind
from .geo import GeoPoint
from .itinerary import Itinerary, Segment
from .line import Line
from .network import TransitNetwork
from .query import RouteQuery
from .stop import Stop

__all__ = [
    "Edge",
    "EdgeKind",
    "GeoPoint",
    "Itinerary",
    "Line",
    "RouteQuery",
    "Segment",
    "Stop",
    "TransitNetwork",
]
