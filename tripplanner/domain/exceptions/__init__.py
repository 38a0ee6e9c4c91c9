from .routing import (
    GraphIntegrityError,
    InvalidQuery,
    NetworkNotLoaded,
    RoutingError,
    SearchBoundExceeded,
    UnknownStop,
)

__all__ = [
    "GraphIntegrityError",
    "InvalidQuery",
    "NetworkNotLoaded",
    "RoutingError",
    "SearchBoundExceeded",
    "UnknownStop",
]
