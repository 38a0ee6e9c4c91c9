from __future__ import annotations


class RoutingError(Exception):
    """Base exception for route calculation failures."""


class InvalidQuery(RoutingError):
    """Raised when a route query is missing values or is out of range."""


class UnknownStop(InvalidQuery):
    """Raised when a stop code is not part of the loaded network."""

    def __init__(self, code: object) -> None:
        super().__init__(f"Unknown stop: {code}")
        self.code = code


class GraphIntegrityError(RoutingError):
    """Raised while assembling a graph from inconsistent network data."""


class SearchBoundExceeded(RoutingError):
    """Raised when a search hits its step or wall-clock ceiling."""

    def __init__(self, message: str, *, expansions: int, found: int) -> None:
        super().__init__(message)
        self.expansions = expansions
        self.found = found


class NetworkNotLoaded(RoutingError):
    """Raised when no network snapshot has been published yet."""
