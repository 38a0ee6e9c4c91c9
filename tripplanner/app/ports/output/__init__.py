from .transit_repository import ITransitRepository

__all__ = [
    "ITransitRepository",
]
