from .text_transit_repository import TextTransitRepository

__all__ = [
    "TextTransitRepository",
]
