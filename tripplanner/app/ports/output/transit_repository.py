from __future__ import annotations

from abc import ABC, abstractmethod

from tripplanner.domain.models import TransitNetwork


class ITransitRepository(ABC):
    """Port for loading stops, lines and edges into an in-memory network."""

    @abstractmethod
    def load_network(self) -> TransitNetwork:
        raise NotImplementedError
