from abc import ABC, abstractmethod
from typing import Any


class GraphAdapter(ABC):
    """Two-way converter between a nestgraph Graph and a foreign graph object."""

    @abstractmethod
    def export(self, graph, **kwargs) -> Any:
        pass

    @abstractmethod
    def load(self, obj, **kwargs):
        pass
