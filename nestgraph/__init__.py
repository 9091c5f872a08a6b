# nestgraph/__init__.py
"""nestgraph: directed/undirected, multi- and compound graphs in memory."""
from __future__ import annotations

from importlib import import_module
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

from .core import (
    DEFAULT_EDGE_NAME,
    CycleError,
    Edge,
    Graph,
    GraphError,
    MultiEdgeNotAllowedError,
    UnsupportedOperationError,
)

# Lazily exposed submodules (imported on first attribute access)
_lazy_submodules = {
    "adapters": "nestgraph.adapters",
    "algorithms": "nestgraph.algorithms",
    "utils": "nestgraph.utils",
    "dot": "nestgraph.adapters.dot",
    "jsonio": "nestgraph.adapters.json_adapter",
    "dataframe": "nestgraph.adapters.dataframe_adapter",
    "sparse": "nestgraph.adapters.sparse_adapter",
    "networkx": "nestgraph.adapters.networkx",
}

# Curated top-level symbols (lazy). name -> (module, attribute)
_lazy_symbols: dict[str, tuple[str, str]] = {
    # DOT text export
    "write_dot": ("nestgraph.adapters.dot", "write_dot"),
    # Stdlib JSON I/O
    "write_json": ("nestgraph.adapters.json_adapter", "write"),
    "read_json": ("nestgraph.adapters.json_adapter", "read"),
    "to_json": ("nestgraph.adapters.json_adapter", "to_json"),
    "from_json": ("nestgraph.adapters.json_adapter", "from_json"),
    # Polars tables
    "to_dataframes": ("nestgraph.adapters.dataframe_adapter", "to_dataframes"),
    "from_dataframes": ("nestgraph.adapters.dataframe_adapter", "from_dataframes"),
    # SciPy sparse
    "to_adjacency": ("nestgraph.adapters.sparse_adapter", "to_adjacency"),
    "from_adjacency": ("nestgraph.adapters.sparse_adapter", "from_adjacency"),
    # NetworkX adapter (optional dependency)
    "to_nx": ("nestgraph.adapters.networkx", "to_nx"),
    "from_nx": ("nestgraph.adapters.networkx", "from_nx"),
    # Algorithms
    "components": ("nestgraph.algorithms.components", "components"),
}

__all__ = sorted(
    set(list(_lazy_submodules) + list(_lazy_symbols))
    | {
        "Graph",
        "Edge",
        "DEFAULT_EDGE_NAME",
        "GraphError",
        "CycleError",
        "UnsupportedOperationError",
        "MultiEdgeNotAllowedError",
    }
)


def __getattr__(name: str) -> Any:  # PEP 562: lazy attribute resolution
    if name in _lazy_submodules:
        return import_module(_lazy_submodules[name])
    if name in _lazy_symbols:
        mod, attr = _lazy_symbols[name]
        return getattr(import_module(mod), attr)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(__all__))


try:
    __version__ = _pkg_version("nestgraph")
except PackageNotFoundError:
    __version__ = "0.0.0"
