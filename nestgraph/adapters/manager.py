from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

from ._base import GraphAdapter
from ._proxy import BackendProxy

if TYPE_CHECKING:
    from ..core.graph import Graph

__all__ = [
    "ensure_materialized",
    "get_adapter",
    "get_proxy",
]

# ---------------------------------------------------------------------------
# 1. Central registry --------------------------------------------------------
# ---------------------------------------------------------------------------
# backend name -> (adapter module, converter function, adapter class)
_REGISTRY = {
    "networkx": (".networkx", "to_backend", "NetworkXAdapter"),
}


def _adapter_module(backend_name: str):
    if backend_name not in _REGISTRY:
        raise ValueError(f"No backend '{backend_name}' registered")
    return importlib.import_module(_REGISTRY[backend_name][0], __package__)


# ---------------------------------------------------------------------------
# 2. Public helpers ----------------------------------------------------------
# ---------------------------------------------------------------------------
def get_adapter(name: str) -> GraphAdapter:
    """Return a *new* adapter instance of the requested backend."""
    name = name.lower()
    mod = _adapter_module(name)
    return getattr(mod, _REGISTRY[name][2])()


def get_proxy(backend_name: str, graph: "Graph") -> BackendProxy:
    """Return a lazy proxy so users can write `G.nx.<algo>()`."""
    if backend_name not in _REGISTRY:
        raise ValueError(f"No backend '{backend_name}' registered")
    return BackendProxy(graph, backend_name)


def ensure_materialized(backend_name: str, graph: "Graph") -> dict:
    """
    Convert (or re-convert) *graph* into the requested backend object and
    cache the result on the graph's private state object.  Returns the cache
    entry: {"module": nx, "graph": nx.Graph, "version": int}
    """
    cache = graph._state._backend_cache  # per-instance cache
    entry = cache.get(backend_name)

    if entry is None or graph._state.dirty_since(entry["version"]):
        # 1. import adapter (and with it the backend library) lazily
        adapter_mod = _adapter_module(backend_name)
        backend_module = importlib.import_module(backend_name)  # e.g. 'networkx'

        # 2. convert Graph -> backend graph using the registered callable
        converted = getattr(adapter_mod, _REGISTRY[backend_name][1])(graph)

        # 3. stash result together with current version counter
        entry = cache[backend_name] = {
            "module": backend_module,
            "graph": converted,
            "version": graph._state.version,
        }

    return entry
