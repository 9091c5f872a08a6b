"""
JSON interchange for nestgraph Graphs.

Provides:
    write(G)            -> dict
    read(data)          -> Graph
    to_json(G, path)    -> None
    from_json(path)     -> Graph

Document layout::

    {
      "options": {"directed": bool, "multigraph": bool, "compound": bool},
      "value": <graph label>,                        # omitted when None
      "nodes": [{"v": id, "value": label, "parent": id}, ...],
      "edges": [{"v": id, "w": id, "name": str, "value": label}, ...]
    }

``value``, ``parent`` and ``name`` are omitted when unset.
"""
from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..utils.validation import canonicalize

if TYPE_CHECKING:
    from ..core.graph import Graph


def write(graph: "Graph") -> dict[str, Any]:
    """Encode a graph as a JSON-compatible dict (labels are shallow-copied)."""
    data = {
        "options": {
            "directed": graph.is_directed(),
            "multigraph": graph.is_multigraph(),
            "compound": graph.is_compound(),
        },
        "nodes": _write_nodes(graph),
        "edges": _write_edges(graph),
    }
    if graph.graph() is not None:
        data["value"] = copy.copy(graph.graph())
    return data


def _write_nodes(graph):
    out = []
    for v in graph.nodes():
        entry = {"v": v}
        value = graph.node(v)
        if value is not None:
            entry["value"] = value
        parent = graph.parent(v)
        if parent is not None:
            entry["parent"] = parent
        out.append(entry)
    return out


def _write_edges(graph):
    out = []
    for e in graph.edges():
        entry = {"v": e.v, "w": e.w}
        if e.name is not None:
            entry["name"] = e.name
        value = graph.edge(e)
        if value is not None:
            entry["value"] = value
        out.append(entry)
    return out


def read(data: dict[str, Any]) -> "Graph":
    """Build a Graph from a :func:`write` document.

    Nodes are replayed before edges so edge endpoints keep their labels.
    Parents need not appear before their children.

    Raises
    ------
    ValueError
        If the document has no ``nodes`` or ``edges`` list.

    """
    from ..core.graph import Graph

    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise ValueError("Graph document needs 'nodes' and 'edges' lists")

    options = data.get("options") or {}
    g = Graph(
        directed=options.get("directed", True),
        multigraph=options.get("multigraph", False),
        compound=options.get("compound", False),
    )
    g.set_graph(data.get("value"))

    for entry in nodes:
        g.set_node(entry["v"], entry.get("value"))
        if entry.get("parent") is not None:
            g.set_parent(entry["v"], entry["parent"])

    for entry in edges:
        g.set_edge({"v": entry["v"], "w": entry["w"], "name": entry.get("name")}, entry.get("value"))

    return g


def to_json(graph: "Graph", path, *, indent: int | None = None):
    """Write ``graph`` to ``path`` as JSON.

    Labels that are not JSON types (sets, NumPy values, objects) are converted
    with :func:`~nestgraph.utils.validation.canonicalize` and come back as
    plain lists/dicts/strings.
    """
    with open(Path(path), "w", encoding="utf-8") as f:
        json.dump(write(graph), f, ensure_ascii=False, indent=indent, default=canonicalize)


def from_json(path) -> "Graph":
    """Read a graph written by :func:`to_json`."""
    with open(Path(path), "r", encoding="utf-8") as f:
        return read(json.load(f))
