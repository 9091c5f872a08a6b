try:
    import networkx as nx
except ModuleNotFoundError as e:
    raise ModuleNotFoundError(
        "Optional dependency 'networkx' is not installed. "
        "Install with: pip install nestgraph[networkx]"
    ) from e

import warnings
from collections.abc import Mapping
from typing import TYPE_CHECKING

from ._base import GraphAdapter

if TYPE_CHECKING:
    from ..core.graph import Graph

# Private attribute keys; mapping labels are spread as plain attributes.
LABEL_KEY = "__label"
PARENT_KEY = "__parent"
COMPOUND_KEY = "__compound"


def _label_to_attrs(label) -> dict:
    if label is None:
        return {}
    if isinstance(label, Mapping):
        return {str(k): v for k, v in label.items()}
    return {LABEL_KEY: label}


def _attrs_to_label(attrs: dict):
    attrs = {k: v for k, v in attrs.items() if k != PARENT_KEY}
    if not attrs:
        return None
    if set(attrs) == {LABEL_KEY}:
        return attrs[LABEL_KEY]
    return attrs


def to_nx(graph: "Graph"):
    """
    Export a Graph to the matching NetworkX class.

    Parameters
    ----------
    graph : Graph
        Source graph instance.

    Returns
    -------
    networkx.Graph | networkx.DiGraph | networkx.MultiGraph | networkx.MultiDiGraph
        Directed graphs map to DiGraph/MultiDiGraph, multigraphs to the Multi*
        classes. Mapping labels become attribute dicts, other labels are
        stored under ``"__label"``. Edge names become multigraph keys, compound
        parents the ``"__parent"`` node attribute.
    """
    if graph.is_multigraph():
        G = nx.MultiDiGraph() if graph.is_directed() else nx.MultiGraph()
    else:
        G = nx.DiGraph() if graph.is_directed() else nx.Graph()

    G.graph.update(_label_to_attrs(graph.graph()))
    G.graph[COMPOUND_KEY] = graph.is_compound()

    for v in graph.nodes():
        attrs = _label_to_attrs(graph.node(v))
        parent = graph.parent(v)
        if parent is not None:
            attrs[PARENT_KEY] = parent
        G.add_node(v, **attrs)

    for e in graph.edges():
        attrs = _label_to_attrs(graph.edge(e))
        if graph.is_multigraph():
            G.add_edge(e.v, e.w, key=e.name, **attrs)
        else:
            G.add_edge(e.v, e.w, **attrs)

    return G


def from_nx(nxG, *, compound=None) -> "Graph":
    """
    Import a NetworkX graph.

    Parameters
    ----------
    nxG : networkx.Graph
        Any of the four NetworkX graph classes.
    compound : bool, optional
        Build a compound graph. Defaults to the ``"__compound"`` graph
        attribute written by :func:`to_nx`, else False.

    Returns
    -------
    Graph

    Notes
    -----
    Non-string multigraph keys (NetworkX's automatic integer keys) give
    unnamed edges. When several of them connect the same pair, the extra
    ones are named ``str(key)`` and a RuntimeWarning is emitted.
    """
    from ..core.graph import Graph

    graph_attrs = {k: v for k, v in nxG.graph.items() if k != COMPOUND_KEY}
    if compound is None:
        compound = bool(nxG.graph.get(COMPOUND_KEY, False))

    g = Graph(directed=nxG.is_directed(), multigraph=nxG.is_multigraph(), compound=compound)
    g.set_graph(_attrs_to_label(graph_attrs))

    for v, attrs in nxG.nodes(data=True):
        g.set_node(v, _attrs_to_label(attrs))
    if compound:
        for v, attrs in nxG.nodes(data=True):
            if attrs.get(PARENT_KEY) is not None:
                g.set_parent(v, attrs[PARENT_KEY])

    renamed = 0
    if nxG.is_multigraph():
        for u, v, key, attrs in nxG.edges(keys=True, data=True):
            name = key if isinstance(key, str) else None
            if name is None and g.has_edge(u, v):
                name = str(key)
                renamed += 1
            g.set_edge(u, v, _attrs_to_label(attrs), name)
    else:
        for u, v, attrs in nxG.edges(data=True):
            g.set_edge(u, v, _attrs_to_label(attrs))

    if renamed:
        warnings.warn(
            f"NX→Graph conversion named {renamed} parallel edge(s) after their integer keys.",
            category=RuntimeWarning,
            stacklevel=2,
        )
    return g


def to_backend(graph, **kwargs):
    """Backend hook for the lazy proxy (see :mod:`nestgraph.adapters.manager`)."""
    return to_nx(graph)


class NetworkXAdapter(GraphAdapter):
    def export(self, graph, **kwargs):
        return to_nx(graph)

    def load(self, obj, **kwargs):
        return from_nx(obj, **kwargs)
