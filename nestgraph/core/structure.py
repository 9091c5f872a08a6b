from __future__ import annotations

from typing import NamedTuple, Optional


class Edge(NamedTuple):
    """Immutable edge descriptor.

    Attributes:
        v: Source node id (the smaller id for undirected graphs)
        w: Target node id
        name: Discriminator for parallel edges in a multigraph, or None
    """

    v: str
    w: str
    name: Optional[str] = None


class _DefaultEdgeName:
    """Name slot of the key of an unnamed edge. Never equal to a string."""

    __slots__ = ()

    def __repr__(self):
        return "DEFAULT_EDGE_NAME"

    def __reduce__(self):
        return "DEFAULT_EDGE_NAME"


DEFAULT_EDGE_NAME = _DefaultEdgeName()


def _canonical(directed, v, w):
    v = str(v)
    w = str(w)
    if not directed and v > w:
        v, w = w, v
    return v, w


def edge_args_to_id(directed, v, w, name=None) -> tuple:
    """Canonical identity key of an edge.

    The key is a ``(v, w, name)`` tuple, so ids may contain any character
    without two distinct edges sharing a key.
    """
    v, w = _canonical(directed, v, w)
    return (v, w, DEFAULT_EDGE_NAME if name is None else str(name))


def edge_args_to_obj(directed, v, w, name=None) -> Edge:
    v, w = _canonical(directed, v, w)
    return Edge(v, w, None if name is None else str(name))


def edge_obj_to_id(directed, edge) -> tuple:
    v, w, name = as_edge_parts(edge)
    return edge_args_to_id(directed, v, w, name)


def as_edge_parts(edge):
    """Return ``(v, w, name)`` from an Edge, a mapping, or any object with
    ``v``/``w`` attributes.
    """
    if isinstance(edge, Edge):
        return edge.v, edge.w, edge.name
    if isinstance(edge, dict):
        try:
            return edge["v"], edge["w"], edge.get("name")
        except KeyError:
            raise ValueError(f"Edge mapping needs 'v' and 'w' keys, got {sorted(edge)}") from None
    try:
        return edge.v, edge.w, getattr(edge, "name", None)
    except AttributeError:
        raise TypeError(f"Cannot read an edge descriptor from {type(edge).__name__}") from None


def is_edge_like(obj) -> bool:
    if isinstance(obj, Edge):
        return True
    if isinstance(obj, dict):
        return "v" in obj and "w" in obj
    return not isinstance(obj, str) and hasattr(obj, "v") and hasattr(obj, "w")
