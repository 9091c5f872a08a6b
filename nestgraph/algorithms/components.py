from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.graph import Graph


def components(graph: "Graph") -> list[list[str]]:
    """Connected components, ignoring edge direction.

    Parameters
    ----------
    graph : Graph

    Returns
    -------
    list[list[str]]
        Disjoint node groups whose union is ``graph.nodes()``. Groups follow the
        order in which their first node appears in ``graph.nodes()``.

    Notes
    -----
    Depth-first search with an explicit stack, so long chains do not hit the
    recursion limit.

    """
    visited = set()
    cmpts = []
    for start in graph.nodes():
        if start in visited:
            continue
        visited.add(start)
        cmpt = []
        stack = [start]
        while stack:
            v = stack.pop()
            cmpt.append(v)
            for w in graph.neighbors(v):
                if w not in visited:
                    visited.add(w)
                    stack.append(w)
        cmpts.append(cmpt)
    return cmpts
