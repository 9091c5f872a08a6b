"""
SciPy sparse adjacency matrices.

    to_adjacency(G, nodelist=None, weight=None)  -> (csr_array, nodelist)
    from_adjacency(A, nodelist=None, directed=True) -> Graph
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

import numpy as np
import scipy.sparse as sp

if TYPE_CHECKING:
    from ..core.graph import Graph


def _edge_weight(label, weight):
    if weight is None:
        return 1.0
    if callable(weight):
        return float(weight(label))
    if isinstance(label, Mapping) and weight in label:
        return float(label[weight])
    return 1.0


def to_adjacency(graph: "Graph", nodelist=None, weight=None, dtype=np.float64):
    """Adjacency matrix of ``graph`` as a CSR (compressed sparse row) array.

    Parameters
    ----------
    graph : Graph
    nodelist : list[str], optional
        Row/column order; ids are converted with ``str()``. Defaults to ``graph.nodes()``. Edges touching nodes
        outside the list are skipped.
    weight : str or callable, optional
        Per-edge value: ``label[weight]`` for mapping labels (1 when the key
        is missing), or ``weight(label)``. Defaults to 1 per edge.
    dtype : numpy dtype, default float64

    Returns
    -------
    tuple[scipy.sparse.csr_array, list[str]]
        Parallel edges are summed. Undirected graphs give a symmetric matrix.

    """
    nodes = graph.nodes() if nodelist is None else [str(v) for v in nodelist]
    index = {v: i for i, v in enumerate(nodes)}
    if len(index) != len(nodes):
        raise ValueError("nodelist contains duplicate ids")

    rows, cols, vals = [], [], []
    directed = graph.is_directed()
    for e in graph.edges():
        if e.v not in index or e.w not in index:
            continue
        i, j = index[e.v], index[e.w]
        w = _edge_weight(graph.edge(e), weight)
        rows.append(i)
        cols.append(j)
        vals.append(w)
        if not directed and i != j:
            rows.append(j)
            cols.append(i)
            vals.append(w)

    n = len(nodes)
    coo = sp.coo_array(
        (np.asarray(vals, dtype=dtype), (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64))),
        shape=(n, n),
    )
    # COO -> CSR sums duplicate (parallel) entries
    return coo.tocsr(), nodes


def from_adjacency(matrix, nodelist=None, *, directed: bool = True) -> "Graph":
    """Build a Graph with one edge per non-zero entry, labelled ``{"weight": value}``.

    For ``directed=False`` only the upper triangle (including the diagonal) is read.
    """
    from ..core.graph import Graph

    A = sp.coo_array(matrix)
    A.sum_duplicates()
    n_rows, n_cols = A.shape
    if n_rows != n_cols:
        raise ValueError(f"Adjacency matrix must be square, got {A.shape}")
    nodes = [str(i) for i in range(n_rows)] if nodelist is None else [str(v) for v in nodelist]
    if len(nodes) != n_rows:
        raise ValueError(f"nodelist has {len(nodes)} ids for a {n_rows}x{n_cols} matrix")

    g = Graph(directed=directed)
    g.set_nodes(nodes)
    for i, j, val in zip(A.row.tolist(), A.col.tolist(), A.data.tolist()):
        if val == 0 or (not directed and j < i):
            continue
        g.set_edge(nodes[i], nodes[j], {"weight": val})
    return g
