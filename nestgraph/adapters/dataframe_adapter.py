from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Dict, Optional

import polars as pl

if TYPE_CHECKING:
    from ..core.graph import Graph

NODE_COLS = ("v", "parent")
EDGE_COLS = ("v", "w", "name")
VALUE_COL = "value"


def _label_columns(label, explode_labels, reserved):
    if label is None:
        return {}
    if explode_labels and isinstance(label, Mapping) and label:
        out = {}
        for k, v in label.items():
            k = str(k)
            if k in reserved:
                raise ValueError(f"Label key {k!r} collides with a structural column")
            out[k] = v
        return out
    return {VALUE_COL: label}


def to_dataframes(graph: "Graph", *, explode_labels: bool = True) -> Dict[str, pl.DataFrame]:
    """
    Export graph to Polars DataFrames.

    Returns a dictionary with two tables:
    - 'nodes': columns ``v``, ``parent`` (null for top-level nodes), then label columns
    - 'edges': columns ``v``, ``w``, ``name``, then label columns

    Args:
        graph: Graph instance to export
        explode_labels: If True, mapping labels are spread over one column per key;
            otherwise every label goes into a single ``value`` column

    Returns:
        Dictionary mapping table names to Polars DataFrames

    Raises:
        ValueError: if a mapping label uses a structural column name as a key
    """
    nodes_data = []
    for v in graph.nodes():
        row = {"v": v, "parent": graph.parent(v)}
        row.update(_label_columns(graph.node(v), explode_labels, NODE_COLS))
        nodes_data.append(row)

    edges_data = []
    for e in graph.edges():
        row = {"v": e.v, "w": e.w, "name": e.name}
        row.update(_label_columns(graph.edge(e), explode_labels, EDGE_COLS))
        edges_data.append(row)

    nodes_df = (
        pl.DataFrame(nodes_data, infer_schema_length=None)
        if nodes_data
        else pl.DataFrame(schema={"v": pl.Utf8, "parent": pl.Utf8})
    )
    edges_df = (
        pl.DataFrame(edges_data, infer_schema_length=None)
        if edges_data
        else pl.DataFrame(schema={"v": pl.Utf8, "w": pl.Utf8, "name": pl.Utf8})
    )
    return {"nodes": nodes_df, "edges": edges_df}


def _row_label(row, reserved):
    attrs = {k: v for k, v in row.items() if k not in reserved and v is not None}
    if not attrs:
        return None
    if set(attrs) == {VALUE_COL}:
        return attrs[VALUE_COL]
    return attrs


def from_dataframes(
    nodes: Optional[pl.DataFrame] = None,
    edges: Optional[pl.DataFrame] = None,
    *,
    directed: bool = True,
    multigraph: bool = False,
    compound: bool = False,
) -> "Graph":
    """
    Build a Graph from Polars DataFrames shaped like :func:`to_dataframes` output.

    Null cells are dropped from labels; a row whose only non-null label column
    is ``value`` gets that value as its label.

    Args:
        nodes: Table with a ``v`` column and optional ``parent`` and label columns
        edges: Table with ``v`` and ``w`` columns and optional ``name`` and label columns
        directed, multigraph, compound: Options of the new graph

    Returns:
        Graph

    Raises:
        ValueError: if a required column is missing
    """
    from ..core.graph import Graph

    g = Graph(directed=directed, multigraph=multigraph, compound=compound)

    if nodes is not None and nodes.height > 0:
        if "v" not in nodes.columns:
            raise ValueError("nodes table needs a 'v' column")
        parents = []
        for row in nodes.iter_rows(named=True):
            g.set_node(row["v"], _row_label(row, NODE_COLS))
            if row.get("parent") is not None:
                parents.append((row["v"], row["parent"]))
        for v, parent in parents:
            g.set_parent(v, parent)

    if edges is not None and edges.height > 0:
        missing = {"v", "w"} - set(edges.columns)
        if missing:
            raise ValueError(f"edges table is missing columns: {sorted(missing)}")
        for row in edges.iter_rows(named=True):
            g.set_edge(row["v"], row["w"], _row_label(row, EDGE_COLS), row.get("name"))

    return g
