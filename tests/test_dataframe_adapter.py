# test_dataframe_adapter.py
import polars as pl  # PL (Polars)
import pytest

from nestgraph import Graph
from nestgraph.adapters.dataframe_adapter import from_dataframes, to_dataframes

from .helpers import assert_graphs_equal


class TestDataFrameAdapter:
    """Tests for Polars DataFrame adapter."""

    def test_simple_round_trip(self, simple_graph):
        G = simple_graph
        dfs = to_dataframes(G)
        assert "nodes" in dfs and "edges" in dfs
        assert dfs["nodes"].height == 4
        assert dfs["edges"].height == 3
        G2 = from_dataframes(nodes=dfs["nodes"], edges=dfs["edges"])
        assert_graphs_equal(G, G2)

    def test_complex_round_trip(self, complex_graph):
        G = complex_graph
        dfs = to_dataframes(G)
        assert {"v", "parent", "kind", "score"} <= set(dfs["nodes"].columns)
        assert {"v", "w", "name", "weight"} <= set(dfs["edges"].columns)
        G2 = from_dataframes(
            nodes=dfs["nodes"], edges=dfs["edges"], multigraph=True, compound=True
        )
        assert_graphs_equal(G, G2, check_labels=False)
        assert G2.node("A") == {"kind": "gene", "score": 1.5}
        assert G2.node("C") is None
        assert G2.edge("A", "B", "e2") == {"weight": 3.0}
        assert G2.parent("cluster") == "top"

    def test_exploded_columns(self, complex_graph):
        nodes = to_dataframes(complex_graph)["nodes"]
        row = nodes.filter(pl.col("v") == "A").row(0, named=True)
        assert row["kind"] == "gene"
        assert row["parent"] == "cluster"
        top = nodes.filter(pl.col("v") == "top").row(0, named=True)
        assert top["parent"] is None

    def test_value_column(self, complex_graph):
        dfs = to_dataframes(complex_graph, explode_labels=False)
        assert "value" in dfs["edges"].columns
        assert "weight" not in dfs["edges"].columns
        e1 = dfs["edges"].filter(pl.col("name") == "e1").row(0, named=True)
        assert e1["value"] == {"weight": 1.0}

    def test_scalar_labels(self):
        G = Graph()
        G.set_node("a", 1)
        G.set_node("b", 2)
        G.set_edge("a", "b", 5)
        dfs = to_dataframes(G)
        assert dfs["nodes"]["value"].to_list() == [1, 2]
        G2 = from_dataframes(nodes=dfs["nodes"], edges=dfs["edges"])
        assert G2.node("a") == 1
        assert G2.edge("a", "b") == 5

    def test_reserved_label_key(self):
        G = Graph()
        G.set_node("a", {"parent": "oops"})
        with pytest.raises(ValueError):
            to_dataframes(G)

    def test_empty_graph(self):
        dfs = to_dataframes(Graph())
        assert dfs["nodes"].height == 0
        assert dfs["edges"].columns == ["v", "w", "name"]
        G2 = from_dataframes(dfs["nodes"], dfs["edges"])
        assert G2.node_count() == 0

    def test_edges_only(self):
        edges = pl.DataFrame({"v": ["a", "b"], "w": ["b", "c"], "weight": [1.0, 2.0]})
        G = from_dataframes(edges=edges, directed=False)
        assert not G.is_directed()
        assert G.node_count() == 3
        assert G.edge("c", "b") == {"weight": 2.0}

    def test_missing_columns(self):
        with pytest.raises(ValueError):
            from_dataframes(edges=pl.DataFrame({"v": ["a"]}))
        with pytest.raises(ValueError):
            from_dataframes(nodes=pl.DataFrame({"id": ["a"]}))

    def test_children_listed_before_parents(self):
        nodes = pl.DataFrame({"v": ["c", "p"], "parent": ["p", None]})
        G = from_dataframes(nodes=nodes, compound=True)
        assert G.parent("c") == "p"
        assert G.children("p") == ["c"]
