import json

import numpy as np
import polars as pl
import pytest

from nestgraph import Edge, Graph, MultiEdgeNotAllowedError


class TestVersion:
    def test_each_call_is_one_version(self):
        G = Graph()
        assert G.version == 0
        G.set_edge("a", "b")  # creates two nodes internally
        assert G.version == 1
        G.set_path(["a", "b", "c"])
        assert G.version == 2
        G.remove_node("a")
        assert G.version == 3

    def test_failed_mutation_does_not_bump(self):
        G = Graph()
        with pytest.raises(MultiEdgeNotAllowedError):
            G.set_edge("a", "b", name="x")
        assert G.version == 0

    def test_queries_do_not_bump(self, simple_graph):
        v = simple_graph.version
        simple_graph.nodes()
        simple_graph.edges()
        simple_graph.node_edges("a")
        simple_graph.filter_nodes(lambda n: True)
        assert simple_graph.version == v


class TestHistory:
    def test_off_by_default(self):
        G = Graph()
        G.set_node("a")
        G.mark("checkpoint")
        assert G.history() == []
        assert G.export_history("unused.ndjson") == 0

    def test_records_outermost_calls(self):
        G = Graph(history=True)
        G.set_node("a", {"x": 1})
        G.set_edge("a", "b", "L")
        ops = [e["op"] for e in G.history()]
        assert ops == ["set_node", "set_edge"]

        first, second = G.history()
        assert first["v"] == "a"
        assert first["label"] == {"x": 1}
        assert first["version"] == 1
        assert (second["v"], second["w"], second["label"]) == ("a", "b", "L")
        assert second["version"] == 2
        assert "name" not in second
        assert second["ts_utc"].endswith("Z")
        assert second["mono_ns"] >= first["mono_ns"]

    def test_omitted_label_is_not_logged(self):
        G = Graph(history=True)
        G.set_node("a")
        (evt,) = G.history()
        assert "label" not in evt

    def test_arguments_are_json_safe(self):
        G = Graph(history=True)
        G.set_default_node_label(lambda v: v)
        G.set_node("a", {"w": np.float64(2.5), "tags": {"y", "x"}})
        G.set_edge(Edge("a", "b"), "L")
        fn_evt, node_evt, edge_evt = G.history()
        assert fn_evt["new_default"] == "<<function>>"
        assert node_evt["label"] == {"w": 2.5, "tags": ["x", "y"]}
        assert edge_evt["v"] == ["a", "b", None]
        json.dumps(G.history())

    def test_enable_clear_and_mark(self):
        G = Graph()
        G.set_node("a")
        G.enable_history()
        G.mark("start")
        G.set_node("b")
        G.enable_history(False)
        G.set_node("c")
        hist = G.history()
        assert [e["op"] for e in hist] == ["mark", "set_node"]
        assert hist[0]["label"] == "start"
        assert hist[0]["version"] == 1
        G.clear_history()
        assert G.history() == []
        assert G.version == 3

    def test_history_is_a_copy(self):
        G = Graph(history=True)
        G.set_node("a")
        G.history().clear()
        assert len(G.history()) == 1

    def test_as_dataframe(self):
        G = Graph(history=True)
        G.set_node("a", 1)
        G.set_edge("a", "b")
        df = G.history(as_df=True)
        assert isinstance(df, pl.DataFrame)
        assert df.height == 2
        assert {"version", "ts_utc", "mono_ns", "op", "v", "w", "label"} <= set(df.columns)
        assert df["op"].to_list() == ["set_node", "set_edge"]
        assert json.loads(df["v"][0]) == "a"
        assert df["w"][0] is None

    def test_empty_dataframe(self):
        df = Graph(history=True).history(as_df=True)
        assert df.height == 0
        assert df.columns == ["version", "ts_utc", "mono_ns", "op"]


class TestExportHistory:
    @pytest.fixture
    def G(self):
        G = Graph(history=True)
        G.set_node("a", {"k": "v"})
        G.set_edge("a", "b")
        G.remove_edge("a", "b")
        return G

    def test_ndjson(self, G, tmpdir_fixture):
        path = tmpdir_fixture / "h.ndjson"
        assert G.export_history(path) == 3
        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["op"] for line in lines] == ["set_node", "set_edge", "remove_edge"]

    def test_json(self, G, tmpdir_fixture):
        path = tmpdir_fixture / "h.json"
        assert G.export_history(path) == 3
        events = json.loads(path.read_text(encoding="utf-8"))
        assert events[0]["label"] == {"k": "v"}

    def test_csv(self, G, tmpdir_fixture):
        path = tmpdir_fixture / "h.csv"
        assert G.export_history(path) == 3
        df = pl.read_csv(path)
        assert df["op"].to_list() == ["set_node", "set_edge", "remove_edge"]

    def test_parquet_and_unknown_extension(self, G, tmpdir_fixture):
        assert G.export_history(tmpdir_fixture / "h.parquet") == 3
        assert pl.read_parquet(tmpdir_fixture / "h.parquet").height == 3
        assert G.export_history(tmpdir_fixture / "h.log") == 3
        assert (tmpdir_fixture / "h.log.parquet").exists()
