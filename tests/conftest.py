import pathlib
import shutil
import tempfile

import pytest

from nestgraph import Graph


@pytest.fixture
def simple_graph():
    """Directed graph a->b, b->c, a->c plus an isolated node."""
    G = Graph()
    G.set_edge("a", "b")
    G.set_edge("b", "c")
    G.set_edge("a", "c")
    G.set_node("x", {"color": "red"})
    return G


@pytest.fixture
def complex_graph():
    """Compound multigraph with labels on the graph, nodes and edges."""
    G = Graph(multigraph=True, compound=True)
    G.set_graph({"title": "complex"})
    G.set_node("A", {"kind": "gene", "score": 1.5})
    G.set_node("B", {"kind": "protein", "score": 2.0})
    G.set_node("C")
    G.set_parent("A", "cluster")
    G.set_parent("B", "cluster")
    G.set_parent("cluster", "top")
    G.set_edge("A", "B", {"weight": 1.0}, "e1")
    G.set_edge("A", "B", {"weight": 3.0}, "e2")
    G.set_edge("B", "C", {"weight": 2.0})
    return G


@pytest.fixture
def tmpdir_fixture():
    d = pathlib.Path(tempfile.mkdtemp())
    yield d
    shutil.rmtree(d, ignore_errors=True)
