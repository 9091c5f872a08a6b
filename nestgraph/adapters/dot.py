"""
Graphviz DOT text export.

    write_dot(G, indent="")  -> str
    to_dot(G, path, indent="")

Mapping labels become DOT attributes: ``[k=v,...]`` on node and edge lines,
``k=v;`` statements for the graph label and for compound (subgraph) nodes.
Labels that are not mappings are not written.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.graph import Graph

UNESCAPED_ID_PATTERN = re.compile(r"^[a-zA-Z\x80-\xff_][a-zA-Z\x80-\xff_0-9]*$")


class _Writer:
    """Accumulates lines, prefixing each with the current indentation."""

    def __init__(self, indent_unit=""):
        self._unit = indent_unit
        self._indent = ""
        self._parts = []
        self._should_indent = True

    def indent(self):
        self._indent += self._unit

    def unindent(self):
        self._indent = self._indent[: len(self._indent) - len(self._unit)]

    def write(self, s):
        if self._should_indent:
            self._should_indent = False
            self._parts.append(self._indent)
        self._parts.append(s)

    def write_line(self, line=""):
        self.write(f"{line}\n")
        self._should_indent = True

    def getvalue(self):
        return "".join(self._parts)


def _number(x) -> str:
    # JavaScript number formatting: 2.0 -> "2", nan -> "NaN"
    if isinstance(x, int):
        return str(x)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x.is_integer():
        return str(int(x))
    return repr(x)


def _id(obj) -> str:
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, (int, float)):
        return _number(obj)
    s = str(obj)
    if UNESCAPED_ID_PATTERN.match(s):
        return s
    return '"' + s.replace('"', '\\"') + '"'


def write_dot(graph: "Graph", indent: str = "") -> str:
    """Render a graph as DOT text.

    Parameters
    ----------
    graph : Graph
    indent : str, default ""
        String added once per nesting level in front of each line.

    Returns
    -------
    str

    Notes
    -----
    - Graphs that are not multigraphs are written as ``strict``.
    - In a compound graph, nodes with children become ``subgraph`` blocks.

    """
    ec = "->" if graph.is_directed() else "--"
    writer = _Writer(indent)

    if not graph.is_multigraph():
        writer.write("strict ")

    writer.write_line(f"{'digraph' if graph.is_directed() else 'graph'} {{")
    writer.indent()

    graph_attrs = graph.graph()
    if isinstance(graph_attrs, Mapping):
        for k, v in graph_attrs.items():
            writer.write_line(f"{_id(k)}={_id(v)};")

    _write_subgraph(graph, None, writer)

    for edge in graph.edges():
        _write_edge(graph, edge, ec, writer)

    writer.unindent()
    writer.write_line("}")
    return writer.getvalue()


def to_dot(graph: "Graph", path, *, indent: str = ""):
    """Write :func:`write_dot` output to ``path`` (UTF-8)."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(write_dot(graph, indent))


def _write_subgraph(graph, v, writer):
    compound = graph.is_compound()
    children = graph.children(v) if compound else graph.nodes()
    for w in children:
        if not compound or not graph.children(w):
            _write_node(graph, w, writer)
            continue
        writer.write_line(f"subgraph {_id(w)} {{")
        writer.indent()
        label = graph.node(w)
        if isinstance(label, Mapping):
            for key, val in label.items():
                writer.write_line(f"{_id(key)}={_id(val)};")
        _write_subgraph(graph, w, writer)
        writer.unindent()
        writer.write_line("}")


def _write_node(graph, v, writer):
    writer.write(_id(v))
    _write_attrs(graph.node(v), writer)
    writer.write_line()


def _write_edge(graph, edge, ec, writer):
    writer.write(f"{_id(edge.v)} {ec} {_id(edge.w)}")
    _write_attrs(graph.edge(edge), writer)
    writer.write_line()


def _write_attrs(attrs, writer):
    if isinstance(attrs, Mapping) and attrs:
        writer.write(" [" + ",".join(f"{_id(k)}={_id(v)}" for k, v in attrs.items()) + "]")
