import inspect
import json
import time
from datetime import UTC, datetime
from functools import wraps
from itertools import chain

import numpy as np
import polars as pl

from ..utils.validation import unique_iter
from ._state import _State
from .errors import CycleError, MultiEdgeNotAllowedError, UnsupportedOperationError
from .structure import (
    Edge,
    as_edge_parts,
    edge_args_to_id,
    edge_args_to_obj,
    edge_obj_to_id,
    is_edge_like,
)

# Marks "no label argument given"; None is a legal label.
_MISSING = object()


class _Root:
    __slots__ = ()

    def __repr__(self):
        return "_ROOT"

    def __reduce__(self):
        return "_ROOT"


# Parent of every top-level node in a compound graph. Not an addressable node.
# Copies and pickles resolve back to this same object.
_ROOT = _Root()


class _constant:
    """Label generator that ignores its arguments. Picklable, unlike a closure."""

    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __call__(self, *args):
        return self.value


def _log_mutation(fn):
    """Wrap a Graph mutator: bump the version and log the call once per outermost call."""
    op = fn.__name__
    sig = inspect.signature(fn)

    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        self._mutation_depth += 1
        try:
            result = fn(self, *args, **kwargs)
        finally:
            self._mutation_depth -= 1
        # nested mutators (set_edge -> set_node) count as one change
        if self._mutation_depth == 0:
            self._state.touch()
            if self._history_enabled:
                bound = sig.bind(self, *args, **kwargs)
                payload = {
                    k: v for k, v in bound.arguments.items() if k != "self" and v is not _MISSING
                }
                self._log_event(op, **payload)
        return result

    return wrapper


def _increment(counts, k):
    counts[k] = counts.get(k, 0) + 1


def _decrement(counts, k):
    counts[k] -= 1
    if not counts[k]:
        del counts[k]


class Graph:
    """In-memory graph with optional parallel edges and compound nesting.

    Nodes are string ids carrying an arbitrary label. Edges are identified by
    their endpoints plus an optional name, which only multigraphs accept. In
    a compound graph every node also has a parent (top-level nodes hang off an
    implicit root) and the parent relation is kept acyclic.

    Parameters
    ----------
    directed : bool, default True
        Whether ``(v, w)`` and ``(w, v)`` are distinct edges.
    multigraph : bool, default False
        Allow several edges between the same endpoints, told apart by name.
    compound : bool, default False
        Enable the parent/child hierarchy (``set_parent``, ``parent``, ``children``).
    history : bool, default False
        Record every mutation in an in-memory log (see :meth:`history`).

    Notes
    -----
    - Lookups for unknown nodes return ``None`` rather than raising; use
      :meth:`has_node` / :meth:`has_edge` to tell an absent entry from a stored
      ``None`` label.
    - Mutators return the graph so calls can be chained.
    - Not safe for concurrent mutation; callers must serialize access.

    See Also
    --------
    set_node, set_edge, set_parent, filter_nodes

    """

    # Mutating methods wrapped by the history hooks. Add here if you add new mutators.
    _MUTATORS = (
        "set_graph",
        "set_default_node_label",
        "set_default_edge_label",
        "set_node",
        "set_nodes",
        "remove_node",
        "set_parent",
        "set_edge",
        "set_path",
        "remove_edge",
    )

    # Construction

    def __init__(self, directed=True, multigraph=False, compound=False, *, history=False):
        self._directed = bool(directed)
        self._multigraph = bool(multigraph)
        self._compound = bool(compound)

        # Label for the graph itself
        self._label = None

        self._default_node_label_fn = _constant(None)
        self._default_edge_label_fn = _constant(None)

        self._nodes = {}  # v -> label

        if self._compound:
            self._parent = {}  # v -> parent id or _ROOT
            self._children = {_ROOT: {}}  # v -> {child: True}

        # Adjacency indices
        self._in = {}  # w -> {edge key: Edge}
        self._preds = {}  # w -> {v: number of edges v -> w}
        self._out = {}  # v -> {edge key: Edge}
        self._sucs = {}  # v -> {w: number of edges v -> w}

        self._edge_objs = {}  # edge key -> Edge
        self._edge_labels = {}  # edge key -> label

        self._node_count = 0
        self._edge_count = 0

        # History and versioning
        self._state = _State()
        self._history_enabled = bool(history)
        self._history = []  # list[dict]
        self._history_clock0 = time.perf_counter_ns()
        self._mutation_depth = 0

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._install_history_hooks()

    # Graph-level

    def is_directed(self) -> bool:
        return self._directed

    def is_multigraph(self) -> bool:
        return self._multigraph

    def is_compound(self) -> bool:
        return self._compound

    def set_graph(self, label):
        """Set the label of the graph itself."""
        self._label = label
        return self

    def graph(self):
        """Return the graph-level label (``None`` when unset)."""
        return self._label

    # Nodes

    def set_default_node_label(self, new_default):
        """Set the label given to nodes created without an explicit label.

        Parameters
        ----------
        new_default : callable or object
            Either ``fn(v) -> label`` or a constant label value.

        Returns
        -------
        Graph

        """
        self._default_node_label_fn = new_default if callable(new_default) else _constant(new_default)
        return self

    def node_count(self) -> int:
        return self._node_count

    def nodes(self) -> list[str]:
        """All node ids."""
        return list(self._nodes)

    def sources(self) -> list[str]:
        """Nodes without incoming edges."""
        return [v for v in self._nodes if not self._in[v]]

    def sinks(self) -> list[str]:
        """Nodes without outgoing edges."""
        return [v for v in self._nodes if not self._out[v]]

    def set_nodes(self, vs, label=_MISSING):
        """Call :meth:`set_node` for every id in ``vs`` with the same label argument."""
        for v in vs:
            self.set_node(v, label)
        return self

    def set_node(self, v, label=_MISSING):
        """Create a node, or update the label of an existing one.

        Parameters
        ----------
        v : str
            Node id. Non-string ids are converted with ``str()``.
        label : object, optional
            Node label. When omitted, a new node gets the default node label
            and an existing node keeps its current label. An explicit ``None``
            is stored as given.

        Returns
        -------
        Graph

        Notes
        -----
        In a compound graph a new node is attached to the root.

        """
        v = str(v)
        if v in self._nodes:
            if label is not _MISSING:
                self._nodes[v] = label
            return self

        self._nodes[v] = self._default_node_label_fn(v) if label is _MISSING else label
        if self._compound:
            self._parent[v] = _ROOT
            self._children[v] = {}
            self._children[_ROOT][v] = True
        self._in[v] = {}
        self._preds[v] = {}
        self._out[v] = {}
        self._sucs[v] = {}
        self._node_count += 1
        return self

    def node(self, v):
        """Label of node ``v``, or ``None`` if the node does not exist."""
        return self._nodes.get(str(v))

    def has_node(self, v) -> bool:
        return str(v) in self._nodes

    def remove_node(self, v):
        """Remove a node together with every incident edge.

        Parameters
        ----------
        v : str

        Returns
        -------
        Graph

        Notes
        -----
        - Does nothing when ``v`` is absent.
        - In a compound graph the children of ``v`` move to the root.

        """
        v = str(v)
        if v not in self._nodes:
            return self

        del self._nodes[v]
        if self._compound:
            self._remove_from_parents_child_list(v)
            del self._parent[v]
            for child in self._children.pop(v):
                self._parent[child] = _ROOT
                self._children[_ROOT][child] = True

        for e in list(self._in[v]):
            self._remove_edge_key(e)
        del self._in[v]
        del self._preds[v]
        for e in list(self._out[v]):
            self._remove_edge_key(e)
        del self._out[v]
        del self._sucs[v]
        self._node_count -= 1
        return self

    # Hierarchy

    def set_parent(self, v, parent=None):
        """Move ``v`` under ``parent`` (or to the top level when ``parent`` is None).

        Both nodes are created if missing.

        Parameters
        ----------
        v : str
        parent : str, optional

        Returns
        -------
        Graph

        Raises
        ------
        UnsupportedOperationError
            If the graph is not compound.
        CycleError
            If ``v`` is ``parent`` or one of its ancestors. The hierarchy is
            left unchanged.

        """
        if not self._compound:
            raise UnsupportedOperationError("Cannot set parent in a non-compound graph")

        v = str(v)
        if parent is None:
            parent = _ROOT
        else:
            parent = str(parent)
            ancestor = parent
            while ancestor is not None:
                if ancestor == v:
                    raise CycleError(f"Setting {parent} as parent of {v} would create a cycle")
                ancestor = self.parent(ancestor)
            self.set_node(parent)

        self.set_node(v)
        self._remove_from_parents_child_list(v)
        self._parent[v] = parent
        self._children[parent][v] = True
        return self

    def _remove_from_parents_child_list(self, v):
        del self._children[self._parent[v]][v]

    def parent(self, v):
        """Parent id of ``v``; ``None`` for top-level, unknown, or non-compound."""
        if self._compound:
            parent = self._parent.get(str(v))
            if parent is not _ROOT:
                return parent
        return None

    def children(self, v=None):
        """Direct children of ``v``, or the top-level nodes when ``v`` is None.

        Returns
        -------
        list[str] or None
            ``None`` when ``v`` is not a node. A non-compound graph reports
            every node as top-level and no node as having children.

        """
        if self._compound:
            children = self._children.get(_ROOT if v is None else str(v))
            if children is not None:
                return list(children)
            return None
        if v is None:
            return self.nodes()
        if self.has_node(v):
            return []
        return None

    # Adjacency

    def predecessors(self, v):
        preds = self._preds.get(str(v))
        if preds is not None:
            return list(preds)
        return None

    def successors(self, v):
        sucs = self._sucs.get(str(v))
        if sucs is not None:
            return list(sucs)
        return None

    def neighbors(self, v):
        """Predecessors and successors of ``v`` without duplicates (``None`` if unknown)."""
        v = str(v)
        preds = self._preds.get(v)
        if preds is None:
            return None
        return list(unique_iter(chain(preds, self._sucs[v])))

    def is_leaf(self, v) -> bool:
        """True when ``v`` has no successors (directed) or no neighbors (undirected).

        Raises
        ------
        KeyError
            If ``v`` is not a node.

        """
        neighbors = self.successors(v) if self._directed else self.neighbors(v)
        if neighbors is None:
            raise KeyError(f"Node {v} not found")
        return not neighbors

    # Slicing / copying

    def filter_nodes(self, predicate) -> "Graph":
        """Build a new graph holding the nodes for which ``predicate(v)`` is true.

        Parameters
        ----------
        predicate : callable
            ``predicate(v) -> bool`` over node ids.

        Returns
        -------
        Graph
            Same options and graph label. Kept nodes and the edges between
            them carry their original labels. In a compound graph every kept
            node is attached to its nearest kept ancestor.

        """
        copy = self.__class__(
            directed=self._directed, multigraph=self._multigraph, compound=self._compound
        )
        copy.set_graph(self._label)

        for v, label in self._nodes.items():
            if predicate(v):
                copy.set_node(v, label)

        for e, edge in self._edge_objs.items():
            if copy.has_node(edge.v) and copy.has_node(edge.w):
                copy.set_edge(edge, self._edge_labels[e])

        if self._compound:
            memo = {}
            for v in copy.nodes():
                copy.set_parent(v, self._nearest_kept_ancestor(v, copy, memo))

        return copy

    def _nearest_kept_ancestor(self, v, kept, memo):
        # memo: dropped ancestor -> its nearest kept ancestor (None for the root)
        dropped = []
        ancestor = self.parent(v)
        while ancestor is not None and not kept.has_node(ancestor):
            if ancestor in memo:
                ancestor = memo[ancestor]
                break
            dropped.append(ancestor)
            ancestor = self.parent(ancestor)
        for a in dropped:
            memo[a] = ancestor
        return ancestor

    def copy(self) -> "Graph":
        """Independent copy with the same nodes, edges, hierarchy and default labels."""
        g = self.filter_nodes(lambda v: True)
        g._default_node_label_fn = self._default_node_label_fn
        g._default_edge_label_fn = self._default_edge_label_fn
        return g

    # Edges

    def set_default_edge_label(self, new_default):
        """Set the label given to edges created without an explicit label.

        ``new_default`` is either ``fn(v, w, name) -> label`` or a constant.
        """
        self._default_edge_label_fn = new_default if callable(new_default) else _constant(new_default)
        return self

    def edge_count(self) -> int:
        return self._edge_count

    def edges(self) -> list[Edge]:
        """All edge descriptors. Order is not part of the contract."""
        return list(self._edge_objs.values())

    def set_path(self, vs, label=_MISSING):
        """Add an edge between every pair of consecutive ids in ``vs``."""
        vs = list(vs)
        for v, w in zip(vs, vs[1:]):
            self.set_edge(v, w, label)
        return self

    def set_edge(self, v, w=_MISSING, label=_MISSING, name=None):
        """Create an edge, or update the label of an existing one.

        Accepts ``set_edge(v, w, label=..., name=...)`` or
        ``set_edge(edge, label)`` where ``edge`` is an :class:`Edge`, a mapping
        with ``"v"``/``"w"``/``"name"`` keys, or an object with those attributes.

        Parameters
        ----------
        v : str or Edge
        w : str
        label : object, optional
            Edge label. Omitted means "default label" for a new edge and "keep"
            for an existing one.
        name : str, optional
            Discriminator for parallel edges; multigraphs only.

        Returns
        -------
        Graph

        Raises
        ------
        MultiEdgeNotAllowedError
            If ``name`` is given, the edge is new and the graph is not a
            multigraph. Nothing is modified.
        TypeError
            If a descriptor is combined with ``name=``, or the label is given
            both positionally and as ``label=``.

        Notes
        -----
        Missing endpoints are created. For undirected graphs the endpoints are
        stored in sorted order.

        """
        if is_edge_like(v):
            if w is not _MISSING:
                if label is not _MISSING:
                    raise TypeError("set_edge() got the label twice")
                label = w
            if name is not None:
                raise TypeError("set_edge() got the name both in the edge descriptor and as name=")
            v, w, name = as_edge_parts(v)
        elif w is _MISSING:
            raise TypeError("set_edge() needs a target node or an edge descriptor")

        v = str(v)
        w = str(w)
        if name is not None:
            name = str(name)

        e = edge_args_to_id(self._directed, v, w, name)
        if e in self._edge_labels:
            if label is not _MISSING:
                self._edge_labels[e] = label
            return self

        if name is not None and not self._multigraph:
            raise MultiEdgeNotAllowedError("Cannot set a named edge when multigraph=False")

        if label is _MISSING:
            label = self._default_edge_label_fn(v, w, name)

        self.set_node(v)
        self.set_node(w)

        edge = edge_args_to_obj(self._directed, v, w, name)
        v, w = edge.v, edge.w

        self._edge_labels[e] = label
        self._edge_objs[e] = edge
        _increment(self._preds[w], v)
        _increment(self._sucs[v], w)
        self._in[w][e] = edge
        self._out[v][e] = edge
        self._edge_count += 1
        return self

    def _edge_key(self, v, w, name):
        if w is None:
            if not is_edge_like(v):
                raise TypeError("Expected (v, w[, name]) or an edge descriptor")
            return edge_obj_to_id(self._directed, v)
        return edge_args_to_id(self._directed, v, w, name)

    def edge(self, v, w=None, name=None):
        """Label of an edge, or ``None`` if it does not exist.

        Takes ``(v, w, name=None)`` or a single edge descriptor.
        """
        return self._edge_labels.get(self._edge_key(v, w, name))

    def has_edge(self, v, w=None, name=None) -> bool:
        return self._edge_key(v, w, name) in self._edge_labels

    def remove_edge(self, v, w=None, name=None):
        """Remove an edge given as ``(v, w, name=None)`` or a descriptor. No-op if absent."""
        self._remove_edge_key(self._edge_key(v, w, name))
        return self

    def _remove_edge_key(self, e):
        edge = self._edge_objs.pop(e, None)
        if edge is None:
            return
        del self._edge_labels[e]
        _decrement(self._preds[edge.w], edge.v)
        _decrement(self._sucs[edge.v], edge.w)
        del self._in[edge.w][e]
        del self._out[edge.v][e]
        self._edge_count -= 1

    def in_edges(self, v, u=None):
        """Edges entering ``v``, optionally only those coming from ``u``.

        Returns
        -------
        list[Edge] or None
            ``None`` when ``v`` is not a node.

        """
        in_v = self._in.get(str(v))
        if in_v is None:
            return None
        edges = list(in_v.values())
        if u is None:
            return edges
        u = str(u)
        return [edge for edge in edges if edge.v == u]

    def out_edges(self, v, w=None):
        """Edges leaving ``v``, optionally only those going to ``w`` (``None`` if ``v`` is unknown)."""
        out_v = self._out.get(str(v))
        if out_v is None:
            return None
        edges = list(out_v.values())
        if w is None:
            return edges
        w = str(w)
        return [edge for edge in edges if edge.w == w]

    def node_edges(self, v, w=None):
        """All edges incident to ``v``, optionally only those also touching ``w``."""
        in_edges = self.in_edges(v, w)
        if in_edges is None:
            return None
        return list(unique_iter(chain(in_edges, self.out_edges(v, w))))

    # Dunder helpers

    def __len__(self):
        return self._node_count

    def __contains__(self, v):
        return self.has_node(v)

    def __repr__(self):
        return (
            f"Graph(directed={self._directed}, multigraph={self._multigraph}, "
            f"compound={self._compound}, nodes={self._node_count}, edges={self._edge_count})"
        )

    # Lazy proxies

    @property
    def nx(self):
        """Accessor for the lazy NX proxy.
        Usage: G.nx.algorithm(); e.g: G.nx.shortest_path("a", "c"), G.nx.is_directed_acyclic_graph()
        """
        from ..adapters.manager import get_proxy

        return get_proxy("networkx", self)

    # History and Timeline

    def _utcnow_iso(self) -> str:
        return datetime.now(UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")

    def _jsonify(self, x):
        # Make args JSON-safe & compact.
        if x is None or isinstance(x, (bool, int, float, str)):
            return x
        if isinstance(x, (set, frozenset)):
            return sorted(self._jsonify(v) for v in x)
        if isinstance(x, (list, tuple)):
            return [self._jsonify(v) for v in x]
        if isinstance(x, dict):
            return {str(k): self._jsonify(v) for k, v in x.items()}
        # NumPy scalars
        if isinstance(x, np.generic):
            return x.item()
        # Functions, graphs, or other heavy objects -> just a tag
        t = type(x).__name__
        return f"<<{t}>>"

    def _log_event(self, op: str, **fields):
        if not self._history_enabled:
            return
        evt = {
            "version": self._state.version,
            "ts_utc": self._utcnow_iso(),  # ISO-8601 with Z
            "mono_ns": time.perf_counter_ns() - self._history_clock0,
            "op": op,
        }
        for k, v in fields.items():
            evt[k] = self._jsonify(v)
        self._history.append(evt)

    @classmethod
    def _install_history_hooks(cls):
        # Class-level: instances hold no wrapper closures.
        for name in cls._MUTATORS:
            fn = cls.__dict__.get(name)
            # Only methods defined here, and never twice
            if fn is not None and getattr(fn, "__wrapped__", None) is None:
                setattr(cls, name, _log_mutation(fn))

    @property
    def version(self) -> int:
        """Number of completed mutations since construction."""
        return self._state.version

    def history(self, as_df: bool = False):
        """Return the append-only mutation history.

        Parameters
        ----------
        as_df : bool, default False
            If True, return a Polars DF [DataFrame]; otherwise return a list of dicts.

        Returns
        -------
        list[dict] or polars.DataFrame
            Each event includes 'version' (mutation count after the call),
            'ts_utc' (ISO-8601 UTC), 'mono_ns' (monotonic nanoseconds since the
            graph was created), 'op' and the call arguments. In the DataFrame
            form the call arguments are JSON-encoded strings.

        """
        if not as_df:
            return list(self._history)
        return self._history_frame()

    def _history_frame(self) -> pl.DataFrame:
        fixed = ("version", "ts_utc", "mono_ns", "op")
        rows = []
        for evt in self._history:
            row = {k: evt[k] for k in fixed}
            for k, v in evt.items():
                if k not in fixed:
                    row[k] = json.dumps(v, ensure_ascii=False)
            rows.append(row)
        if not rows:
            return pl.DataFrame(
                schema={"version": pl.Int64, "ts_utc": pl.Utf8, "mono_ns": pl.Int64, "op": pl.Utf8}
            )
        return pl.DataFrame(rows, infer_schema_length=None)

    def export_history(self, path: str) -> int:
        """Write the mutation history to disk.

        Parameters
        ----------
        path : str
            Output path. Supported extensions: '.parquet', '.ndjson' (a.k.a. '.jsonl'),
            '.json', '.csv'. Unknown extensions default to Parquet by appending '.parquet'.

        Returns
        -------
        int
            Number of events written. Returns 0 if the history is empty.

        """
        if not self._history:
            return 0
        path = str(path)
        p = path.lower()
        if p.endswith(".ndjson") or p.endswith(".jsonl"):
            with open(path, "w", encoding="utf-8") as f:
                for evt in self._history:
                    f.write(json.dumps(evt, ensure_ascii=False) + "\n")
            return len(self._history)
        if p.endswith(".json"):
            with open(path, "w", encoding="utf-8") as f:
                json.dump(self._history, f, ensure_ascii=False)
            return len(self._history)
        df = self._history_frame()
        if p.endswith(".csv"):
            df.write_csv(path)
        elif p.endswith(".parquet"):
            df.write_parquet(path)
        else:
            df.write_parquet(path + ".parquet")
        return df.height

    def enable_history(self, flag: bool = True):
        """Start (or, with ``flag=False``, pause) recording mutations."""
        self._history_enabled = bool(flag)

    def clear_history(self):
        """Clear the in-memory mutation log. Previously exported files are kept."""
        self._history.clear()

    def mark(self, label: str):
        """Insert a manual marker event (``op='mark'``) into the history."""
        self._log_event("mark", label=label)


Graph._install_history_hooks()
