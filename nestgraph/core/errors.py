class GraphError(Exception):
    """Base class for structural errors raised by :class:`~nestgraph.core.graph.Graph`."""


class CycleError(GraphError, ValueError):
    """Raised when ``set_parent`` would make a node its own ancestor."""


class UnsupportedOperationError(GraphError, TypeError):
    """Raised when a compound-only operation is used on a non-compound graph."""


class MultiEdgeNotAllowedError(GraphError, ValueError):
    """Raised when a named edge is requested on a graph that is not a multigraph."""
