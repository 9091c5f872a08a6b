from .errors import CycleError, GraphError, MultiEdgeNotAllowedError, UnsupportedOperationError
from .graph import Graph
from .structure import DEFAULT_EDGE_NAME, Edge, edge_args_to_id, edge_args_to_obj, edge_obj_to_id

__all__ = [
    "Graph",
    "Edge",
    "DEFAULT_EDGE_NAME",
    "edge_args_to_id",
    "edge_args_to_obj",
    "edge_obj_to_id",
    "GraphError",
    "CycleError",
    "UnsupportedOperationError",
    "MultiEdgeNotAllowedError",
]
