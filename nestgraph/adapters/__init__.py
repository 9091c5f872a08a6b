from importlib import import_module, util

from .dataframe_adapter import from_dataframes, to_dataframes
from .dot import to_dot, write_dot
from .json_adapter import from_json, to_json
from .sparse_adapter import from_adjacency, to_adjacency

__all__ = [
    "available_backends",
    "load_adapter",
    "write_dot",
    "to_dot",
    "to_json",
    "from_json",
    "to_dataframes",
    "from_dataframes",
    "to_adjacency",
    "from_adjacency",
]

# name -> (import_name, submodule, class_name)
_BACKENDS = {
    "networkx": ("networkx", ".networkx", "NetworkXAdapter"),
}


def _is_installed(modname: str) -> bool:
    return util.find_spec(modname) is not None


def available_backends() -> dict:
    return {name: _is_installed(mod) for name, (mod, _, _) in _BACKENDS.items()}


def load_adapter(name: str, *args, **kwargs):
    if name not in _BACKENDS:
        raise ValueError(f"Unknown adapter '{name}'")
    modname, submod, cls = _BACKENDS[name]
    if not _is_installed(modname):
        raise ModuleNotFoundError(
            f"Optional backend '{name}' is not installed. "
            f"Install with `pip install nestgraph[{name}]`."
        )
    mod = import_module(__name__ + submod)
    return getattr(mod, cls)(*args, **kwargs)
