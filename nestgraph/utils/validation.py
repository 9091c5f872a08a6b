import json
from collections.abc import Callable, Iterable, Mapping
from itertools import filterfalse
from typing import Any, TypeVar

import numpy as np

T = TypeVar("T")


def canonicalize(obj):
    """Recursively convert a label into a JSON-serializable structure
    that is independent of internal ordering.
    """
    if isinstance(obj, Mapping):
        # Convert dictionary keys to strings and sort the keys
        return {str(key): canonicalize(obj[key]) for key in sorted(obj.keys(), key=lambda x: str(x))}
    elif isinstance(obj, (list, tuple)):
        # Recursively canonicalize each element in the list or tuple
        return [canonicalize(item) for item in obj]
    elif isinstance(obj, (set, frozenset)):
        # Convert sets to a sorted list (sorting based on JSON string representation)
        return sorted([canonicalize(item) for item in obj], key=lambda x: json.dumps(x, sort_keys=True))
    elif isinstance(obj, (int, float, str, bool)) or obj is None:
        return obj
    elif isinstance(obj, np.generic):
        return obj.item()
    elif isinstance(obj, np.ndarray):
        return canonicalize(obj.tolist())
    else:
        # For non-standard objects, try using the __dict__ attribute if available
        if hasattr(obj, "__dict__"):
            return canonicalize(vars(obj))
        else:
            # Fall back to a string representation
            return str(obj)


def unique_iter(iterable: Iterable[T], key: Callable[[T], Any] | None = None) -> Iterable[T]:
    # Based on https://iteration-utilities.readthedocs.io/en/latest/generated/unique_everseen.html
    seen: set[Any] = set()
    seen_add = seen.add
    if key is None:
        for element in filterfalse(seen.__contains__, iterable):
            seen_add(element)
            yield element
    else:
        for element in iterable:
            k = key(element)
            if k not in seen:
                seen_add(k)
                yield element
