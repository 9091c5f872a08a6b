from .validation import canonicalize, unique_iter

__all__ = ["canonicalize", "unique_iter"]
