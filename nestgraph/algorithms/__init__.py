from .components import components

__all__ = ["components"]
