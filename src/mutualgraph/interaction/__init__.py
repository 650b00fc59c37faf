"""Interactive state layered on top of a built graph."""

from .selection import NodeRole, SearchDebouncer, SelectionEngine

__all__ = ["NodeRole", "SearchDebouncer", "SelectionEngine"]
