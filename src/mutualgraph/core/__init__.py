"""
Core modules for mutualgraph.

This package contains the fundamental building blocks:
- types: Data structures (records, Node, Edge, BuiltGraph)
- exceptions: Error taxonomy
- result: Ok/Err result type
"""

from .exceptions import (
    AugmentationFailure,
    DanglingReferenceWarning,
    MalformedSourceError,
    MutualGraphError,
    NodeNotFoundError,
)
from .result import Err, Ok, Result
from .types import (
    BuildPhase,
    BuildProgress,
    BuildStats,
    BuiltGraph,
    CanonicalRecord,
    Edge,
    FriendRecord,
    Node,
    NodeColor,
    SelectionMode,
    SelectionState,
)

__all__ = [
    # Types
    "BuildPhase", "BuildProgress", "BuildStats", "BuiltGraph",
    "CanonicalRecord", "Edge", "FriendRecord", "Node", "NodeColor",
    "SelectionMode", "SelectionState",
    # Errors
    "AugmentationFailure", "DanglingReferenceWarning", "MalformedSourceError",
    "MutualGraphError", "NodeNotFoundError",
    # Result
    "Err", "Ok", "Result",
]
