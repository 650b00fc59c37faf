"""
Graph construction.

- merge: union of sources into canonical records
- builder: cooperative node/edge construction
- filter: root-leaf pruning
- style: colors, labels, avatars
- network: layout engine protocol and headless implementation
- visualize: static HTML rendering
"""

from .builder import GraphBuilder, build_graph, build_graph_sync
from .filter import apply_leaf_filter, filter_root_leaves, find_root_leaves
from .merge import merge_sources
from .network import EdgeUpdate, HeadlessLayout, LayoutEngine, NodeStyle, NodeUpdate
from .style import color_from_id

__all__ = [
    "GraphBuilder", "build_graph", "build_graph_sync",
    "apply_leaf_filter", "filter_root_leaves", "find_root_leaves",
    "merge_sources",
    "EdgeUpdate", "HeadlessLayout", "LayoutEngine", "NodeStyle", "NodeUpdate",
    "color_from_id",
]
