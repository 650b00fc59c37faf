"""
Leaf Filter.

Removes nodes whose only connection is to an origin (root) node. In a
multi-source load every origin is wired to everyone in its own export, so
people seen by a single export collapse into a fan of degree-1 leaves
around that origin; hiding them leaves the shared structure readable.

The filter is a single pass: removing a leaf never re-evaluates its former
neighbor within the same call. Roots are never removed.
"""

import logging
from typing import AbstractSet, Dict, List, Set, Tuple

from ..core.types import BuiltGraph, Edge, Node

logger = logging.getLogger(__name__)


def find_root_leaves(nodes: List[Node], edges: List[Edge], roots: AbstractSet[str]) -> Set[str]:
    """Ids of non-root nodes with exactly one neighbor, that neighbor being a root."""
    adjacency: Dict[str, Set[str]] = {node.id: set() for node in nodes}
    for edge in edges:
        adjacency.setdefault(edge.source, set()).add(edge.target)
        adjacency.setdefault(edge.target, set()).add(edge.source)

    leaves = set()
    for node_id, neighbors in adjacency.items():
        if len(neighbors) != 1 or node_id in roots:
            continue
        (only,) = neighbors
        if only in roots:
            leaves.add(node_id)
    return leaves


def filter_root_leaves(
    nodes: List[Node],
    edges: List[Edge],
    roots: AbstractSet[str],
) -> Tuple[List[Node], List[Edge]]:
    """
    Drop root leaves and every edge touching them.

    Returns the inputs unchanged when there are no roots or nothing to drop.
    Degrees on the returned nodes are not updated here; use
    ``apply_leaf_filter`` to get a consistent BuiltGraph.
    """
    if not roots:
        return nodes, edges

    removed = find_root_leaves(nodes, edges, roots)
    if not removed:
        return nodes, edges

    kept_nodes = [n for n in nodes if n.id not in removed]
    kept_edges = [e for e in edges if e.source not in removed and e.target not in removed]
    logger.info(f"Leaf filter removed {len(removed)} nodes and {len(edges) - len(kept_edges)} edges")
    return kept_nodes, kept_edges


def apply_leaf_filter(graph: BuiltGraph, roots: AbstractSet[str]) -> BuiltGraph:
    """Filtered copy of ``graph`` with degrees recomputed from the surviving edges."""
    nodes, edges = filter_root_leaves(graph.nodes, graph.edges, roots)
    if nodes is graph.nodes and edges is graph.edges:
        return graph
    return graph.with_edges(nodes, edges)
