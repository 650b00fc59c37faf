"""
Graph Builder.

Turns the canonical mapping into nodes and a deduplicated undirected edge
list. Both phases run in bounded chunks and yield to the event loop between
chunks so that a host UI (or any other task) keeps running while tens of
thousands of edges are linked.

Edge linking:
1. For identity ``a`` and each ``b`` in its mutuals, skip dangling ``b``
   (no record) and self references.
2. Canonicalize the pair (lexicographic order) so that ``(a, b)`` and
   ``(b, a)`` collapse, regardless of which side listed the connection.
3. Emit each canonical pair once and bump both endpoints' degree.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Mapping, Optional, Set

from ..config import Settings
from ..core.types import (
    BuildPhase,
    BuildProgress,
    BuildStats,
    BuiltGraph,
    CanonicalRecord,
    Edge,
    Node,
)
from .style import clean_username, color_from_id, default_avatar_url

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BuildProgress], None]


class GraphBuilder:
    """Cooperative builder for the node/edge model."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()

    async def build(
        self,
        canonical: Mapping[str, CanonicalRecord],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BuiltGraph:
        nodes = await self._build_nodes(canonical, on_progress)
        edges, degree, stats = await self._link_edges(canonical, on_progress)

        for node in nodes:
            node.degree = degree[node.id]

        logger.info(
            f"Built graph: {len(nodes)} nodes, {len(edges)} edges "
            f"({stats.dangling} dangling, {stats.duplicates} duplicate references)"
        )
        return BuiltGraph(nodes=nodes, edges=edges, build_stats=stats)

    async def _build_nodes(
        self,
        canonical: Mapping[str, CanonicalRecord],
        on_progress: Optional[ProgressCallback],
    ) -> List[Node]:
        nodes: List[Node] = []
        total = len(canonical)
        chunk = self.settings.node_chunk

        for i, (node_id, info) in enumerate(canonical.items()):
            nodes.append(make_node(node_id, info))
            if (i + 1) % chunk == 0:
                _report(on_progress, BuildPhase.NODES, i + 1, total)
                await asyncio.sleep(0)

        _report(on_progress, BuildPhase.NODES, total, total)
        return nodes

    async def _link_edges(
        self,
        canonical: Mapping[str, CanonicalRecord],
        on_progress: Optional[ProgressCallback],
    ) -> tuple[List[Edge], Dict[str, int], BuildStats]:
        edges: List[Edge] = []
        seen: Set[str] = set()
        degree: Dict[str, int] = {node_id: 0 for node_id in canonical}
        stats = BuildStats()

        total = sum(len(info.mutual_ids) for info in canonical.values())
        chunk = self.settings.edge_chunk

        for a, info in canonical.items():
            for b in sorted(info.mutual_ids):
                stats.pairs_seen += 1
                if stats.pairs_seen % chunk == 0:
                    _report(on_progress, BuildPhase.EDGES, stats.pairs_seen, total)
                    await asyncio.sleep(0)

                if b not in canonical:
                    stats.dangling += 1
                    logger.debug(f"Dropping dangling reference {a} -> {b}")
                    continue
                if a == b:
                    stats.self_refs += 1
                    continue

                edge = Edge.between(a, b)
                if edge.key in seen:
                    stats.duplicates += 1
                    continue
                seen.add(edge.key)
                edges.append(edge)
                degree[edge.source] += 1
                degree[edge.target] += 1

        _report(on_progress, BuildPhase.EDGES, total, total)
        return edges, degree, stats


def make_node(node_id: str, info: CanonicalRecord) -> Node:
    """Node for one canonical record (degree filled in after linking)."""
    label = clean_username(info.name) or node_id
    return Node(
        id=node_id,
        label=label,
        color=color_from_id(node_id),
        avatar_url=info.avatar_url or default_avatar_url(node_id, info.name),
    )


def _report(callback: Optional[ProgressCallback], phase: BuildPhase, done: int, total: int) -> None:
    if callback is None:
        return
    callback(BuildProgress(phase=phase, done=done, total=total))


async def build_graph(
    canonical: Mapping[str, CanonicalRecord],
    settings: Settings | None = None,
    on_progress: Optional[ProgressCallback] = None,
) -> BuiltGraph:
    return await GraphBuilder(settings).build(canonical, on_progress)


def build_graph_sync(
    canonical: Mapping[str, CanonicalRecord],
    settings: Settings | None = None,
) -> BuiltGraph:
    """Blocking wrapper for callers that do not run an event loop (CLI, scripts)."""
    return asyncio.run(build_graph(canonical, settings))
