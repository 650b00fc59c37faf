"""
Session.

A Session owns everything derived from one load: the augmented sources, the
canonical mapping, the root set, the built graph and the selection engine.
Callers hold the Session explicitly; there is no module-level state.

Loads and filter toggles are never patched in place. Each one rebuilds and
then swaps in a fresh ``LoadedGraph`` as a whole. Every rebuild is stamped
with a generation number; a build that finishes after a newer one has
started is discarded (last load wins).
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from .analysis.mutuals import SourceMutuals, mutuals_by_source
from .config import Settings
from .core.exceptions import MalformedSourceError, NodeNotFoundError
from .core.result import Err, Ok, Result
from .core.types import BuiltGraph, CanonicalRecord, Node, SelectionState
from .export import to_snapshot
from .graph.builder import GraphBuilder, ProgressCallback
from .graph.filter import apply_leaf_filter
from .graph.merge import merge_sources
from .graph.network import HeadlessLayout, LayoutEngine
from .interaction.selection import SearchDebouncer, SelectionEngine
from .parsing.origin import OriginAugmenter
from .parsing.source import ParsedSource, load_sources

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedGraph:
    """Immutable bundle of everything one load produced."""

    sources: Tuple[ParsedSource, ...]
    canonical: Mapping[str, CanonicalRecord]
    roots: FrozenSet[str]
    hide_leaves: bool
    full_graph: BuiltGraph
    graph: BuiltGraph

    @property
    def removed_count(self) -> int:
        return self.full_graph.node_count - self.graph.node_count


@dataclass
class LoadSummary:
    """What a load or rebuild produced, for status lines."""

    source_count: int
    node_count: int
    edge_count: int
    roots: List[str] = field(default_factory=list)
    hide_leaves: bool = False
    removed_count: int = 0
    superseded: bool = False


class Session:
    """Explicit context for one exploration session."""

    def __init__(self, layout: LayoutEngine | None = None, settings: Settings | None = None):
        self.layout = layout if layout is not None else HeadlessLayout()
        self.settings = settings or Settings()
        self.avatars = False
        self.current: Optional[LoadedGraph] = None
        self.selection: Optional[SelectionEngine] = None
        self._builder = GraphBuilder(self.settings)
        self._augmenter = OriginAugmenter(self.settings.identity_pattern)
        self._generation = 0

    # --- Loading ---

    async def load(
        self,
        files: Iterable[Tuple[str, str | bytes]],
        hide_leaves: bool | None = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Result[LoadSummary, MalformedSourceError]:
        """
        Load a batch of ``(filename, text)`` exports.

        ``hide_leaves`` defaults to True for multi-file batches and False for
        a single file. A malformed file returns Err and leaves the previously
        loaded graph untouched.
        """
        self._generation += 1
        generation = self._generation

        try:
            parsed = load_sources(files)
        except MalformedSourceError as e:
            logger.warning(f"Load aborted: {e}")
            return Err(e)

        batch = self._augmenter.augment(parsed)
        canonical = merge_sources(batch.sources)
        flag = batch.is_multi_source if hide_leaves is None else bool(hide_leaves)

        return Ok(await self._rebuild(
            generation,
            tuple(batch.sources),
            canonical,
            batch.roots,
            flag,
            on_progress,
        ))

    async def set_hide_leaves(
        self,
        enabled: bool,
        on_progress: Optional[ProgressCallback] = None,
    ) -> LoadSummary | None:
        """Toggle root-leaf filtering; rebuilds from the canonical mapping."""
        if self.current is None:
            return None
        self._generation += 1
        loaded = self.current
        return await self._rebuild(
            self._generation,
            loaded.sources,
            loaded.canonical,
            loaded.roots,
            bool(enabled),
            on_progress,
        )

    async def _rebuild(
        self,
        generation: int,
        sources: Tuple[ParsedSource, ...],
        canonical: Mapping[str, CanonicalRecord],
        roots: FrozenSet[str],
        hide_leaves: bool,
        on_progress: Optional[ProgressCallback],
    ) -> LoadSummary:
        full_graph = await self._builder.build(canonical, on_progress)
        graph = apply_leaf_filter(full_graph, roots) if hide_leaves else full_graph

        loaded = LoadedGraph(
            sources=sources,
            canonical=canonical,
            roots=roots,
            hide_leaves=hide_leaves,
            full_graph=full_graph,
            graph=graph,
        )
        summary = LoadSummary(
            source_count=len(sources),
            node_count=graph.node_count,
            edge_count=graph.edge_count,
            roots=sorted(roots),
            hide_leaves=hide_leaves,
            removed_count=loaded.removed_count,
        )

        if generation != self._generation:
            logger.warning(f"Discarding stale build {generation} (current is {self._generation})")
            summary.superseded = True
            return summary

        self.current = loaded
        self.layout.load(graph.nodes, graph.edges)
        self.selection = SelectionEngine(graph, self.layout, self.settings.palette, self.avatars)
        logger.info(
            f"Sources: {summary.source_count} | Nodes: {summary.node_count:,} | "
            f"Edges: {summary.edge_count:,}"
        )
        settled = await self._await_stabilized(graph.node_count)

        # A newer load may have swapped in while this one was waiting
        if generation != self._generation:
            logger.warning(f"Build {generation} superseded while stabilizing; leaving layout alone")
            summary.superseded = True
            return summary

        if not settled:
            logger.warning("Layout did not stabilize in time; freezing it")
        self.layout.freeze()
        return summary

    async def _await_stabilized(self, node_count: int) -> bool:
        timeout = self.settings.stabilize_timeout(node_count)
        try:
            await asyncio.wait_for(self.layout.wait_until_stabilized(), timeout)
        except asyncio.TimeoutError:
            logger.debug(f"No stabilization signal within {timeout:.1f}s")
            return False
        return True

    # --- Interaction ---

    def _engine(self) -> SelectionEngine:
        if self.selection is None:
            raise RuntimeError("No graph loaded")
        return self.selection

    def select(self, node_id: str) -> SelectionState:
        return self._engine().select(node_id)

    def search(self, query: str) -> SelectionState:
        return self._engine().search(query)

    def clear(self) -> SelectionState:
        return self._engine().clear()

    def debouncer(self) -> SearchDebouncer:
        """Search debouncer for the current graph, paced by ``frame_interval``."""
        return SearchDebouncer(self._engine(), self.settings.frame_interval)

    def set_avatars(self, enabled: bool) -> None:
        self.avatars = bool(enabled)
        if self.selection is not None:
            self.selection.set_avatars(self.avatars)

    # --- Views ---

    @property
    def graph(self) -> BuiltGraph:
        return self.current.graph if self.current else BuiltGraph()

    def get_node(self, node_id: str) -> Node:
        node = self.graph.get_node(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def describe(self, node_id: str) -> List[SourceMutuals]:
        """Mutuals of ``node_id`` grouped by source."""
        self.get_node(node_id)
        loaded = self.current
        return mutuals_by_source(
            loaded.sources,
            loaded.canonical,
            node_id,
            self.settings.identity_pattern,
            self.settings.max_listed_mutuals,
        )

    def snapshot(self) -> Dict[str, Any]:
        """Merged graph in the re-loadable export format."""
        if self.current is None:
            return {}
        return to_snapshot(self.current.canonical)

    def stats(self) -> Dict[str, int]:
        stats = self.graph.stats()
        if self.current is not None:
            stats["sources"] = len(self.current.sources)
            stats["roots"] = len(self.current.roots)
            stats["hidden_leaves"] = self.current.removed_count
        return stats
