"""
Layout engine adapter.

The force-directed layout / rendering engine is an external collaborator.
The core only relies on the small ``LayoutEngine`` protocol below: load a
node and edge list, push partial attribute updates, ask for a node's
neighbors, focus the view on a node, and wait for the layout to settle.

``HeadlessLayout`` implements the protocol without drawing anything. It
keeps the adjacency in a rustworkx graph (with the usual string-id to
integer-index bimap) and records the visual attributes it was given, so it
backs the CLI and the tests.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Protocol, Set

import rustworkx as rx
from pydantic import BaseModel

from ..core.types import Edge, Node

logger = logging.getLogger(__name__)


class NodeStyle(BaseModel):
    """Visual attributes of a node that the selection engine controls."""
    background: str | None = None
    border: str
    opacity: float = 1.0
    border_width: int = 1


class NodeUpdate(BaseModel):
    """Partial node update pushed to the layout engine."""
    id: str
    style: NodeStyle


class EdgeUpdate(BaseModel):
    """Partial edge update pushed to the layout engine."""
    id: str
    hidden: bool


class LayoutEngine(Protocol):
    """What the core needs from a layout / rendering engine."""

    def load(self, nodes: List[Node], edges: List[Edge]) -> None:
        ...

    def update(self, node_updates: Iterable[NodeUpdate], edge_updates: Iterable[EdgeUpdate]) -> None:
        ...

    def neighbors(self, node_id: str) -> Set[str]:
        ...

    def focus(self, node_id: str) -> None:
        ...

    async def wait_until_stabilized(self) -> None:
        """Return once the layout has settled."""
        ...

    def freeze(self) -> None:
        """Stop the simulation where it is."""
        ...


class HeadlessLayout:
    """
    LayoutEngine without a screen.

    Adjacency queries run on a rustworkx PyGraph. The layout counts as
    stabilized as soon as it is loaded unless ``auto_stabilize`` is False,
    in which case ``mark_stabilized`` must be called (tests use this to
    exercise the stabilization timeout).
    """

    def __init__(self, auto_stabilize: bool = True):
        self.auto_stabilize = auto_stabilize
        self._graph = rx.PyGraph(multigraph=False)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._edge_hidden: Dict[str, bool] = {}
        self._styles: Dict[str, NodeStyle] = {}
        self._stabilized = asyncio.Event()
        self.focused_id: Optional[str] = None
        self.frozen = False
        self.update_calls = 0

    # --- LayoutEngine ---

    def load(self, nodes: List[Node], edges: List[Edge]) -> None:
        self._graph = rx.PyGraph(multigraph=False)
        self._id_to_idx.clear()
        self._idx_to_id.clear()
        self._edge_hidden.clear()
        self._styles.clear()
        self.focused_id = None
        self.frozen = False
        self._stabilized = asyncio.Event()

        for node in nodes:
            idx = self._graph.add_node(node.id)
            self._id_to_idx[node.id] = idx
            self._idx_to_id[idx] = node.id
            self._styles[node.id] = NodeStyle(
                background=node.color.background,
                border=node.color.border,
            )

        for edge in edges:
            u = self._id_to_idx.get(edge.source)
            v = self._id_to_idx.get(edge.target)
            if u is None or v is None:
                continue
            self._graph.add_edge(u, v, edge.key)
            self._edge_hidden[edge.key] = False

        logger.debug(f"Layout loaded {self._graph.num_nodes()} nodes, {self._graph.num_edges()} edges")
        if self.auto_stabilize:
            self._stabilized.set()

    def update(self, node_updates: Iterable[NodeUpdate], edge_updates: Iterable[EdgeUpdate]) -> None:
        self.update_calls += 1
        for upd in node_updates:
            if upd.id in self._styles:
                self._styles[upd.id] = upd.style
        for upd in edge_updates:
            if upd.id in self._edge_hidden:
                self._edge_hidden[upd.id] = upd.hidden

    def neighbors(self, node_id: str) -> Set[str]:
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return set()
        return {self._idx_to_id[n] for n in self._graph.neighbors(idx)}

    def focus(self, node_id: str) -> None:
        if node_id in self._id_to_idx:
            self.focused_id = node_id

    async def wait_until_stabilized(self) -> None:
        await self._stabilized.wait()

    def freeze(self) -> None:
        self.frozen = True

    # --- Inspection helpers ---

    def mark_stabilized(self) -> None:
        self._stabilized.set()

    @property
    def is_stabilized(self) -> bool:
        return self._stabilized.is_set()

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def style_of(self, node_id: str) -> NodeStyle | None:
        return self._styles.get(node_id)

    def visible_edge_keys(self) -> Set[str]:
        return {key for key, hidden in self._edge_hidden.items() if not hidden}

    def hidden_edge_keys(self) -> Set[str]:
        return {key for key, hidden in self._edge_hidden.items() if hidden}
