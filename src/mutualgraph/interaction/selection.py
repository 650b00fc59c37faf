"""
Selection/Search Engine.

Interactive state over a built graph: a state machine over
``idle | selected(id) | searching(query)`` plus the node colors and edge
visibility derived from it.

- select(id): the node is highlighted, its neighbors muted, everything else
  dimmed; only edges among ``{id} | neighbors`` stay visible.
- search(query): case-insensitive substring match on labels. An empty query
  clears. A single match behaves exactly like selecting that node. Several
  matches highlight the matches, mute their neighbors, dim the rest and
  restrict edges to ``matched | neighbors``; the view focuses the first match.
- clear(): base colors, full edge visibility, idle.

Styling is a pure function of (graph, state, palette, avatar mode). Only the
attributes that differ from what was last pushed are sent to the layout.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional, Set

from ..config import Palette, Settings
from ..core.types import BuiltGraph, Node, SelectionMode, SelectionState
from ..graph.network import EdgeUpdate, LayoutEngine, NodeStyle, NodeUpdate

logger = logging.getLogger(__name__)


class NodeRole:
    """Role of a node in the current highlight."""

    BASE = "base"
    FOCUS = "focus"
    NEIGHBOR = "neighbor"
    DIMMED = "dimmed"


class SelectionEngine:
    """Owns the selection state for one built graph."""

    def __init__(
        self,
        graph: BuiltGraph,
        layout: LayoutEngine,
        palette: Palette | None = None,
        avatars: bool = False,
    ):
        self.graph = graph
        self.layout = layout
        self.palette = palette or Palette()
        self.avatars = avatars
        self._state = SelectionState()
        self._labels: Dict[str, str] = {n.id: n.label.lower() for n in graph.nodes}
        # What layout.load() shows before any update
        self._applied: Dict[str, NodeStyle] = {
            n.id: NodeStyle(background=n.color.background, border=n.color.border)
            for n in graph.nodes
        }
        self._hidden_edges: Set[str] = set()
        if self.avatars:
            self._render(set(), set(), search=False)

    @property
    def state(self) -> SelectionState:
        return self._state.model_copy(deep=True)

    # --- Transitions ---

    def select(self, node_id: str, focus: bool = True) -> SelectionState:
        """Select a node (pointer click)."""
        if self.graph.get_node(node_id) is None:
            logger.debug(f"Ignoring selection of unknown node {node_id}")
            return self.clear()

        neighbors = set(self.layout.neighbors(node_id))
        self._state = SelectionState(
            mode=SelectionMode.SELECTED,
            selected_id=node_id,
            neighbor_ids=neighbors,
        )
        self._render({node_id}, neighbors, search=False)
        if focus:
            self.layout.focus(node_id)
        return self.state

    def search(self, query: str) -> SelectionState:
        """Highlight nodes whose label contains ``query``."""
        q = (query or "").strip().lower()
        if not q:
            return self.clear()

        matched = self.match(q)
        if not matched:
            self._state = SelectionState(mode=SelectionMode.SEARCHING, query=q)
            self._render(set(), set(), search=True)
            return self.state

        if len(matched) == 1:
            self.select(matched[0], focus=True)
            self._state = self._state.model_copy(update={"query": q})
            return self.state

        matched_set = set(matched)
        neighbors: Set[str] = set()
        for node_id in matched:
            neighbors |= set(self.layout.neighbors(node_id))

        self._state = SelectionState(
            mode=SelectionMode.SEARCHING,
            matched_ids=matched_set,
            neighbor_ids=neighbors - matched_set,
            query=q,
        )
        self._render(matched_set, neighbors, search=True)
        self.layout.focus(matched[0])
        return self.state

    def clear(self) -> SelectionState:
        """Restore base colors and full edge visibility."""
        self._state = SelectionState()
        self._render(set(), set(), search=False)
        return self.state

    def set_avatars(self, enabled: bool) -> SelectionState:
        """Switch avatar mode and re-apply the current highlight."""
        self.avatars = bool(enabled)
        state = self._state
        if state.mode == SelectionMode.SELECTED and state.selected_id:
            self.select(state.selected_id, focus=False)
            self._state = self._state.model_copy(update={"query": state.query})
            return self.state
        if state.mode == SelectionMode.SEARCHING:
            return self.search(state.query)
        return self.clear()

    # --- Queries ---

    def match(self, query: str) -> List[str]:
        """Ids whose label contains ``query`` (case-insensitive), in graph order."""
        q = query.strip().lower()
        return [node_id for node_id, label in self._labels.items() if q in label]

    def node_style(self, node_id: str) -> NodeStyle | None:
        return self._applied.get(node_id)

    def visible_edge_keys(self) -> Set[str]:
        return {e.key for e in self.graph.edges if e.key not in self._hidden_edges}

    # --- Rendering ---

    def _render(self, focus_ids: Set[str], neighbor_ids: Set[str], search: bool) -> None:
        highlighting = bool(focus_ids)
        node_updates: List[NodeUpdate] = []
        for node in self.graph.nodes:
            if not highlighting:
                role = NodeRole.BASE
            elif node.id in focus_ids:
                role = NodeRole.FOCUS
            elif node.id in neighbor_ids:
                role = NodeRole.NEIGHBOR
            else:
                role = NodeRole.DIMMED
            style = self._style_for(node, role, search=search)
            if self._applied.get(node.id) != style:
                self._applied[node.id] = style
                node_updates.append(NodeUpdate(id=node.id, style=style))

        edge_updates = list(self._edge_updates(self._state.visible_ids()))

        if node_updates or edge_updates:
            self.layout.update(node_updates, edge_updates)

    def _edge_updates(self, visible: Optional[Set[str]]) -> Iterable[EdgeUpdate]:
        for edge in self.graph.edges:
            show = visible is None or (edge.source in visible and edge.target in visible)
            hidden = edge.key in self._hidden_edges
            if show and hidden:
                self._hidden_edges.discard(edge.key)
                yield EdgeUpdate(id=edge.key, hidden=False)
            elif not show and not hidden:
                self._hidden_edges.add(edge.key)
                yield EdgeUpdate(id=edge.key, hidden=True)

    def _style_for(self, node: Node, role: str, search: bool = False) -> NodeStyle:
        p = self.palette
        base = node.color

        if self.avatars:
            if role == NodeRole.FOCUS:
                return NodeStyle(border=p.highlight_background, opacity=1.0, border_width=3)
            if role == NodeRole.NEIGHBOR:
                return NodeStyle(border=base.border, opacity=p.neighbor_opacity, border_width=2)
            if role == NodeRole.DIMMED:
                return NodeStyle(border=base.border, opacity=p.avatar_dim_opacity, border_width=2)
            return NodeStyle(border=base.border, opacity=1.0, border_width=2)

        if role == NodeRole.FOCUS:
            return NodeStyle(background=p.highlight_background, border=p.highlight_border)
        if role == NodeRole.NEIGHBOR:
            return NodeStyle(
                background=p.neighbor_background,
                border=base.border,
                opacity=p.neighbor_opacity,
            )
        if role == NodeRole.DIMMED:
            return NodeStyle(
                background=p.dim_background,
                border=base.border,
                opacity=p.search_dim_opacity if search else p.dim_opacity,
            )
        return NodeStyle(background=base.background, border=base.border)


class SearchDebouncer:
    """
    Coalesces rapid search input.

    Each ``submit`` cancels the pending recomputation and schedules a new one
    ``interval`` seconds later, so a burst of keystrokes results in a single
    ``engine.search`` with the last query.
    """

    def __init__(self, engine: SelectionEngine, interval: float | None = None):
        self.engine = engine
        self.interval = Settings().frame_interval if interval is None else interval
        self._pending: asyncio.TimerHandle | None = None
        self.last_state: SelectionState | None = None
        self.runs = 0

    def submit(self, query: str) -> None:
        loop = asyncio.get_running_loop()
        self.cancel()
        self._pending = loop.call_later(self.interval, self._run, query)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def _run(self, query: str) -> None:
        self._pending = None
        self.runs += 1
        self.last_state = self.engine.search(query)
