"""
Core type definitions for mutualgraph.

Per-source records, canonical (merged) records, and the node/edge model
handed to the layout engine.
"""

from enum import StrEnum
from typing import Dict, List, Set

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class BuildPhase(StrEnum):
    """Phases of the cooperative graph build."""
    NODES = "nodes"
    EDGES = "edges"


class SelectionMode(StrEnum):
    """States of the selection/search state machine."""
    IDLE = "idle"
    SELECTED = "selected"
    SEARCHING = "searching"


class FriendRecord(BaseModel):
    """
    One person as seen by a single export, after normalization.

    Scoped to one source; discarded after merge.
    """
    name: str = ""
    avatar_ref: str = ""
    mutual_ids: Set[str] = Field(default_factory=set)


class CanonicalRecord(BaseModel):
    """One person after all sources have been merged."""
    name: str
    avatar_url: str = ""
    mutual_ids: Set[str] = Field(default_factory=set)


class NodeColor(BaseModel):
    """Fill and border color of a node."""
    model_config = ConfigDict(frozen=True)

    background: str
    border: str


class Node(BaseModel):
    """
    A person in the built graph.

    ``degree`` is derived from the edge list it was built with and is never
    treated as authoritative; see ``BuiltGraph.with_edges``.
    """
    id: str
    label: str
    color: NodeColor
    degree: int = 0
    avatar_url: str = ""

    @property
    def title(self) -> str:
        return f"{self.label}\nMutuals: {self.degree}"


class Edge(BaseModel):
    """Undirected connection; ``source`` sorts before ``target``."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str

    @classmethod
    def between(cls, a: str, b: str) -> "Edge":
        """Canonical edge for an unordered pair."""
        if a == b:
            raise ValueError(f"Self edge on {a}")
        x, y = (a, b) if a < b else (b, a)
        return cls(source=x, target=y)

    @property
    def key(self) -> str:
        return f"{self.source}|{self.target}"

    def touches(self, node_id: str) -> bool:
        return node_id == self.source or node_id == self.target


class BuildProgress(BaseModel):
    """Incremental progress report emitted by the builder."""
    phase: BuildPhase
    done: int
    total: int

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return min(1.0, self.done / self.total)


class BuildStats(BaseModel):
    """Counters collected while linking edges."""
    pairs_seen: int = 0
    dangling: int = 0
    self_refs: int = 0
    duplicates: int = 0


class BuiltGraph(BaseModel):
    """Nodes and deduplicated undirected edges of one build."""
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    build_stats: BuildStats = Field(default_factory=BuildStats)

    _index: Dict[str, Node] | None = PrivateAttr(default=None)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def get_node(self, node_id: str) -> Node | None:
        if self._index is None:
            self._index = {n.id: n for n in self.nodes}
        return self._index.get(node_id)

    def node_ids(self) -> List[str]:
        return [n.id for n in self.nodes]

    def degrees(self) -> Dict[str, int]:
        """Degree of every node, counted from the edge list."""
        counts = {n.id: 0 for n in self.nodes}
        for edge in self.edges:
            counts[edge.source] = counts.get(edge.source, 0) + 1
            counts[edge.target] = counts.get(edge.target, 0) + 1
        return counts

    def with_edges(self, nodes: List[Node], edges: List[Edge]) -> "BuiltGraph":
        """New graph over ``nodes``/``edges`` with degrees recomputed."""
        counts = {n.id: 0 for n in nodes}
        for edge in edges:
            counts[edge.source] += 1
            counts[edge.target] += 1
        fresh = [n.model_copy(update={"degree": counts[n.id]}) for n in nodes]
        return BuiltGraph(nodes=fresh, edges=list(edges), build_stats=self.build_stats)

    def stats(self) -> Dict[str, int]:
        degrees = [n.degree for n in self.nodes]
        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "isolated": sum(1 for d in degrees if d == 0),
            "max_degree": max(degrees, default=0),
            "dangling_references": self.build_stats.dangling,
        }


class SelectionState(BaseModel):
    """Transient interaction state. Never persisted."""
    mode: SelectionMode = SelectionMode.IDLE
    selected_id: str | None = None
    matched_ids: Set[str] = Field(default_factory=set)
    neighbor_ids: Set[str] = Field(default_factory=set)
    query: str = ""

    def visible_ids(self) -> Set[str] | None:
        """Node ids whose edges stay visible; None means everything."""
        if self.mode == SelectionMode.SELECTED and self.selected_id is not None:
            return {self.selected_id} | self.neighbor_ids
        if self.mode == SelectionMode.SEARCHING and self.matched_ids:
            return self.matched_ids | self.neighbor_ids
        return None
