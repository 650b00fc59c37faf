"""Unit tests for the headless layout engine."""

import asyncio

import pytest

from mutualgraph.core.types import CanonicalRecord
from mutualgraph.graph.builder import build_graph_sync
from mutualgraph.graph.network import EdgeUpdate, HeadlessLayout, NodeStyle, NodeUpdate


@pytest.fixture
def graph():
    return build_graph_sync({
        "a": CanonicalRecord(name="a", mutual_ids={"b", "c"}),
        "b": CanonicalRecord(name="b", mutual_ids={"c"}),
        "c": CanonicalRecord(name="c"),
        "d": CanonicalRecord(name="d"),
    })


class TestHeadlessLayout:
    def test_load(self, graph):
        layout = HeadlessLayout()
        layout.load(graph.nodes, graph.edges)

        assert layout.node_count == 4
        assert layout.edge_count == 3
        assert layout.visible_edge_keys() == {"a|b", "a|c", "b|c"}
        assert layout.style_of("a").background == graph.get_node("a").color.background

    def test_neighbors(self, graph):
        layout = HeadlessLayout()
        layout.load(graph.nodes, graph.edges)

        assert layout.neighbors("a") == {"b", "c"}
        assert layout.neighbors("d") == set()
        assert layout.neighbors("missing") == set()

    def test_reload_replaces_everything(self, graph):
        layout = HeadlessLayout()
        layout.load(graph.nodes, graph.edges)
        layout.focus("a")
        layout.load(graph.nodes[:1], [])

        assert layout.node_count == 1
        assert layout.edge_count == 0
        assert layout.focused_id is None

    def test_update(self, graph):
        layout = HeadlessLayout()
        layout.load(graph.nodes, graph.edges)
        style = NodeStyle(background="#000000", border="#ffffff", opacity=0.5)

        layout.update([NodeUpdate(id="a", style=style)], [EdgeUpdate(id="a|b", hidden=True)])

        assert layout.update_calls == 1
        assert layout.style_of("a") == style
        assert layout.hidden_edge_keys() == {"a|b"}

    def test_focus_ignores_unknown(self, graph):
        layout = HeadlessLayout()
        layout.load(graph.nodes, graph.edges)
        layout.focus("zzz")
        assert layout.focused_id is None

    def test_stabilization(self, graph):
        async def run():
            layout = HeadlessLayout(auto_stabilize=False)
            layout.load(graph.nodes, graph.edges)
            assert not layout.is_stabilized
            asyncio.get_running_loop().call_soon(layout.mark_stabilized)
            await asyncio.wait_for(layout.wait_until_stabilized(), 1)
            return layout

        assert asyncio.run(run()).is_stabilized
