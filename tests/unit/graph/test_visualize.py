"""
Unit tests for the visualization module.

Ensures that:
1. The payload carries the nodes and edges vis-network expects.
2. Avatar and hidden-label modes are reflected in the page.
3. User-provided text cannot break out of the embedded script.
"""

import json
from unittest.mock import patch

import pytest

from mutualgraph.core.types import CanonicalRecord
from mutualgraph.graph.builder import build_graph_sync
from mutualgraph.graph.visualize import generate_html, graph_payload, open_visualization, write_visualization


class TestVisualize:
    @pytest.fixture
    def graph(self):
        return build_graph_sync({
            "1": CanonicalRecord(name="alice", mutual_ids={"2"}),
            "2": CanonicalRecord(name="</script><b>bob</b>"),
        })

    def test_payload(self, graph):
        payload = graph_payload(graph)

        assert [n["id"] for n in payload["nodes"]] == ["1", "2"]
        assert payload["nodes"][0]["value"] == 1
        assert payload["nodes"][0]["title"] == "alice\nMutuals: 1"
        assert payload["edges"] == [{"id": "1|2", "from": "1", "to": "2"}]
        assert payload["stabilizeTimeoutMs"] == 6000
        assert "image" not in payload["nodes"][0]

    def test_avatar_payload(self, graph):
        payload = graph_payload(graph, avatars=True, hide_names=True)
        node = payload["nodes"][0]

        assert payload["avatars"] and payload["hideNames"]
        assert node["image"].startswith("https://cdn.discordapp.com/embed/avatars/")
        assert node["brokenImage"].startswith("data:image/svg+xml")

    def test_generate_html_structure(self, graph):
        html = generate_html(graph, title="My <Graph>")

        assert "<!DOCTYPE html>" in html
        assert "vis.DataSet" in html
        assert "My &lt;Graph&gt;" in html
        assert "Nodes: 2 | Edges: 1" in html
        assert "__GRAPH_DATA__" not in html

    def test_script_is_escaped(self, graph):
        html = generate_html(graph)
        script = html.split("const DATA = ", 1)[1].split(";\n", 1)[0]

        assert "</script>" not in script
        assert json.loads(script)["nodes"][1]["label"] == "</script><b>bob</b>"

    def test_write_visualization(self, graph, tmp_path):
        path = write_visualization(graph, str(tmp_path / "out" / "graph.html"))
        assert path.exists()
        assert "vis.Network" in path.read_text()

    def test_open_visualization(self, graph, tmp_path):
        with patch("mutualgraph.graph.visualize.webbrowser.open") as mock_open:
            out = open_visualization(graph, str(tmp_path / "graph.html"))

        mock_open.assert_called_once()
        assert out.endswith("graph.html")
