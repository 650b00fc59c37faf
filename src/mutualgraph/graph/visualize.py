"""
Static HTML visualization.

Renders a built graph as a self-contained vis-network page. The page runs
the force-directed layout in the browser, stops physics once the layout has
stabilized (or after a fallback timeout), and highlights a clicked node and
its neighbors.
"""

import json
import webbrowser
from html import escape
from pathlib import Path
from typing import Any, Dict

from ..config import Settings
from ..core.types import BuiltGraph
from .style import avatar_svg_data_url

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>__TITLE__</title>
    <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
    <style>
        body { margin: 0; height: 100vh; display: flex; flex-direction: column;
               background: #0f1115; color: #e8e8e8; font-family: Inter, "Segoe UI", system-ui, Arial, sans-serif; }
        .header { display: flex; gap: 16px; align-items: center; padding: 8px 16px;
                  background: #171a21; border-bottom: 1px solid #262a33; }
        .search-input { flex: 1; max-width: 360px; background: #0f1115; color: inherit;
                        border: 1px solid #333; border-radius: 6px; padding: 6px 10px; }
        .stats { font-size: 12px; color: #a1a1aa; }
        #network { flex: 1; }
    </style>
</head>
<body>
    <div class="header">
        <strong>__TITLE__</strong>
        <input id="searchInput" class="search-input" placeholder="Search username...">
        <span class="stats" id="stats">__STATS__</span>
    </div>
    <div id="network"></div>
    <script>
        const DATA = __GRAPH_DATA__;
        const HIGHLIGHT = {background: '#f6c177', border: '#845a2c'};
        const NEIGHBOR_BG = '#9cb9d9';
        const DIM_BG = '#394b5a';

        const nodesDS = new vis.DataSet(DATA.nodes);
        const edgesDS = new vis.DataSet(DATA.edges);
        const network = new vis.Network(document.getElementById('network'), {nodes: nodesDS, edges: edgesDS}, {
            interaction: {hover: true, hideEdgesOnDrag: true, tooltipDelay: 100, zoomSpeed: 0.5},
            physics: {
                enabled: true,
                solver: 'forceAtlas2Based',
                stabilization: {enabled: true, iterations: 500, updateInterval: 25},
                forceAtlas2Based: {gravitationalConstant: -50, springLength: 100, damping: 0.6}
            },
            nodes: {shape: DATA.avatars ? 'circularImage' : 'dot', size: 8, scaling: {min: 6, max: 28},
                    font: {size: DATA.hideNames ? 0 : 12, color: '#e8e8e8'}},
            edges: {color: {color: '#474c54', highlight: '#f6c177'}, width: 1, smooth: false},
            layout: {improvedLayout: false}
        });

        const freeze = () => { network.stopSimulation(); network.setOptions({physics: {enabled: false}}); };
        const fallback = setTimeout(freeze, DATA.stabilizeTimeoutMs);
        network.once('stabilizationIterationsDone', () => { clearTimeout(fallback); freeze(); });

        function paint(focusIds, neighborIds) {
            const visible = focusIds.size ? new Set([...focusIds, ...neighborIds]) : null;
            nodesDS.update(DATA.nodes.map(n => {
                if (!visible) return {id: n.id, color: n.color, opacity: 1};
                if (focusIds.has(n.id)) return {id: n.id, color: HIGHLIGHT, opacity: 1};
                if (neighborIds.has(n.id)) return {id: n.id, color: {background: NEIGHBOR_BG, border: n.color.border}, opacity: 0.9};
                return {id: n.id, color: {background: DIM_BG, border: n.color.border}, opacity: 0.35};
            }));
            edgesDS.update(DATA.edges.map(e => ({id: e.id, hidden: !!visible && !(visible.has(e.from) && visible.has(e.to))})));
        }

        function highlight(ids) {
            const neighbors = new Set();
            ids.forEach(id => network.getConnectedNodes(id).forEach(m => neighbors.add(String(m))));
            paint(new Set(ids), neighbors);
            if (ids.length) network.focus(ids[0], {scale: 1, animation: {duration: 500, easingFunction: 'easeInOutQuad'}});
        }

        network.on('click', params => {
            highlight(params.nodes.length === 1 ? [String(params.nodes[0])] : []);
        });

        let raf = null;
        document.getElementById('searchInput').addEventListener('input', e => {
            const q = (e.target.value || '').trim().toLowerCase();
            if (raf) cancelAnimationFrame(raf);
            raf = requestAnimationFrame(() => {
                highlight(q ? DATA.nodes.filter(n => n.label.toLowerCase().includes(q)).map(n => n.id) : []);
            });
        });
    </script>
</body>
</html>
"""


def graph_payload(
    graph: BuiltGraph,
    settings: Settings | None = None,
    hide_names: bool = False,
    avatars: bool = False,
) -> Dict[str, Any]:
    """JSON-ready nodes and edges in the shape vis-network expects."""
    settings = settings or Settings()
    nodes = []
    for node in graph.nodes:
        item: Dict[str, Any] = {
            "id": node.id,
            "label": node.label,
            "title": node.title,
            "value": node.degree,
            "color": node.color.model_dump(),
        }
        if avatars:
            fallback = avatar_svg_data_url(node.label, node.color)
            item["image"] = node.avatar_url or fallback
            item["brokenImage"] = fallback
            item["borderWidth"] = 2
        nodes.append(item)

    return {
        "nodes": nodes,
        "edges": [{"id": e.key, "from": e.source, "to": e.target} for e in graph.edges],
        "hideNames": hide_names,
        "avatars": avatars,
        "stabilizeTimeoutMs": int(settings.stabilize_timeout(graph.node_count) * 1000),
    }


def generate_html(
    graph: BuiltGraph,
    title: str = "Mutuals Graph",
    settings: Settings | None = None,
    hide_names: bool = False,
    avatars: bool = False,
) -> str:
    """Generate the HTML content for the graph visualization."""
    payload = graph_payload(graph, settings, hide_names=hide_names, avatars=avatars)
    json_data = json.dumps(payload).replace("</", "<\\/")
    stats = f"Nodes: {graph.node_count:,} | Edges: {graph.edge_count:,}"
    return (
        HTML_TEMPLATE
        .replace("__TITLE__", escape(title))
        .replace("__STATS__", stats)
        .replace("__GRAPH_DATA__", json_data)
    )


def open_visualization(graph: BuiltGraph, output_path: str = "graph.html", **kwargs) -> str:
    """Generate and open the visualization in the browser."""
    out_file = write_visualization(graph, output_path, **kwargs)
    webbrowser.open(out_file.resolve().as_uri())
    return str(out_file)


def write_visualization(graph: BuiltGraph, output_path: str = "graph.html", **kwargs) -> Path:
    out_file = Path(output_path)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(generate_html(graph, **kwargs), encoding="utf-8")
    return out_file
