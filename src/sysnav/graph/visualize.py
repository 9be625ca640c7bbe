"""
Visualization Export.

Renders a SystemGraph as a standalone HTML page using vis-network. Node
positions are the ones computed by the layout oracle (physics is disabled),
tier styles become node colours, and interface edges carry their connection
label with an arrow when directional.
"""

import html
import json
import webbrowser
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List

from ..core.graph import SystemGraph
from ..core.types import EdgeKind

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>__TITLE__</title>
    <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
    <style>
        :root {
            --bg-base: #0a0a0a;
            --bg-elevated: #111111;
            --border-subtle: #262626;
            --text-primary: #fafafa;
            --text-secondary: #a1a1aa;
            --font-sans: -apple-system, BlinkMacSystemFont, "Segoe UI", "Inter", Roboto, sans-serif;
        }
        * { box-sizing: border-box; }
        body {
            margin: 0;
            height: 100vh;
            display: flex;
            flex-direction: column;
            background: var(--bg-base);
            color: var(--text-primary);
            font-family: var(--font-sans);
        }
        .header {
            height: 48px;
            display: flex;
            align-items: center;
            gap: 16px;
            padding: 0 16px;
            border-bottom: 1px solid var(--border-subtle);
            background: var(--bg-elevated);
        }
        .brand { font-weight: 700; }
        .stats { color: var(--text-secondary); font-size: 12px; }
        .legend { display: flex; gap: 12px; font-size: 12px; margin-left: auto; }
        .swatch { display: inline-block; width: 10px; height: 10px; border-radius: 2px; margin-right: 4px; }
        #graph { flex: 1; }
    </style>
</head>
<body>
    <div class="header">
        <span class="brand">__TITLE__</span>
        <span class="stats" id="stats"></span>
        <div class="legend">
            <span><span class="swatch" style="background:#3ECF8E"></span>Current</span>
            <span><span class="swatch" style="background:#0070f3"></span>Child</span>
            <span><span class="swatch" style="background:#8b5cf6"></span>Grandchild</span>
        </div>
    </div>
    <div id="graph"></div>
    <script>
        const GRAPH = __GRAPH_DATA__;

        const nodes = new vis.DataSet(GRAPH.nodes);
        const edges = new vis.DataSet(GRAPH.edges);

        document.getElementById('stats').textContent =
            GRAPH.stats.total_nodes + ' systems, ' + GRAPH.stats.total_edges + ' edges';

        new vis.Network(document.getElementById('graph'), { nodes, edges }, {
            physics: false,
            interaction: { hover: true, navigationButtons: true },
            nodes: { shape: 'box', font: { color: '#ffffff' } },
            edges: { font: { color: '#a1a1aa', strokeWidth: 0, size: 11 }, smooth: false }
        });
    </script>
</body>
</html>
"""


def _json_default(obj: Any) -> Any:
    """JSON serializer for objects not serializable by default json code"""
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    raise TypeError(f"Type {type(obj)} not serializable")


def to_vis_data(graph: SystemGraph) -> Dict[str, Any]:
    """Translate graph nodes/edges into vis-network DataSet items."""
    nodes: List[Dict[str, Any]] = []
    for node in graph.iter_nodes():
        nodes.append({
            "id": node.id,
            "label": node.label,
            "title": f"{node.label} ({node.category})" if node.category else node.label,
            "group": node.tier.value,
            "x": node.position.x,
            "y": node.position.y,
            "widthConstraint": node.style.get("width"),
            "color": {
                "background": node.style.get("background"),
                "border": node.style.get("border", "").split(" ")[-1] or None,
            },
        })

    edges: List[Dict[str, Any]] = []
    for edge in graph.iter_edges():
        is_interface = edge.kind == EdgeKind.INTERFACE
        dashed = "strokeDasharray" in edge.style
        edges.append({
            "id": edge.id,
            "from": edge.source,
            "to": edge.target,
            "label": edge.label if is_interface else "",
            "title": edge.label or edge.kind.value,
            "width": edge.style.get("strokeWidth", 1),
            "dashes": dashed,
            "arrows": "to" if edge.directional else "",
            "color": {"color": edge.style.get("stroke", "#999")},
        })

    return {"nodes": nodes, "edges": edges, "stats": graph.get_stats()}


def _script_safe_json(data: Dict[str, Any]) -> str:
    """JSON for inlining in a <script> block; store text cannot close the tag."""
    text = json.dumps(data, default=_json_default)
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def generate_html(graph: SystemGraph, title: str = "System Graph") -> str:
    """
    Generate the HTML content for the graph visualization.

    System names are user data, so the title is HTML-escaped and the graph
    JSON is made safe for embedding in a script element.
    """
    return (
        HTML_TEMPLATE
        .replace("__GRAPH_DATA__", _script_safe_json(to_vis_data(graph)))
        .replace("__TITLE__", html.escape(title))
    )


def write_html(graph: SystemGraph, output_path: str = "graph.html", title: str = "System Graph",
               open_browser: bool = False) -> str:
    """
    Write the visualization to disk and optionally open it in the browser.
    """
    out_file = Path(output_path)
    out_file.write_text(generate_html(graph, title=title), encoding="utf-8")

    if open_browser:
        webbrowser.open(out_file.resolve().as_uri())

    return str(out_file)
