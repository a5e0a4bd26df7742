"""
Scene Renderer

Interactive HTML output of a laid-out scene using vis.js.

Positions come from the layout controller, so vis.js physics stays off:
tree nodes are rendered fixed at their pinned coordinates, interface nodes
are placed where the simulator left them. Parallel interface edges keep the
curvature the controller assigned.
"""

from __future__ import annotations
import html
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.graph_model import LegendEntry
from ..layout.controller import LayoutPhaseController
from ..layout.scene import SceneLink, SceneNode


# =============================================================================
# Constants
# =============================================================================

HIERARCHY_EDGE_COLOR = "#8e8e8e"
INTERFACE_EDGE_COLOR = "#3498db"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class RenderConfig:
    """Configuration for scene rendering"""
    title: str = "Fault Hierarchy"
    background: str = "#1a1a2e"
    show_labels: bool = True
    show_legend: bool = True


@dataclass
class NodeData:
    """Processed node data for rendering"""
    id: int
    label: str
    color: str
    size: float
    title: str
    x: Optional[float] = None
    y: Optional[float] = None
    fixed: bool = False

    def to_vis(self) -> Dict[str, Any]:
        """Convert to vis.js format"""
        data = {
            "id": self.id,
            "label": self.label,
            "color": {"background": self.color, "border": self.color},
            "shape": "dot",
            "size": self.size,
            "title": self.title,
        }
        if self.x is not None and self.y is not None:
            data["x"] = self.x
            data["y"] = self.y
        if self.fixed:
            data["fixed"] = {"x": True, "y": True}
        return data


@dataclass
class EdgeData:
    """Processed edge data for rendering"""
    id: str
    source: int
    target: int
    relation: str
    color: str
    curvature: float = 0.0
    dashes: bool = False

    def to_vis(self) -> Dict[str, Any]:
        """Convert to vis.js format"""
        if self.curvature == 0:
            smooth: Dict[str, Any] = {"enabled": False}
        else:
            smooth = {
                "enabled": True,
                "type": "curvedCW" if self.curvature > 0 else "curvedCCW",
                "roundness": abs(self.curvature),
            }
        return {
            "id": self.id,
            "from": self.source,
            "to": self.target,
            "color": {"color": self.color, "opacity": 0.8},
            "dashes": self.dashes,
            "arrows": "to",
            "title": self.relation,
            "smooth": smooth,
        }


# =============================================================================
# Scene Renderer
# =============================================================================

class SceneRenderer:
    """Renders the controller's current scene as a standalone HTML page."""

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self.logger = logging.getLogger(__name__)

    def render(self, controller: LayoutPhaseController) -> str:
        """
        Render the current scene to HTML.

        Args:
            controller: Layout controller holding the scene to draw

        Returns:
            HTML string
        """
        nodes, edges = self.process_scene(controller)
        legend = controller.legend() if self.config.show_legend else []
        return self._generate_html(nodes, edges, legend)

    def render_to_file(self, controller: LayoutPhaseController, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(controller), encoding="utf-8")
        self.logger.info(f"HTML written to {path}")
        return path

    def process_scene(self, controller: LayoutPhaseController) -> Tuple[List[NodeData], List[EdgeData]]:
        """Turn visible scene nodes and links into render records."""
        scene = controller.current_core()

        nodes = [
            self._node_data(controller, n)
            for n in scene.nodes
            if controller.node_visible(n)
        ]
        node_ids = {n.id for n in nodes}

        edges = []
        for i, link in enumerate(scene.links):
            if not controller.link_visible(link):
                continue
            if link.source not in node_ids or link.target not in node_ids:
                continue
            edges.append(self._edge_data(i, link))

        return nodes, edges

    def _node_data(self, controller: LayoutPhaseController, node: SceneNode) -> NodeData:
        # vis-network shows string titles as plain text
        lines = [node.name, f"Id: {node.id}"]
        if node.node.has_severity:
            lines.append(f"Severity: {node.node.severity:g}")
        if not node.is_tree:
            lines.append("Interface node")

        return NodeData(
            id=node.id,
            label=node.name if self.config.show_labels else "",
            color=node.color,
            size=round(controller.node_radius(node), 2),
            title="\n".join(lines),
            x=node.x,
            y=node.y,
            fixed=node.pinned,
        )

    @staticmethod
    def _edge_data(index: int, link: SceneLink) -> EdgeData:
        return EdgeData(
            id=f"e{index}",
            source=link.source,
            target=link.target,
            relation=link.relation,
            color=HIERARCHY_EDGE_COLOR if link.is_hierarchy else INTERFACE_EDGE_COLOR,
            curvature=link.curvature,
            dashes=not link.is_hierarchy,
        )

    def _legend_html(self, legend: List[LegendEntry]) -> str:
        if not legend:
            return ""
        rows = []
        for entry in legend:
            severity = "" if entry.severity is None else f" ({entry.severity:g})"
            rows.append(
                f'<div class="legend-item"><div class="legend-color" '
                f'style="background: {entry.color}"></div>'
                f"<span>{html.escape(entry.name)}{severity}</span></div>"
            )
        return '<div id="legend"><h4>Functions</h4>' + "".join(rows) + "</div>"

    def _generate_html(self, nodes: List[NodeData], edges: List[EdgeData], legend: List[LegendEntry]) -> str:
        """Generate interactive HTML with vis.js"""
        nodes_json = json.dumps([n.to_vis() for n in nodes])
        edges_json = json.dumps([e.to_vis() for e in edges])
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        title = html.escape(self.config.title)

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
    <style>
        * {{ box-sizing: border-box; margin: 0; padding: 0; }}
        body {{
            font-family: 'Segoe UI', Tahoma, sans-serif;
            background: {self.config.background};
            color: #ecf0f1;
        }}
        #header {{ padding: 15px 25px; display: flex; justify-content: space-between; }}
        #network {{ width: 100%; height: calc(100vh - 60px); }}
        #legend {{
            position: fixed;
            bottom: 20px;
            right: 20px;
            background: rgba(0,0,0,0.85);
            padding: 15px;
            border-radius: 8px;
            font-size: 0.85em;
            max-width: 260px;
        }}
        .legend-item {{ display: flex; align-items: center; margin: 6px 0; }}
        .legend-color {{ width: 14px; height: 14px; border-radius: 3px; margin-right: 8px; flex-shrink: 0; }}
        #info {{ position: fixed; bottom: 20px; left: 20px; font-size: 0.8em; color: #aaa; }}
    </style>
</head>
<body>
    <div id="header">
        <h1>{title}</h1>
        <div>{len(nodes)} nodes &middot; {len(edges)} edges</div>
    </div>
    <div id="network"></div>
    {self._legend_html(legend)}
    <div id="info">Generated: {timestamp}</div>
    <script>
        var nodes = new vis.DataSet({nodes_json});
        var edges = new vis.DataSet({edges_json});
        var container = document.getElementById('network');
        var options = {{
            nodes: {{ font: {{ size: 12, color: '#ecf0f1' }}, borderWidth: 1 }},
            physics: {{ enabled: false }},
            interaction: {{ hover: true, tooltipDelay: 100 }}
        }};
        var network = new vis.Network(container, {{ nodes: nodes, edges: edges }}, options);
        network.fit();
    </script>
</body>
</html>"""


def render_html(controller: LayoutPhaseController, path: Union[str, Path], title: Optional[str] = None) -> Path:
    """Write the controller's current scene as an HTML page."""
    config = RenderConfig(title=title) if title else RenderConfig()
    return SceneRenderer(config).render_to_file(controller, path)
