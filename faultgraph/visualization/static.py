"""
Static scene rendering with matplotlib.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import networkx as nx

from ..layout.controller import LayoutPhaseController
from .html import HIERARCHY_EDGE_COLOR, INTERFACE_EDGE_COLOR

logger = logging.getLogger(__name__)

BACKGROUND = "#1a1a2e"


def scene_positions(controller: LayoutPhaseController) -> Dict[int, Tuple[float, float]]:
    """Positions of the visible, placed scene nodes (y flipped to screen orientation)."""
    return {
        n.id: (n.x, -n.y)
        for n in controller.current_core().nodes
        if n.placed and controller.node_visible(n)
    }


def render_png(
    controller: LayoutPhaseController,
    output_path: Union[str, Path],
    title: Optional[str] = None,
    dpi: int = 150,
) -> Path:
    """
    Render the current scene as a static image.

    Args:
        controller: Layout controller holding the scene to draw
        output_path: Output file path (format from the suffix)
        title: Optional figure title
        dpi: Output resolution

    Returns:
        Output path
    """
    output_path = Path(output_path)
    scene = controller.current_core()
    pos = scene_positions(controller)

    # Hierarchy view of the visible nodes; interface edges join as they are drawn
    graph = controller.model.hierarchy_graph().subgraph(pos).copy()

    # Edges grouped by curvature; one draw call per arc radius
    by_curvature: Dict[Tuple[float, bool], List[Tuple[int, int]]] = defaultdict(list)
    for link in scene.links:
        if link.source not in pos or link.target not in pos or not controller.link_visible(link):
            continue
        graph.add_edge(link.source, link.target)
        by_curvature[(round(link.curvature, 4), link.is_hierarchy)].append((link.source, link.target))

    fig, ax = plt.subplots(figsize=(14, 10), facecolor=BACKGROUND)
    ax.set_facecolor(BACKGROUND)

    for (curvature, hierarchy), edgelist in by_curvature.items():
        nx.draw_networkx_edges(
            graph,
            pos,
            edgelist=edgelist,
            ax=ax,
            arrows=True,
            arrowstyle="-|>",
            connectionstyle=f"arc3,rad={curvature}",
            edge_color=HIERARCHY_EDGE_COLOR if hierarchy else INTERFACE_EDGE_COLOR,
            style="solid" if hierarchy else "dashed",
            alpha=0.8,
        )

    nodelist = [n for n in scene.nodes if n.id in pos]
    if nodelist:
        nx.draw_networkx_nodes(
            graph,
            pos,
            nodelist=[n.id for n in nodelist],
            node_color=[n.color for n in nodelist],
            node_size=[controller.node_radius(n) ** 2 * 3 for n in nodelist],
            edgecolors="white",
            linewidths=0.5,
            ax=ax,
        )
        nx.draw_networkx_labels(
            graph,
            pos,
            labels={n.id: n.name[:18] for n in nodelist},
            font_size=7,
            font_color="white",
            ax=ax,
        )

    legend = controller.legend()
    if legend:
        handles = [mpatches.Patch(color=entry.color, label=entry.name) for entry in legend]
        ax.legend(handles=handles, loc="upper left", facecolor="#2c3e50",
                  edgecolor="none", labelcolor="white", fontsize=8)

    if title:
        ax.set_title(title, color="white", fontsize=14, fontweight="bold", pad=20)
    ax.axis("off")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plt.tight_layout()
        plt.savefig(output_path, dpi=dpi, facecolor=BACKGROUND, edgecolor="none", bbox_inches="tight")
    finally:
        plt.close(fig)

    logger.info(f"Image written to {output_path}")
    return output_path
