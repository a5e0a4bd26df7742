"""
Initial placement of interface-only nodes.

Each interface-only node is anchored to the first tree node it touches
through interface adjacency and placed on an arc around that anchor.
Nodes with no tree anchor are left unplaced.
"""
from __future__ import annotations
import math
from typing import Dict, List, Sequence, Set

from ..config.settings import PlacementSettings
from ..core.graph_model import GraphModel
from ..core.models import NodeId
from .scene import SceneNode


def arc_angles(count: int, placement: PlacementSettings) -> List[float]:
    """Evenly spread ``count`` angles (radians) over the margin-trimmed arc."""
    a0 = math.radians(placement.start_deg + placement.margin_deg)
    a1 = math.radians(placement.end_deg - placement.margin_deg)
    if count <= 0:
        return []
    if count == 1:
        return [(a0 + a1) / 2]
    return [a0 + i * (a1 - a0) / (count - 1) for i in range(count)]


def seed_interface_positions(
    model: GraphModel,
    nodes: Sequence[SceneNode],
    tree_ids: Set[NodeId],
    placement: PlacementSettings,
) -> Dict[NodeId, List[NodeId]]:
    """
    Place interface-only nodes around their tree anchors.

    Returns:
        Mapping anchor id -> interface node ids placed around it
    """
    anchor_pos = {n.id: (n.x or 0.0, n.y or 0.0) for n in nodes if n.id in tree_ids}
    by_id = {n.id: n for n in nodes}

    buckets: Dict[NodeId, List[NodeId]] = {}
    for n in nodes:
        if n.id in tree_ids:
            continue
        anchor = next((m for m in model.iface_adj.get(n.id, ()) if m in tree_ids), None)
        if anchor is None:
            continue
        buckets.setdefault(anchor, []).append(n.id)

    radius = placement.ring_radius
    for anchor_id, members in buckets.items():
        ax, ay = anchor_pos.get(anchor_id, (0.0, 0.0))
        for node_id, angle in zip(members, arc_angles(len(members), placement)):
            node = by_id[node_id]
            node.x = ax + radius * math.cos(angle)
            node.y = ay + radius * math.sin(angle)

    return buckets
