"""
Graph Model

Canonical derived graph built once per raw dataset:
    - Node registry and link partition (child_of vs. interface)
    - Hierarchy adjacency (children / parents) from child_of links only
    - Undirected interface adjacency, used for proximity placement
    - Forest roots and function roots
    - Severity colors propagated down each function root's subtree

The model is never mutated after construction.
"""

from __future__ import annotations
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

import networkx as nx

from .colors import DEFAULT_NEUTRAL_T, SeverityRamp
from .models import CHILD_OF, Link, Node, NodeId, default_attributes, endpoint_id

#: Number of component names a legend entry carries.
LEGEND_COMPONENT_LIMIT = 24


@dataclass(frozen=True)
class LegendEntry:
    """Function node summary for the severity legend."""
    node_id: NodeId
    name: str
    severity: Optional[float]
    color: str
    items: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.node_id,
            "name": self.name,
            "severity": self.severity,
            "color": self.color,
            "items": list(self.items),
        }


class GraphModel:
    """
    Query-friendly view of a raw ``{nodes, links}`` document.

    Example:
        >>> model = GraphModel.from_raw({"nodes": [...], "links": [...]})
        >>> model.function_roots
        [1]
        >>> model.children[1]
        [2]
    """

    def __init__(self, raw: Any = None):
        """
        Initialize the model.

        Args:
            raw: Mapping (or object) with ``nodes`` and ``links`` sequences.
                 ``None`` yields an empty model.
        """
        self.logger = logging.getLogger(__name__)

        self.nodes: List[Node] = []
        self.by_id: Dict[NodeId, Node] = {}
        self.links: List[Link] = []
        self.child_links: List[Link] = []
        self.interface_links: List[Link] = []

        self.children: Dict[NodeId, List[NodeId]] = {}
        self.parents: Dict[NodeId, List[NodeId]] = {}
        self.iface_adj: Dict[NodeId, Set[NodeId]] = {}

        self.roots: List[NodeId] = []
        self.function_roots: List[NodeId] = []

        self.ramp = SeverityRamp()
        self.color_by_id: Dict[NodeId, str] = {}
        self.t_by_id: Dict[NodeId, float] = {}
        self.neutral_color: str = self.ramp.color_at(DEFAULT_NEUTRAL_T)
        self.dropped_links: int = 0

        if raw is not None:
            self._load(raw)

    @classmethod
    def from_raw(cls, raw: Any) -> "GraphModel":
        return cls(raw)

    # =========================================================================
    # Construction
    # =========================================================================

    def _load(self, raw: Any) -> None:
        raw_nodes = raw.get("nodes", []) if isinstance(raw, dict) else getattr(raw, "nodes", [])
        raw_links = raw.get("links", []) if isinstance(raw, dict) else getattr(raw, "links", [])

        self._load_nodes(raw_nodes or [])
        self._load_links(raw_links or [])
        self._build_adjacency()

        self.roots = [n.id for n in self.nodes if not self.parents[n.id]]
        self.function_roots = [n.id for n in self.nodes if n.has_severity or n.is_function]

        self._assign_colors()

        self.logger.info(
            f"Graph model built: {len(self.nodes)} nodes, {len(self.child_links)} child links, "
            f"{len(self.interface_links)} interface links, {len(self.function_roots)} function roots"
        )

    def _load_nodes(self, raw_nodes) -> None:
        for raw_node in raw_nodes:
            node = Node.from_raw(raw_node)
            if node.id is None:
                self.logger.warning("Skipping node without id")
                continue
            if node.id in self.by_id:
                self.logger.warning(f"Duplicate node id {node.id!r}, keeping the first occurrence")
                continue
            self.nodes.append(node)
            self.by_id[node.id] = node

    def _load_links(self, raw_links) -> None:
        for raw_link in raw_links:
            get = raw_link.get if isinstance(raw_link, dict) else (
                lambda key, default=None, _l=raw_link: getattr(_l, key, default)
            )
            src = endpoint_id(get("source"))
            tgt = endpoint_id(get("target"))
            relation = get("relation") or CHILD_OF

            if src not in self.by_id or tgt not in self.by_id:
                self.dropped_links += 1
                self.logger.debug(f"Dropping link {src!r}->{tgt!r} ({relation}): unknown endpoint")
                continue

            link = Link(
                source=src,
                target=tgt,
                relation=str(relation),
                attributes=dict(get("attributes") or default_attributes(str(relation))),
            )
            self.links.append(link)

            if link.is_hierarchy:
                self.child_links.append(link)
            else:
                self.interface_links.append(link)

    def _build_adjacency(self) -> None:
        self.children = {n.id: [] for n in self.nodes}
        self.parents = {n.id: [] for n in self.nodes}
        self.iface_adj = {n.id: set() for n in self.nodes}

        for link in self.child_links:
            self.children[link.source].append(link.target)
            self.parents[link.target].append(link.source)

        for link in self.interface_links:
            self.iface_adj[link.source].add(link.target)
            self.iface_adj[link.target].add(link.source)

    def _assign_colors(self) -> None:
        """
        Propagate severity colors from every function root.

        A node reached from several roots keeps the color of the root with the
        strictly greatest normalized severity; on a tie the first writer wins.
        Unreached nodes get the neutral color at the average severity.
        """
        severities = [n.severity for n in self.nodes if n.has_severity]
        self.ramp = SeverityRamp.from_severities(severities)

        for root_id in self.function_roots:
            root = self.by_id[root_id]
            severity = root.severity if root.has_severity else self.ramp.maximum
            t = self.ramp.normalize(severity)
            color = self.ramp.color_at(t)

            seen = {root_id}
            queue = deque([root_id])
            while queue:
                node_id = queue.popleft()
                previous = self.t_by_id.get(node_id)
                if previous is None or t > previous:
                    self.color_by_id[node_id] = color
                    self.t_by_id[node_id] = t
                for child in self.children.get(node_id, []):
                    if child not in seen:
                        seen.add(child)
                        queue.append(child)

        if severities:
            t_avg = sum(self.ramp.normalize(s) for s in severities) / len(severities)
        else:
            t_avg = DEFAULT_NEUTRAL_T
        self.neutral_color = self.ramp.color_at(t_avg)

        for node in self.nodes:
            self.color_by_id.setdefault(node.id, self.neutral_color)

    # =========================================================================
    # Queries
    # =========================================================================

    def __contains__(self, node_id: Any) -> bool:
        return node_id in self.by_id

    def __len__(self) -> int:
        return len(self.nodes)

    @property
    def severity_range(self) -> Tuple[float, float]:
        return self.ramp.minimum, self.ramp.maximum

    def color_of(self, node_id: NodeId) -> str:
        return self.color_by_id.get(node_id, self.neutral_color)

    def hierarchy_graph(self) -> nx.DiGraph:
        """Directed graph of the child_of links only."""
        graph = nx.DiGraph()
        graph.add_nodes_from(n.id for n in self.nodes)
        graph.add_edges_from((l.source, l.target) for l in self.child_links)
        return graph

    def legend(self) -> List[LegendEntry]:
        """One entry per function-named node, in model order."""
        return [
            LegendEntry(
                node_id=n.id,
                name=n.name,
                severity=n.severity,
                color=self.color_of(n.id),
                items=n.components[:LEGEND_COMPONENT_LIMIT],
            )
            for n in self.nodes
            if n.is_function
        ]

    def summary(self) -> Dict[str, Any]:
        relations: Dict[str, int] = {}
        for link in self.interface_links:
            relations[link.relation] = relations.get(link.relation, 0) + 1
        return {
            "nodes": len(self.nodes),
            "links": len(self.links),
            "child_links": len(self.child_links),
            "interface_links": len(self.interface_links),
            "dropped_links": self.dropped_links,
            "roots": list(self.roots),
            "function_roots": list(self.function_roots),
            "severity_range": list(self.severity_range),
            "interface_relations": relations,
        }


def build_graph_model(raw: Any) -> GraphModel:
    """Build a GraphModel from a raw ``{nodes, links}`` document."""
    return GraphModel.from_raw(raw)
