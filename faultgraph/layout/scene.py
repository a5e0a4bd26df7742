"""
Scene records

Live node/link slots shared with the force simulator. The simulator owns the
position fields of unpinned nodes while ticking; the controller owns them
between ticks and only moves pinned nodes through ``fx``/``fy``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.models import Link, Node, NodeId, RelationKind


class Phase(Enum):
    """Layout phase of a scene."""
    SETTLE_TREE = "settleTree"
    WITH_INTERFACE = "withInterface"


@dataclass(eq=False)
class SceneNode:
    """Position slot for one node in the current scene."""
    node: Node
    is_tree: bool = True
    color: str = ""
    x: Optional[float] = None
    y: Optional[float] = None
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def id(self) -> NodeId:
        return self.node.id

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def scale(self) -> float:
        return self.node.scale

    @property
    def pinned(self) -> bool:
        return self.fx is not None and self.fy is not None

    @property
    def placed(self) -> bool:
        return self.x is not None and self.y is not None

    def pin(self, x: float, y: float) -> None:
        self.x, self.y = x, y
        self.fx, self.fy = x, y

    def unpin(self) -> None:
        self.fx = self.fy = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "pinned": self.pinned,
            "tree": self.is_tree,
            "color": self.color,
        }


@dataclass(eq=False)
class SceneLink:
    """Link instance in the current scene, annotated with its curvature."""
    source: NodeId
    target: NodeId
    relation: str
    curvature: float = 0.0

    @classmethod
    def from_link(cls, link: Link) -> "SceneLink":
        return cls(source=link.source, target=link.target, relation=link.relation)

    @property
    def kind(self) -> RelationKind:
        return RelationKind.of(self.relation)

    @property
    def is_hierarchy(self) -> bool:
        return self.kind is RelationKind.CHILD_OF

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "relation": self.relation,
            "curvature": self.curvature,
        }


@dataclass
class SceneGraph:
    """What the rendering layer reads: the live nodes and curvature-annotated links."""
    nodes: List[SceneNode] = field(default_factory=list)
    links: List[SceneLink] = field(default_factory=list)
    depth_by_id: Optional[Dict[NodeId, int]] = None
    phase: Phase = Phase.SETTLE_TREE
    root_id: Optional[NodeId] = None

    @property
    def is_global(self) -> bool:
        return self.root_id is None

    def node(self, node_id: NodeId) -> Optional[SceneNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root_id,
            "phase": self.phase.value,
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [l.to_dict() for l in self.links],
        }
