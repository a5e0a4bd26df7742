"""
Core Value Objects and Entities

Typed records for the fault hierarchy: nodes, links and the relation kinds
that partition them, plus the view-scoped Core and the global Snapshot.
"""
from __future__ import annotations
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Relation name that marks a hierarchy (parent -> child) edge.
CHILD_OF: str = "child_of"

#: Case-insensitive word marker that makes a node a function root.
FUNCTION_MARKER = re.compile(r"\bfunction\b", re.IGNORECASE)

NodeId = int


class RelationKind(Enum):
    """Closed set of link kinds. Interface links keep their raw relation as subtype."""
    CHILD_OF = "child_of"
    INTERFACE = "interface"

    @classmethod
    def of(cls, relation: Optional[str]) -> "RelationKind":
        return cls.CHILD_OF if (relation or CHILD_OF) == CHILD_OF else cls.INTERFACE


class NodeType(Enum):
    """Node role inferred from the name tokens used in fault trees."""
    FUNCTION = "function"
    EFFECT = "effect"
    CAUSE = "cause"
    SEVERITY = "severity"
    OCCURRENCE = "occurrence"
    DETECTION = "detection"
    INTERFACE = "interface"
    OTHER = "other"

    @classmethod
    def classify(cls, name: Optional[str]) -> "NodeType":
        label = str(name or "")
        for node_type in cls:
            if node_type is cls.OTHER:
                continue
            if re.search(rf"\b{node_type.value}\b", label, re.IGNORECASE):
                return node_type
        return cls.OTHER


def parse_severity(value: Any) -> Optional[float]:
    """Return a usable severity or None for missing/malformed values."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def endpoint_id(endpoint: Any) -> Any:
    """Reduce a link endpoint (bare id, mapping or node object) to its id."""
    if hasattr(endpoint, "id"):
        return endpoint.id
    if isinstance(endpoint, dict):
        return endpoint.get("id")
    return endpoint


def default_attributes(label: str) -> Dict[str, Dict[str, str]]:
    return {"label": {"name": label, "type": "string"}}


# =============================================================================
# Graph Entities
# =============================================================================

@dataclass(frozen=True)
class Node:
    """Domain entity representing a fault-tree vertex."""
    id: NodeId
    name: str = ""
    severity: Optional[float] = None
    components: Tuple[str, ...] = ()
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    scale: float = 1.0

    @classmethod
    def from_raw(cls, raw: Any) -> "Node":
        """Build a node from a raw mapping (or an object exposing the same fields)."""
        get = raw.get if isinstance(raw, dict) else lambda key, default=None: getattr(raw, key, default)
        name = get("name")
        name = "" if name is None else str(name)
        components = get("components") or ()
        scale = parse_severity(get("scale"))
        return cls(
            id=get("id"),
            name=name,
            severity=parse_severity(get("severity")),
            components=tuple(str(c) for c in components) if isinstance(components, (list, tuple)) else (),
            attributes=dict(get("attributes") or default_attributes(name)),
            scale=scale if scale is not None and scale > 0 else 1.0,
        )

    @property
    def has_severity(self) -> bool:
        return self.severity is not None

    @property
    def is_function(self) -> bool:
        """True when the name carries the function marker."""
        return bool(FUNCTION_MARKER.search(self.name))

    @property
    def node_type(self) -> NodeType:
        return NodeType.classify(self.name)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.node_type.value,
            "attributes": self.attributes,
        }
        if self.severity is not None:
            data["severity"] = self.severity
        if self.components:
            data["components"] = list(self.components)
        return data


@dataclass(frozen=True)
class Link:
    """Domain entity representing a directed relation between two nodes."""
    source: NodeId
    target: NodeId
    relation: str = CHILD_OF
    attributes: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def kind(self) -> RelationKind:
        return RelationKind.of(self.relation)

    @property
    def is_hierarchy(self) -> bool:
        return self.kind is RelationKind.CHILD_OF

    @property
    def key(self) -> str:
        return f"{self.source}->{self.target}|{self.relation}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "relation": self.relation,
            "attributes": self.attributes,
        }


# =============================================================================
# View-scoped records
# =============================================================================

@dataclass
class Core:
    """Bounded node/link subset for one view scope."""
    nodes: List[Node] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    depth_by_id: Optional[Dict[NodeId, int]] = None

    @property
    def ids(self) -> set:
        return {n.id for n in self.nodes}

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "nodes": [n.id for n in self.nodes],
            "links": [{"source": l.source, "target": l.target, "relation": l.relation} for l in self.links],
        }
        if self.depth_by_id is not None:
            data["depth_by_id"] = {str(k): v for k, v in self.depth_by_id.items()}
        return data


@dataclass(frozen=True)
class NodePosition:
    id: NodeId
    x: float
    y: float


@dataclass(frozen=True)
class Snapshot:
    """Frozen tree-node positions of the first global settle."""
    nodes: Tuple[NodePosition, ...] = ()

    @classmethod
    def from_positions(cls, positions: Dict[NodeId, Tuple[float, float]]) -> "Snapshot":
        return cls(nodes=tuple(NodePosition(i, x, y) for i, (x, y) in positions.items()))

    @property
    def by_id(self) -> Dict[NodeId, NodePosition]:
        return {p.id: p for p in self.nodes}

    def __len__(self) -> int:
        return len(self.nodes)
