"""
Core domain: typed records, severity ramp and the derived graph model.
"""
from .models import (
    CHILD_OF,
    FUNCTION_MARKER,
    Core,
    Link,
    Node,
    NodePosition,
    NodeType,
    RelationKind,
    Snapshot,
    endpoint_id,
    parse_severity,
)
from .colors import DARK, LIGHT, SeverityRamp
from .graph_model import GraphModel, LegendEntry, build_graph_model
from .loader import load_raw_graph

__all__ = [
    "CHILD_OF",
    "FUNCTION_MARKER",
    "Core",
    "Link",
    "Node",
    "NodePosition",
    "NodeType",
    "RelationKind",
    "Snapshot",
    "endpoint_id",
    "parse_severity",
    "DARK",
    "LIGHT",
    "SeverityRamp",
    "GraphModel",
    "LegendEntry",
    "build_graph_model",
    "load_raw_graph",
]
