"""
faultgraph

Two-phase force-directed layout core for fault hierarchies: a derived graph
model with severity colors, bounded view cores, a settle/interface phase
controller and parallel-edge curvature.
"""

from .config.settings import LayoutSettings
from .core.graph_model import GraphModel, build_graph_model
from .core.loader import load_raw_graph
from .core.models import Core, Link, Node, RelationKind, Snapshot
from .layout.controller import LayoutPhaseController
from .layout.cores import CoreExtractor
from .layout.curvature import apply_curvatures, curvature_offsets
from .layout.forces import ForceConfigurator
from .layout.scene import Phase, SceneGraph, SceneLink, SceneNode
from .layout.simulator import ForceSimulator

__version__ = "1.0.0"

__all__ = [
    "LayoutSettings",
    "GraphModel",
    "build_graph_model",
    "load_raw_graph",
    "Core",
    "Link",
    "Node",
    "RelationKind",
    "Snapshot",
    "LayoutPhaseController",
    "CoreExtractor",
    "apply_curvatures",
    "curvature_offsets",
    "ForceConfigurator",
    "Phase",
    "SceneGraph",
    "SceneLink",
    "SceneNode",
    "ForceSimulator",
]
