"""
Layout core: view cores, force mapping, curvature and the phase controller.
"""
from .controller import LayoutPhaseController
from .cores import CoreExtractor, bi_local_core, forest_core
from .curvature import DEFAULT_CURVATURE_BASE, apply_curvatures, curvature_offsets, pair_key
from .forces import ForceConfigurator
from .scene import Phase, SceneGraph, SceneLink, SceneNode
from .seeding import arc_angles, seed_interface_positions
from .simulator import ForceSimulator

__all__ = [
    "LayoutPhaseController",
    "CoreExtractor",
    "bi_local_core",
    "forest_core",
    "DEFAULT_CURVATURE_BASE",
    "apply_curvatures",
    "curvature_offsets",
    "pair_key",
    "ForceConfigurator",
    "Phase",
    "SceneGraph",
    "SceneLink",
    "SceneNode",
    "arc_angles",
    "seed_interface_positions",
    "ForceSimulator",
]
