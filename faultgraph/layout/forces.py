"""
Force Configuration

Translates a layout phase into per-link and per-node force parameters and
applies them to a ForceSimulator.

    settleTree:    hierarchy links and tree charge boosted, collision on,
                   interface links held by a tiny non-zero strength
    withInterface: boost removed, interface links at full strength,
                   collision off
"""

from __future__ import annotations
import logging
from typing import Any, Optional

from ..config.settings import ForceSettings
from ..core.models import RelationKind
from .scene import Phase, SceneNode
from .simulator import ForceSimulator


def _is_hierarchy(relation: Any) -> bool:
    if isinstance(relation, RelationKind):
        return relation is RelationKind.CHILD_OF
    kind = getattr(relation, "kind", None)
    if isinstance(kind, RelationKind):
        return kind is RelationKind.CHILD_OF
    return RelationKind.of(relation) is RelationKind.CHILD_OF


class ForceConfigurator:
    """
    Pure mapping from (phase, relation, is_tree) to force parameters.

    ``relation`` may be a relation string, a RelationKind or any link object
    exposing ``kind``/``relation``.
    """

    def __init__(self, settings: Optional[ForceSettings] = None):
        self.settings = settings or ForceSettings()
        self.logger = logging.getLogger(__name__)

    # =========================================================================
    # Parameter mapping
    # =========================================================================

    def link_distance(self, relation: Any) -> float:
        if _is_hierarchy(relation):
            return float(self.settings.tree.link_distance)
        return float(self.settings.interface.link_distance)

    def link_strength(self, phase: Phase, relation: Any) -> float:
        s = self.settings
        if phase is Phase.SETTLE_TREE:
            if _is_hierarchy(relation):
                return s.tree.link_strength * s.boost_factor
            return s.settle_interface_strength
        if _is_hierarchy(relation):
            return s.tree.link_strength
        return s.interface.link_strength

    def charge(self, phase: Phase, is_tree: bool) -> float:
        s = self.settings
        if not is_tree:
            return s.interface.charge
        if phase is Phase.SETTLE_TREE:
            return s.tree.charge * s.boost_factor
        return s.tree.charge

    def collide_radius(self, phase: Phase, node: SceneNode) -> Optional[float]:
        """Exclusion radius; None when collision is disabled for the phase."""
        if phase is not Phase.SETTLE_TREE:
            return None
        if not node.is_tree:
            return 0.0
        return self.settings.collide_radius * (node.scale or 1.0)

    # =========================================================================
    # Simulator binding
    # =========================================================================

    def configure(self, simulator: Optional[ForceSimulator], phase: Phase) -> bool:
        """
        Apply the phase's forces to the simulator and reheat it.

        The link force is rebound to the simulator's current link list on
        every call. Velocity decay and the alpha-target kick are re-applied
        every time as well.

        Returns:
            False when no simulator is available (nothing applied).
        """
        if simulator is None:
            return False

        s = self.settings
        _, links = simulator.graph_data()

        simulator.set_link_force(
            list(links),
            distance=lambda link: self.link_distance(link),
            strength=lambda link: self.link_strength(phase, link),
        )
        simulator.set_charge_force(
            lambda node: self.charge(phase, node.is_tree),
            distance_min=s.charge_distance_min,
            distance_max=s.charge_distance_max,
        )
        if phase is Phase.SETTLE_TREE:
            simulator.set_collide_force(
                lambda node: self.collide_radius(phase, node),
                strength=s.collide_strength,
                iterations=s.collide_iterations,
            )
        else:
            simulator.set_collide_force(None)

        simulator.set_velocity_decay(s.velocity_decay)
        simulator.set_alpha_target(s.alpha_target)
        simulator.reheat()

        self.logger.debug(f"Forces configured for {phase.value}: {len(links)} links bound")
        return True
