"""
Simulator Interface

Defines the ForceSimulator Protocol: the contract the layout core drives.
The physics integrator itself is external; the core only configures it,
hands it node/link sets and reacts to its engine-stop event.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .scene import SceneLink, SceneNode

LinkFn = Callable[[SceneLink], float]
NodeFn = Callable[[SceneNode], float]


@runtime_checkable
class ForceSimulator(Protocol):
    """
    Port for a tick-based force simulation.

    Any class implementing these methods satisfies this protocol
    via structural subtyping; no explicit inheritance required.
    """

    def graph_data(self) -> Tuple[List[SceneNode], List[SceneLink]]:
        """Return the live node and link lists currently simulated."""
        ...

    def set_graph_data(self, nodes: Sequence[SceneNode], links: Sequence[SceneLink]) -> None:
        """Replace the simulated node/link set."""
        ...

    def on_engine_stop(self, callback: Optional[Callable[[], None]]) -> None:
        """Register the single callback fired when the engine stops."""
        ...

    def set_cooldown_ticks(self, ticks: int) -> None:
        """Bound the number of ticks before the engine stops."""
        ...

    def set_link_force(self, links: Sequence[SceneLink], distance: LinkFn, strength: LinkFn) -> None:
        """Bind the link force to ``links`` with per-link distance and strength."""
        ...

    def set_charge_force(self, strength: NodeFn, distance_min: float, distance_max: float) -> None:
        """Configure per-node repulsion and its distance bounds."""
        ...

    def set_collide_force(self, radius: Optional[NodeFn], strength: float = 1.0, iterations: int = 1) -> None:
        """Configure collision; ``radius=None`` removes the force."""
        ...

    def set_velocity_decay(self, decay: float) -> None:
        ...

    def set_alpha_target(self, alpha_target: float) -> None:
        ...

    def reheat(self) -> None:
        """Restart ticking with the current configuration."""
        ...

    def zoom_to_fit(self, duration_ms: int = 0, padding: float = 0.0) -> None:
        ...

    def center_at(self, x: float, y: float, duration_ms: int = 0) -> None:
        ...

    def graph_to_screen(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        """Map graph coordinates to screen coordinates."""
        ...
