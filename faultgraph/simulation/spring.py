"""
Spring Simulator

ForceSimulator adapter over networkx' Fruchterman-Reingold ``spring_layout``.

Mapping:
    link strength     -> edge weight
    link distance     -> layout unit (mean over bound links)
    pinned nodes      -> ``fixed``
    cooldown ticks    -> iterations

Charge, collision, velocity decay and alpha target have no counterpart in
``spring_layout``; they are recorded so callers can inspect them.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from ..layout.scene import SceneLink, SceneNode

DEFAULT_COOLDOWN_TICKS = 300
MIN_EDGE_WEIGHT = 1e-6


@dataclass
class Camera:
    """Viewport transform from graph coordinates to screen pixels."""
    width: float = 1200.0
    height: float = 800.0
    zoom: float = 1.0
    center_x: float = 0.0
    center_y: float = 0.0

    def fit(self, points: Iterable[Tuple[float, float]], padding: float = 0.0) -> None:
        points = list(points)
        if not points:
            self.zoom, self.center_x, self.center_y = 1.0, 0.0, 0.0
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        span_x = max(max(xs) - min(xs), 1.0)
        span_y = max(max(ys) - min(ys), 1.0)
        usable_w = max(self.width - 2 * padding, 1.0)
        usable_h = max(self.height - 2 * padding, 1.0)
        self.zoom = min(usable_w / span_x, usable_h / span_y)
        self.center_x = (max(xs) + min(xs)) / 2
        self.center_y = (max(ys) + min(ys)) / 2

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (
            self.width / 2 + (x - self.center_x) * self.zoom,
            self.height / 2 + (y - self.center_y) * self.zoom,
        )


class SpringSimulator:
    """
    Tick-budgeted spring layout implementing the ForceSimulator protocol.

    Nothing ticks on its own: ``run()`` spends the current cooldown budget
    and then fires the engine-stop callback.

    Example:
        >>> sim = SpringSimulator(seed=7)
        >>> controller = LayoutPhaseController(model, simulator=sim)
        >>> sim.run()   # settle tree, controller adds interface edges
        >>> sim.run()   # settle interface nodes around the pinned tree
    """

    def __init__(self, width: float = 1200.0, height: float = 800.0, seed: Optional[int] = None):
        self.logger = logging.getLogger(__name__)
        self.camera = Camera(width=width, height=height)
        self._random_state = np.random.RandomState(seed)

        self.nodes: List[SceneNode] = []
        self.links: List[SceneLink] = []
        self.cooldown_ticks = DEFAULT_COOLDOWN_TICKS
        self._on_stop: Optional[Callable[[], None]] = None

        self.bound_links: List[SceneLink] = []
        self._distance_fn: Optional[Callable[[SceneLink], float]] = None
        self._strength_fn: Optional[Callable[[SceneLink], float]] = None

        # Recorded only
        self.charge: Optional[Dict[str, Any]] = None
        self.collide: Optional[Dict[str, Any]] = None
        self.velocity_decay: Optional[float] = None
        self.alpha_target: Optional[float] = None

        self.reheat_count = 0
        self.total_ticks = 0

    # =========================================================================
    # ForceSimulator protocol
    # =========================================================================

    def graph_data(self) -> Tuple[List[SceneNode], List[SceneLink]]:
        return self.nodes, self.links

    def set_graph_data(self, nodes: Sequence[SceneNode], links: Sequence[SceneLink]) -> None:
        self.nodes = list(nodes)
        self.links = list(links)

    def on_engine_stop(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_stop = callback

    def set_cooldown_ticks(self, ticks: int) -> None:
        self.cooldown_ticks = max(1, int(ticks))

    def set_link_force(self, links, distance, strength) -> None:
        self.bound_links = list(links)
        self._distance_fn = distance
        self._strength_fn = strength

    def set_charge_force(self, strength, distance_min: float, distance_max: float) -> None:
        self.charge = {"strength": strength, "distance_min": distance_min, "distance_max": distance_max}

    def set_collide_force(self, radius, strength: float = 1.0, iterations: int = 1) -> None:
        if radius is None:
            self.collide = None
            return
        self.collide = {"radius": radius, "strength": strength, "iterations": iterations}

    def set_velocity_decay(self, decay: float) -> None:
        self.velocity_decay = decay

    def set_alpha_target(self, alpha_target: float) -> None:
        self.alpha_target = alpha_target

    def reheat(self) -> None:
        self.reheat_count += 1

    def zoom_to_fit(self, duration_ms: int = 0, padding: float = 0.0) -> None:
        points = [(n.x, n.y) for n in self.nodes if n.placed]
        self.camera.fit(points, padding)

    def center_at(self, x: float, y: float, duration_ms: int = 0) -> None:
        self.camera.center_x = x
        self.camera.center_y = y

    def graph_to_screen(self, x: float, y: float) -> Optional[Tuple[float, float]]:
        return self.camera.to_screen(x, y)

    # =========================================================================
    # Ticking
    # =========================================================================

    def run(self) -> int:
        """
        Spend one cooldown budget, then fire the engine-stop callback.

        Returns:
            Number of ticks spent
        """
        ticks = self._tick(self.cooldown_ticks)
        self.total_ticks += ticks

        callback = self._on_stop
        if callback is not None:
            callback()
        return ticks

    def _layout_unit(self) -> float:
        if not self.bound_links or self._distance_fn is None:
            return 1.0
        distances = [float(self._distance_fn(l)) for l in self.bound_links]
        return max(sum(distances) / len(distances), 1.0)

    def _build_graph(self) -> nx.Graph:
        graph = nx.Graph()
        graph.add_nodes_from(n.id for n in self.nodes)
        for link in self.bound_links:
            if link.source not in graph or link.target not in graph or link.source == link.target:
                continue
            weight = float(self._strength_fn(link)) if self._strength_fn else 1.0
            weight = max(weight, MIN_EDGE_WEIGHT)
            if graph.has_edge(link.source, link.target):
                graph[link.source][link.target]["weight"] += weight
            else:
                graph.add_edge(link.source, link.target, weight=weight)
        return graph

    @staticmethod
    def _spread(pos: Dict[Any, Tuple[float, float]]) -> Dict[Any, Tuple[float, float]]:
        """
        Scale a tight start cluster up to a span of sqrt(n) layout units.

        ``spring_layout`` caps each step at a tenth of the starting span, so a
        jittered start near the origin would barely expand.
        """
        if len(pos) < 2:
            return pos
        coords = np.array(list(pos.values()), dtype=float)
        span = float((coords.max(axis=0) - coords.min(axis=0)).max())
        target = math.sqrt(len(pos))
        if span == 0.0 or span >= target:
            return pos
        center = coords.mean(axis=0)
        scaled = (coords - center) * (target / span) + center
        return {node_id: (float(x), float(y)) for node_id, (x, y) in zip(pos, scaled)}

    def _tick(self, ticks: int) -> int:
        if not self.nodes:
            return 0
        if len(self.nodes) == 1:
            node = self.nodes[0]
            if not node.pinned:
                node.x, node.y = (node.x or 0.0), (node.y or 0.0)
            node.vx = node.vy = 0.0
            return 0

        unit = self._layout_unit()
        graph = self._build_graph()

        pos: Dict[Any, Tuple[float, float]] = {}
        fixed = []
        for n in self.nodes:
            if n.pinned:
                pos[n.id] = (n.fx / unit, n.fy / unit)
                fixed.append(n.id)
            elif n.placed:
                pos[n.id] = ((n.x + n.vx) / unit, (n.y + n.vy) / unit)

        if len(fixed) == len(self.nodes):
            return 0
        if not fixed:
            pos = self._spread(pos)

        layout = nx.spring_layout(
            graph,
            k=1.0,
            pos=pos or None,
            fixed=fixed or None,
            iterations=ticks,
            weight="weight",
            scale=None,
            seed=self._random_state,
        )

        for n in self.nodes:
            if n.pinned:
                n.x, n.y = n.fx, n.fy
            else:
                x, y = layout[n.id]
                n.x, n.y = float(x) * unit, float(y) * unit
            n.vx = n.vy = 0.0

        self.logger.debug(
            f"Ran {ticks} ticks over {len(self.nodes)} nodes ({len(fixed)} pinned), unit {unit:.1f}"
        )
        return ticks
