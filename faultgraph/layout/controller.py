"""
Layout Phase Controller

Two-phase layout state machine, one scene per view-scope request:

    settleTree --(engine stop, once per scene)--> withInterface

Phase 1 settles the hierarchy skeleton only. On the first engine stop the
tree nodes are frozen and pinned, interface links and their endpoints are
added, interface-only nodes are seeded around their tree anchors, and the
simulator is reconfigured for phase 2. The first global settle is kept as a
write-once Snapshot so returning to the global view restores it exactly
without settling again.
"""

from __future__ import annotations
import functools
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..config.settings import LayoutSettings
from ..core.graph_model import GraphModel, LegendEntry
from ..core.models import Core, NodeId, Snapshot
from .cores import CoreExtractor
from .curvature import apply_curvatures
from .forces import ForceConfigurator
from .scene import Phase, SceneGraph, SceneLink, SceneNode
from .seeding import seed_interface_positions
from .simulator import ForceSimulator


@dataclass
class SceneState:
    """State of the current scene."""
    scene_id: int
    root_id: Optional[NodeId]
    depth: Optional[int]
    phase: Phase = Phase.SETTLE_TREE
    transitioned: bool = False
    depth_by_id: Optional[Dict[NodeId, int]] = None
    fixed: Dict[NodeId, Tuple[float, float]] = field(default_factory=dict)

    @property
    def is_global(self) -> bool:
        return self.root_id is None


class LayoutPhaseController:
    """
    Drives the settle -> interface lifecycle against a ForceSimulator.

    Example:
        >>> controller = LayoutPhaseController(model, simulator=sim)
        >>> sim.run()                     # phase 1 ticks, fires engine stop
        >>> controller.phase
        <Phase.WITH_INTERFACE: 'withInterface'>
        >>> controller.select_root(4, depth=2)
    """

    def __init__(
        self,
        model: GraphModel,
        simulator: Optional[ForceSimulator] = None,
        settings: Optional[LayoutSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the controller and enter the global scene.

        Args:
            model: Graph model to lay out
            simulator: Force simulator; may be attached later
            settings: Layout settings (defaults if omitted)
            rng: Random source for jitter and velocity kicks
        """
        self.model = model
        self.settings = settings or LayoutSettings()
        self.simulator = simulator
        self.logger = logging.getLogger(__name__)

        self._rng = rng or random.Random(self.settings.seed)
        self._extractor = CoreExtractor(model)
        self._forces = ForceConfigurator(self.settings.forces)

        self.visible_depth = self.settings.local.clamp_depth(self.settings.local.visible_depth)
        self.snapshot: Optional[Snapshot] = None

        self._scene_counter = 0
        self._scene: SceneState = SceneState(scene_id=0, root_id=None, depth=None)
        self._nodes: List[SceneNode] = []
        self._links: List[SceneLink] = []

        self._start_scene(None)

    # =========================================================================
    # State accessors
    # =========================================================================

    @property
    def phase(self) -> Phase:
        return self._scene.phase

    @property
    def scene_id(self) -> int:
        return self._scene.scene_id

    @property
    def root_id(self) -> Optional[NodeId]:
        return self._scene.root_id

    @property
    def fixed(self) -> Dict[NodeId, Tuple[float, float]]:
        return dict(self._scene.fixed)

    @property
    def depth_by_id(self) -> Optional[Dict[NodeId, int]]:
        return self._scene.depth_by_id

    def current_core(self) -> SceneGraph:
        """Live scene graph, links annotated with curvature."""
        return SceneGraph(
            nodes=self._nodes,
            links=self._links,
            depth_by_id=self._scene.depth_by_id,
            phase=self._scene.phase,
            root_id=self._scene.root_id,
        )

    def legend(self) -> List[LegendEntry]:
        return self.model.legend()

    # =========================================================================
    # View-scope requests
    # =========================================================================

    def select_root(self, node_id: NodeId, depth: Optional[int] = None) -> SceneGraph:
        """Focus a local scene on ``node_id``; unknown ids give an empty scene."""
        if depth is not None:
            self.visible_depth = self.settings.local.clamp_depth(depth)
        self._start_scene(node_id)
        return self.current_core()

    def return_to_global(self) -> SceneGraph:
        """Show the global forest, restoring the snapshot when one exists."""
        self._start_scene(None)
        return self.current_core()

    def set_depth(self, depth: int) -> SceneGraph:
        """Change the visible depth; restarts the scene only when it is local."""
        self.visible_depth = self.settings.local.clamp_depth(depth)
        if self._scene.root_id is not None:
            self._start_scene(self._scene.root_id)
        return self.current_core()

    def attach_simulator(self, simulator: Optional[ForceSimulator]) -> None:
        """Attach (or detach with None) the simulator and hand it the current scene."""
        self.simulator = simulator
        if simulator is None:
            return
        self._bind_scene()
        if self._scene.phase is Phase.WITH_INTERFACE:
            self._kick_interface_nodes()

    # =========================================================================
    # Scene lifecycle
    # =========================================================================

    def _start_scene(self, root_id: Optional[NodeId]) -> None:
        self._scene_counter += 1
        depth = None if root_id is None else self.visible_depth
        self._scene = SceneState(scene_id=self._scene_counter, root_id=root_id, depth=depth)

        if root_id is None and self.snapshot is not None:
            self._restore_global_snapshot()
            return

        if root_id is None:
            core = self._extractor.forest_core(self.model.function_roots)
        else:
            core = self._extractor.bi_local_core(root_id, depth)
        self._scene.depth_by_id = core.depth_by_id

        self._nodes = self._jittered_tree_nodes(core)
        self._links = [SceneLink.from_link(l) for l in core.links]
        apply_curvatures(self._links, self.settings.view.curvature_base)

        self.logger.info(
            f"Scene {self._scene.scene_id} ({self._describe_root(root_id)}): "
            f"settling {len(self._nodes)} nodes, {len(self._links)} links"
        )
        self._bind_scene()

    def _jittered_tree_nodes(self, core: Core) -> List[SceneNode]:
        half = self.settings.local.jitter / 2
        nodes = []
        for node in core.nodes:
            nodes.append(SceneNode(
                node=node,
                is_tree=True,
                color=self.model.color_of(node.id),
                x=self._rng.uniform(-half, half),
                y=self._rng.uniform(-half, half),
            ))
        return nodes

    def _bind_scene(self) -> None:
        """Hand the current node/link set to the simulator and configure it."""
        sim = self.simulator
        if sim is None:
            self.logger.debug("No simulator attached, scene kept for later binding")
            return
        sim.set_graph_data(self._nodes, self._links)
        sim.on_engine_stop(functools.partial(self.handle_engine_stop, self._scene.scene_id))
        self._forces.configure(sim, self._scene.phase)
        sim.set_cooldown_ticks(self.settings.timing.ticks_from_ms())

    def handle_engine_stop(self, scene_id: Optional[int] = None) -> bool:
        """
        Engine-stop signal from the simulator.

        Transitions settleTree -> withInterface at most once per scene.
        Signals for an abandoned scene, duplicate signals and signals
        arriving while no simulator is attached are ignored.

        Returns:
            True when the transition ran.
        """
        scene = self._scene
        if scene_id is not None and scene_id != scene.scene_id:
            self.logger.debug(f"Ignoring engine stop from stale scene {scene_id}")
            return False
        if self.simulator is None:
            return False
        if scene.phase is not Phase.SETTLE_TREE or scene.transitioned:
            return False

        scene.transitioned = True

        # Freeze: read every live tree position at this tick boundary
        scene.fixed = {
            n.id: (n.x if n.x is not None else 0.0, n.y if n.y is not None else 0.0)
            for n in self._nodes
            if n.is_tree
        }
        tree_ids = set(scene.fixed)

        if scene.is_global and self.snapshot is None:
            self.snapshot = Snapshot.from_positions(scene.fixed)
            self.logger.info(f"Global snapshot stored ({len(self.snapshot)} tree nodes)")

        if scene.is_global:
            iface_links = list(self.model.interface_links)
        else:
            iface_links = [
                l for l in self.model.interface_links
                if l.source in tree_ids or l.target in tree_ids
            ]

        self._enter_interface_phase(scene.fixed, iface_links)
        self.logger.info(
            f"Scene {scene.scene_id}: froze {len(tree_ids)} tree nodes, "
            f"added {len(iface_links)} interface links"
        )
        return True

    def _restore_global_snapshot(self) -> None:
        scene = self._scene
        scene.transitioned = True
        scene.depth_by_id = None
        scene.fixed = {p.id: (p.x, p.y) for p in self.snapshot.nodes}

        self.logger.info(f"Scene {scene.scene_id} (global): restoring snapshot")
        self._enter_interface_phase(scene.fixed, list(self.model.interface_links))

    def _enter_interface_phase(self, fixed: Dict[NodeId, Tuple[float, float]], iface_links) -> None:
        tree_ids: Set[NodeId] = set(fixed)
        iface_ids: Set[NodeId] = set()
        for link in iface_links:
            iface_ids.add(link.source)
            iface_ids.add(link.target)
        final_ids = tree_ids | iface_ids

        nodes: List[SceneNode] = []
        for node in self.model.nodes:
            if node.id not in final_ids:
                continue
            scene_node = SceneNode(
                node=node,
                is_tree=node.id in tree_ids,
                color=self.model.color_of(node.id),
            )
            if scene_node.is_tree:
                scene_node.pin(*fixed[node.id])
            nodes.append(scene_node)

        seed_interface_positions(self.model, nodes, tree_ids, self.settings.placement)

        links = [
            SceneLink.from_link(l) for l in self.model.child_links
            if l.source in tree_ids and l.target in tree_ids
        ]
        links.extend(SceneLink.from_link(l) for l in iface_links)
        apply_curvatures(links, self.settings.view.curvature_base)

        self._nodes = nodes
        self._links = links
        self._scene.phase = Phase.WITH_INTERFACE

        if self.simulator is not None:
            self._bind_scene()
            self._kick_interface_nodes()

    def _kick_interface_nodes(self) -> None:
        """Unpin non-tree nodes, give them a small random velocity and reheat."""
        sim = self.simulator
        if sim is None:
            return
        half = self.settings.local.velocity_kick / 2
        for n in self._nodes:
            if not n.is_tree:
                n.unpin()
                n.vx = self._rng.uniform(-half, half)
                n.vy = self._rng.uniform(-half, half)
        sim.set_cooldown_ticks(self.settings.timing.ticks_from_ms())
        sim.reheat()
        self.fit_view()

    # =========================================================================
    # Camera and render queries
    # =========================================================================

    def fit_view(self) -> None:
        sim = self.simulator
        if sim is None:
            return
        timing = self.settings.timing
        sim.zoom_to_fit(timing.fit_duration_ms, self.settings.view.fit_padding)
        sim.center_at(0.0, 0.0, timing.fit_duration_ms // 2)

    def screen_position(self, node_id: NodeId) -> Optional[Tuple[float, float]]:
        """Screen coordinates of a node, or None when unknown or no simulator."""
        sim = self.simulator
        node = self._node(node_id)
        if sim is None or node is None:
            return None
        return sim.graph_to_screen(node.x or 0.0, node.y or 0.0)

    def node_radius(self, node: SceneNode) -> float:
        """Approximate drawn radius: base radius times the node's role scale."""
        scaling = self.settings.scaling
        scale = node.scale or 1.0
        if not node.is_tree:
            scale *= scaling.interface_scale
        if node.is_tree and node.node.is_function:
            scale *= scaling.function_scale
        if node.is_tree and self._scene.root_id is not None:
            if node.id == self._scene.root_id:
                scale *= scaling.root_scale_mul
            elif self._scene.depth_by_id:
                depth = self._scene.depth_by_id.get(node.id)
                if depth:
                    scale *= scaling.child_decay ** depth
        return scaling.node_radius * scale

    def node_visible(self, node: SceneNode) -> bool:
        return node.is_tree or self.settings.view.show_interface

    def link_visible(self, link: SceneLink) -> bool:
        return link.is_hierarchy or self.settings.view.show_interface

    def _node(self, node_id: NodeId) -> Optional[SceneNode]:
        for n in self._nodes:
            if n.id == node_id:
                return n
        return None

    @staticmethod
    def _describe_root(root_id: Optional[NodeId]) -> str:
        return "global" if root_id is None else f"root {root_id}"
