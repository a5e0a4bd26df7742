"""
Tests for the networkx spring-layout simulator adapter.
"""

import math

import pytest

from faultgraph.core.graph_model import GraphModel
from faultgraph.layout.controller import LayoutPhaseController
from faultgraph.layout.scene import Phase
from faultgraph.layout.simulator import ForceSimulator
from faultgraph.simulation.spring import Camera, SpringSimulator


@pytest.fixture
def spring():
    return SpringSimulator(seed=7)


class TestProtocol:

    def test_implements_simulator_protocol(self, spring):
        assert isinstance(spring, ForceSimulator)

    def test_records_unmapped_forces(self, spring):
        spring.set_charge_force(lambda n: -1.0, 1.0, 2000.0)
        spring.set_velocity_decay(0.25)
        spring.set_alpha_target(0.7)
        assert spring.charge["distance_max"] == 2000.0
        assert spring.velocity_decay == 0.25
        assert spring.alpha_target == 0.7

    def test_collide_removed_with_none(self, spring):
        spring.set_collide_force(lambda n: 18.0, strength=1.0, iterations=2)
        assert spring.collide["iterations"] == 2
        spring.set_collide_force(None)
        assert spring.collide is None

    def test_run_fires_engine_stop(self, spring):
        fired = []
        spring.on_engine_stop(lambda: fired.append(True))
        spring.run()
        assert fired == [True]

    def test_empty_run(self, spring):
        assert spring.run() == 0


class TestLayoutRuns:

    @pytest.mark.integration
    def test_two_phase_run(self, fault_model, spring):
        controller = LayoutPhaseController(fault_model, simulator=spring)

        assert spring.run() == 63
        assert controller.phase is Phase.WITH_INTERFACE
        frozen = controller.fixed

        spring.run()
        scene = controller.current_core()
        for n in scene.nodes:
            assert math.isfinite(n.x) and math.isfinite(n.y)
            if n.is_tree:
                assert (n.x, n.y) == frozen[n.id]
        assert spring.total_ticks == 126

    @pytest.mark.integration
    def test_settle_spreads_the_tree(self, fault_model, spring):
        controller = LayoutPhaseController(fault_model, simulator=spring)
        spring.run()
        xs = [x for x, _ in controller.fixed.values()]
        ys = [y for _, y in controller.fixed.values()]
        # Jitter starts inside a 10x10 square; the layout unit is 55
        assert max(xs) - min(xs) > 10 or max(ys) - min(ys) > 10

    def test_local_scene_run(self, fault_model, spring):
        controller = LayoutPhaseController(fault_model, simulator=spring)
        controller.select_root(4, depth=1)
        spring.run()
        spring.run()
        assert controller.root_id == 4
        assert controller.snapshot is None
        assert all(n.placed for n in controller.current_core().nodes)

    def test_single_node(self, spring):
        model = GraphModel.from_raw({"nodes": [{"id": 1, "name": "Function Only", "severity": 1}], "links": []})
        controller = LayoutPhaseController(model, simulator=spring)
        spring.run()
        assert controller.phase is Phase.WITH_INTERFACE
        assert controller.current_core().node(1).pinned

    def test_velocity_reset_after_run(self, fault_model, spring):
        controller = LayoutPhaseController(fault_model, simulator=spring)
        spring.run()
        spring.run()
        assert all((n.vx, n.vy) == (0.0, 0.0) for n in controller.current_core().nodes)


class TestCamera:

    def test_fit_centers_bounding_box(self):
        camera = Camera(width=400, height=200)
        camera.fit([(0, 0), (100, 50)], padding=0)
        assert (camera.center_x, camera.center_y) == (50, 25)
        assert camera.zoom == pytest.approx(4.0)
        assert camera.to_screen(50, 25) == (200, 100)

    def test_fit_with_padding(self):
        camera = Camera(width=400, height=400)
        camera.fit([(0, 0), (100, 100)], padding=100)
        assert camera.zoom == pytest.approx(2.0)

    def test_fit_empty_resets(self):
        camera = Camera(zoom=3.0, center_x=5.0)
        camera.fit([])
        assert (camera.zoom, camera.center_x, camera.center_y) == (1.0, 0.0, 0.0)

    def test_graph_to_screen_after_center(self, spring):
        spring.center_at(10.0, 20.0)
        assert spring.graph_to_screen(10.0, 20.0) == (600.0, 400.0)
