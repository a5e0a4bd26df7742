"""
Tests for the phase -> force parameter mapping and simulator binding.
"""

import pytest

from faultgraph.config.settings import ForceSettings, RelationForce
from faultgraph.core.models import Node, RelationKind
from faultgraph.layout.forces import ForceConfigurator
from faultgraph.layout.scene import Phase, SceneLink, SceneNode

SETTLE = Phase.SETTLE_TREE
WITH_IFACE = Phase.WITH_INTERFACE


@pytest.fixture
def forces():
    return ForceConfigurator()


def tree_node(scale=1.0):
    return SceneNode(node=Node(id=1, name="Effect", scale=scale), is_tree=True)


def iface_node():
    return SceneNode(node=Node(id=2, name="Interface"), is_tree=False)


class TestParameterMapping:

    def test_link_distance_is_phase_independent(self, forces):
        assert forces.link_distance("child_of") == 55
        assert forces.link_distance("causes") == 5
        assert forces.link_distance(RelationKind.CHILD_OF) == 55

    def test_settle_strengths(self, forces):
        assert forces.link_strength(SETTLE, "child_of") == pytest.approx(0.9 * 1.8)
        assert forces.link_strength(SETTLE, "detects") == pytest.approx(0.05)

    def test_interface_phase_strengths(self, forces):
        assert forces.link_strength(WITH_IFACE, "child_of") == pytest.approx(0.9)
        assert forces.link_strength(WITH_IFACE, "detects") == pytest.approx(0.35)

    def test_settle_interface_strength_is_non_zero(self, forces):
        assert forces.link_strength(SETTLE, "causes") > 0

    def test_charge(self, forces):
        assert forces.charge(SETTLE, True) == pytest.approx(-1.8)
        assert forces.charge(SETTLE, False) == pytest.approx(-700)
        assert forces.charge(WITH_IFACE, True) == pytest.approx(-1)
        assert forces.charge(WITH_IFACE, False) == pytest.approx(-700)

    def test_collide_radius(self, forces):
        assert forces.collide_radius(SETTLE, tree_node(scale=2.0)) == pytest.approx(36)
        assert forces.collide_radius(SETTLE, iface_node()) == 0
        assert forces.collide_radius(WITH_IFACE, tree_node()) is None

    def test_accepts_link_objects(self, forces):
        link = SceneLink(source=1, target=2, relation="child_of")
        assert forces.link_distance(link) == 55
        assert forces.link_strength(WITH_IFACE, SceneLink(1, 2, "causes")) == pytest.approx(0.35)

    def test_custom_settings(self):
        settings = ForceSettings(
            tree=RelationForce(80.0, 0.5, -2.0),
            interface=RelationForce(10.0, 0.2, -100.0),
            boost_factor=2.0,
        )
        forces = ForceConfigurator(settings)
        assert forces.link_distance("child_of") == 80
        assert forces.link_strength(SETTLE, "child_of") == pytest.approx(1.0)
        assert forces.charge(SETTLE, True) == pytest.approx(-4.0)


class TestConfigure:

    def test_missing_simulator(self, forces):
        assert forces.configure(None, SETTLE) is False

    def test_settle_configuration(self, forces, recording_simulator):
        sim = recording_simulator
        links = [SceneLink(1, 2, "child_of"), SceneLink(2, 3, "causes")]
        sim.set_graph_data([tree_node()], links)

        assert forces.configure(sim, SETTLE) is True
        assert sim.bound_links == links
        assert sim.link_distance(links[0]) == 55
        assert sim.link_strength(links[1]) == pytest.approx(0.05)
        assert sim.charge[1:] == (1.0, 2000.0)
        assert sim.collide is not None
        assert sim.collide[1:] == (1.0, 2)
        assert sim.velocity_decay == pytest.approx(0.25)
        assert sim.alpha_target == pytest.approx(0.7)
        assert sim.reheats == 1

    def test_interface_phase_disables_collision(self, forces, recording_simulator):
        sim = recording_simulator
        sim.set_graph_data([], [SceneLink(1, 2, "causes")])
        forces.configure(sim, SETTLE)
        forces.configure(sim, WITH_IFACE)
        assert sim.collide is None
        assert sim.link_strength(SceneLink(1, 2, "causes")) == pytest.approx(0.35)

    def test_charge_per_node(self, forces, recording_simulator):
        sim = recording_simulator
        forces.configure(sim, SETTLE)
        strength = sim.charge[0]
        assert strength(tree_node()) == pytest.approx(-1.8)
        assert strength(iface_node()) == pytest.approx(-700)

    def test_rebinds_current_link_list(self, forces, recording_simulator):
        sim = recording_simulator
        sim.set_graph_data([], [SceneLink(1, 2, "child_of")])
        forces.configure(sim, SETTLE)

        fresh = [SceneLink(1, 2, "child_of"), SceneLink(1, 3, "causes")]
        sim.set_graph_data([], fresh)
        forces.configure(sim, WITH_IFACE)

        assert sim.bound_links == fresh
        assert sim.count("set_link_force") == 2

    def test_knobs_reapplied_every_run(self, forces, recording_simulator):
        sim = recording_simulator
        forces.configure(sim, SETTLE)
        forces.configure(sim, SETTLE)
        assert sim.count("set_velocity_decay") == 2
        assert sim.count("set_alpha_target") == 2
        assert sim.reheats == 2
