"""
Tests for arc placement of interface-only nodes.
"""

import math

import pytest

from faultgraph.config.settings import PlacementSettings
from faultgraph.layout.scene import SceneNode
from faultgraph.layout.seeding import arc_angles, seed_interface_positions


@pytest.fixture
def placement():
    return PlacementSettings()


def scene_nodes(model, tree_positions, others):
    nodes = []
    for node_id, (x, y) in tree_positions.items():
        n = SceneNode(node=model.by_id[node_id], is_tree=True)
        n.pin(x, y)
        nodes.append(n)
    for node_id in others:
        nodes.append(SceneNode(node=model.by_id[node_id], is_tree=False))
    return {n.id: n for n in nodes}


class TestArcAngles:

    def test_single_node_sits_mid_arc(self, placement):
        assert arc_angles(1, placement) == [pytest.approx(math.radians(270))]

    def test_even_spread_inside_margins(self, placement):
        angles = [math.degrees(a) for a in arc_angles(3, placement)]
        assert angles == pytest.approx([216, 270, 324])

    def test_no_nodes(self, placement):
        assert arc_angles(0, placement) == []


class TestSeedInterfacePositions:

    def test_nodes_placed_on_ring_around_anchor(self, fault_model, placement):
        by_id = scene_nodes(fault_model, {6: (100.0, 40.0), 4: (0.0, 0.0)}, [5, 8])
        buckets = seed_interface_positions(fault_model, list(by_id.values()), {4, 6}, placement)

        assert buckets == {6: [5, 8]}
        for node_id in (5, 8):
            n = by_id[node_id]
            assert math.hypot(n.x - 100.0, n.y - 40.0) == pytest.approx(56.0)

    def test_shared_anchor_spreads_across_arc(self, fault_model, placement):
        by_id = scene_nodes(fault_model, {6: (0.0, 0.0)}, [5, 8])
        seed_interface_positions(fault_model, list(by_id.values()), {6}, placement)

        first = math.degrees(math.atan2(by_id[5].y, by_id[5].x)) % 360
        second = math.degrees(math.atan2(by_id[8].y, by_id[8].x)) % 360
        assert first == pytest.approx(216)
        assert second == pytest.approx(324)

    def test_anchorless_nodes_left_unplaced(self, fault_model, placement):
        by_id = scene_nodes(fault_model, {6: (0.0, 0.0)}, [8, 11])
        seed_interface_positions(fault_model, list(by_id.values()), {6}, placement)

        assert by_id[8].placed
        assert not by_id[11].placed

    def test_tree_nodes_untouched(self, fault_model, placement):
        by_id = scene_nodes(fault_model, {6: (3.0, 4.0)}, [5])
        seed_interface_positions(fault_model, list(by_id.values()), {6}, placement)
        assert (by_id[6].x, by_id[6].y) == (3.0, 4.0)
        assert by_id[6].pinned
