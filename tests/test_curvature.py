"""
Tests for parallel-edge curvature assignment.
"""

import pytest

from faultgraph.core.models import Link
from faultgraph.layout.curvature import (
    DEFAULT_CURVATURE_BASE,
    apply_curvatures,
    curvature_offsets,
    pair_key,
)
from faultgraph.layout.scene import SceneLink


def scene_links(*specs):
    return [SceneLink(source=s, target=t, relation=r) for s, t, r in specs]


class TestCurvatureOffsets:

    def test_single_interface_link_is_straight(self):
        assert curvature_offsets([Link(1, 3, "detects")]) == [0.0]

    def test_hierarchy_links_are_straight(self):
        links = [Link(1, 2), Link(1, 2), Link(2, 1)]
        assert curvature_offsets(links) == [0.0, 0.0, 0.0]

    def test_fan_symmetry(self):
        links = [Link(5, 6, r) for r in ("a", "b", "c", "d")]
        base = DEFAULT_CURVATURE_BASE
        assert curvature_offsets(links) == pytest.approx([base, -base, 2 * base, -2 * base])

    def test_fan_ignores_direction(self):
        links = [Link(5, 6, "detects"), Link(6, 5, "causes"), Link(5, 6, "mitigates")]
        assert curvature_offsets(links, base=0.1) == pytest.approx([0.1, -0.1, 0.2])

    def test_lone_interface_link_curves_beside_hierarchy(self):
        links = [Link(1, 2), Link(1, 2, "causes")]
        assert curvature_offsets(links) == pytest.approx([0.0, DEFAULT_CURVATURE_BASE])

    def test_groups_are_independent(self):
        links = [Link(1, 2, "x"), Link(2, 3, "y"), Link(1, 2, "z"), Link(1, 3, "w")]
        assert curvature_offsets(links, base=1.0) == [1.0, 0.0, -1.0, 0.0]

    def test_scenario_pairs(self):
        # 1->3 shares no pair with the 1->2->3 hierarchy path
        links = [Link(1, 2), Link(2, 3), Link(1, 3, "detects")]
        assert curvature_offsets(links) == [0.0, 0.0, 0.0]

    def test_empty(self):
        assert curvature_offsets([]) == []

    def test_pair_key_is_undirected(self):
        assert pair_key(Link(7, 2)) == pair_key(Link(2, 7)) == (2, 7)


class TestApplyCurvatures:

    def test_annotates_scene_links_in_place(self):
        links = scene_links((5, 6, "detects"), (5, 6, "mitigates"), (6, 9, "child_of"))
        result = apply_curvatures(links, base=0.3)
        assert result is links
        assert [l.curvature for l in links] == pytest.approx([0.3, -0.3, 0.0])

    def test_reapplying_resets_stale_values(self):
        links = scene_links((5, 6, "detects"))
        links[0].curvature = 0.9
        apply_curvatures(links)
        assert links[0].curvature == 0.0
