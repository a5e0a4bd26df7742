"""
Test Configuration and Fixtures
================================

Shared pytest fixtures for the faultgraph test suite.

Usage:
    pytest tests/                    # Run all tests
    pytest tests/ -v                 # Verbose output
    pytest tests/ -k "controller"    # Run only controller tests
    pytest tests/ --quick            # Skip slow tests
"""

import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from faultgraph.config.settings import LayoutSettings
from faultgraph.core.graph_model import GraphModel


# =============================================================================
# Custom Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--quick",
        action="store_true",
        default=False,
        help="Skip slow tests",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests if --quick is specified"""
    if config.getoption("--quick"):
        skip_slow = pytest.mark.skip(reason="Skipped with --quick")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


# =============================================================================
# Graph Data Fixtures
# =============================================================================

@pytest.fixture
def scenario_raw() -> Dict[str, Any]:
    """Three-node function -> effect -> cause chain with one interface edge."""
    return {
        "nodes": [
            {"id": 1, "name": "Function A", "severity": 5},
            {"id": 2, "name": "Effect"},
            {"id": 3, "name": "Cause"},
        ],
        "links": [
            {"source": 1, "target": 2, "relation": "child_of"},
            {"source": 2, "target": 3, "relation": "child_of"},
            {"source": 1, "target": 3, "relation": "detects"},
        ],
    }


@pytest.fixture
def fault_tree_raw() -> Dict[str, Any]:
    """
    Two function trees sharing a cause, plus interface-only nodes.

        1 Function Braking (8)      2 Function Steering (3)
        |                           |
        3 Effect loss of braking    4 Effect drift
        |        \\                 /      \\
        5 Cause   7 Cause ECU reset        6 Cause sensor fault
                                           |
                                           9 Detection self test

    Interface: 8->5, 8->6, 5->6 (x2), 6->5, 11->8; one link to a missing node.
    """
    return {
        "nodes": [
            {"id": 1, "name": "Function Braking", "severity": 8, "components": ["pad", "caliper"]},
            {"id": 2, "name": "Function Steering", "severity": 3},
            {"id": 3, "name": "Effect loss of braking"},
            {"id": 4, "name": "Effect drift"},
            {"id": 5, "name": "Cause worn pad"},
            {"id": 6, "name": "Cause sensor fault"},
            {"id": 7, "name": "Cause ECU reset"},
            {"id": 8, "name": "Interface CAN bus"},
            {"id": 9, "name": "Detection self test"},
            {"id": 11, "name": "Interface gateway"},
        ],
        "links": [
            {"source": 1, "target": 3, "relation": "child_of"},
            {"source": 2, "target": 4, "relation": "child_of"},
            {"source": 3, "target": 5, "relation": "child_of"},
            {"source": 3, "target": 7, "relation": "child_of"},
            {"source": 4, "target": 7, "relation": "child_of"},
            {"source": 4, "target": 6, "relation": "child_of"},
            {"source": 6, "target": 9, "relation": "child_of"},
            {"source": 8, "target": 5, "relation": "causes"},
            {"source": 8, "target": 6, "relation": "causes"},
            {"source": 5, "target": 6, "relation": "detects"},
            {"source": 5, "target": 6, "relation": "mitigates"},
            {"source": 6, "target": 5, "relation": "causes"},
            {"source": 11, "target": 8, "relation": "feeds"},
            {"source": 1, "target": 99, "relation": "child_of"},
        ],
    }


@pytest.fixture
def scenario_model(scenario_raw) -> GraphModel:
    return GraphModel.from_raw(scenario_raw)


@pytest.fixture
def fault_model(fault_tree_raw) -> GraphModel:
    return GraphModel.from_raw(fault_tree_raw)


@pytest.fixture
def settings() -> LayoutSettings:
    return LayoutSettings(seed=42)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


# =============================================================================
# Simulator Fixtures
# =============================================================================

class RecordingSimulator:
    """
    ForceSimulator fake that records every command and never moves a node.

    ``stop()`` fires the registered engine-stop callback, as a real
    simulator does at the end of a tick budget.
    """

    def __init__(self):
        self.nodes: List[Any] = []
        self.links: List[Any] = []
        self.calls: List[Tuple[str, tuple]] = []
        self.callback = None
        self.cooldown_ticks: Optional[int] = None
        self.bound_links: List[Any] = []
        self.link_distance = None
        self.link_strength = None
        self.charge = None
        self.collide = None
        self.velocity_decay = None
        self.alpha_target = None
        self.reheats = 0
        self.camera: Dict[str, Any] = {}

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def stop(self):
        if self.callback is not None:
            return self.callback()
        return None

    def graph_data(self):
        return self.nodes, self.links

    def set_graph_data(self, nodes, links):
        self.calls.append(("set_graph_data", (len(nodes), len(links))))
        self.nodes = list(nodes)
        self.links = list(links)

    def on_engine_stop(self, callback):
        self.calls.append(("on_engine_stop", ()))
        self.callback = callback

    def set_cooldown_ticks(self, ticks):
        self.calls.append(("set_cooldown_ticks", (ticks,)))
        self.cooldown_ticks = ticks

    def set_link_force(self, links, distance, strength):
        self.calls.append(("set_link_force", (len(links),)))
        self.bound_links = list(links)
        self.link_distance = distance
        self.link_strength = strength

    def set_charge_force(self, strength, distance_min, distance_max):
        self.calls.append(("set_charge_force", (distance_min, distance_max)))
        self.charge = (strength, distance_min, distance_max)

    def set_collide_force(self, radius, strength=1.0, iterations=1):
        self.calls.append(("set_collide_force", (radius is not None, strength, iterations)))
        self.collide = None if radius is None else (radius, strength, iterations)

    def set_velocity_decay(self, decay):
        self.calls.append(("set_velocity_decay", (decay,)))
        self.velocity_decay = decay

    def set_alpha_target(self, alpha_target):
        self.calls.append(("set_alpha_target", (alpha_target,)))
        self.alpha_target = alpha_target

    def reheat(self):
        self.calls.append(("reheat", ()))
        self.reheats += 1

    def zoom_to_fit(self, duration_ms=0, padding=0.0):
        self.calls.append(("zoom_to_fit", (duration_ms, padding)))
        self.camera["fit"] = (duration_ms, padding)

    def center_at(self, x, y, duration_ms=0):
        self.calls.append(("center_at", (x, y, duration_ms)))
        self.camera["center"] = (x, y)

    def graph_to_screen(self, x, y):
        return (x * 2 + 100, y * 2 + 50)


@pytest.fixture
def recording_simulator() -> RecordingSimulator:
    return RecordingSimulator()
