"""
Layout Settings

Tunable parameters for the two-phase layout, loadable from the environment
or from a YAML/JSON file.
"""

from __future__ import annotations
import json
import math
import os
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


@dataclass
class TimingSettings:
    """Settle duration and the simulator's nominal tick length."""
    settle_tree_ms: int = 1000
    fit_duration_ms: int = 200
    tick_ms: int = 16  # ~60 fps

    def __post_init__(self):
        if self.tick_ms <= 0:
            raise ValueError(f"timing.tick_ms must be positive, got {self.tick_ms}")

    def ticks_from_ms(self, ms: Optional[int] = None) -> int:
        ms = self.settle_tree_ms if ms is None else ms
        return max(1, math.floor(ms / self.tick_ms + 0.5))


@dataclass
class RelationForce:
    link_distance: float
    link_strength: float
    charge: float


@dataclass
class ForceSettings:
    """Per-relation forces plus the settle-phase boost."""
    tree: RelationForce = field(default_factory=lambda: RelationForce(55.0, 0.9, -1.0))
    interface: RelationForce = field(default_factory=lambda: RelationForce(5.0, 0.35, -700.0))
    boost_factor: float = 1.8
    settle_interface_strength: float = 0.05
    charge_distance_min: float = 1.0
    charge_distance_max: float = 2000.0
    collide_radius: float = 18.0
    collide_strength: float = 1.0
    collide_iterations: int = 2
    velocity_decay: float = 0.25
    alpha_target: float = 0.7


@dataclass
class PlacementSettings:
    """Arc on which interface-only nodes are seeded around their anchor."""
    ring_radius: float = 56.0
    start_deg: float = 210.0
    end_deg: float = 330.0
    margin_deg: float = 6.0


@dataclass
class LocalViewSettings:
    visible_depth: int = 2
    min_depth: int = 1
    max_depth: int = 6
    jitter: float = 10.0  # side of the square initial positions are drawn from
    velocity_kick: float = 1.5  # spread of the interface-node kick

    def clamp_depth(self, depth: int) -> int:
        return max(self.min_depth, min(self.max_depth, int(depth)))


@dataclass
class ScalingSettings:
    node_radius: float = 10.0
    function_scale: float = 1.35
    interface_scale: float = 0.9
    root_scale_mul: float = 2.0
    child_decay: float = 0.85


@dataclass
class ViewSettings:
    fit_padding: float = 120.0
    show_interface: bool = True
    curvature_base: float = 0.22
    width: int = 1200
    height: int = 800


@dataclass
class LayoutSettings:
    """Application settings for the layout pipeline."""

    timing: TimingSettings = field(default_factory=TimingSettings)
    forces: ForceSettings = field(default_factory=ForceSettings)
    placement: PlacementSettings = field(default_factory=PlacementSettings)
    local: LocalViewSettings = field(default_factory=LocalViewSettings)
    scaling: ScalingSettings = field(default_factory=ScalingSettings)
    view: ViewSettings = field(default_factory=ViewSettings)
    seed: Optional[int] = None

    @classmethod
    def from_env(cls) -> "LayoutSettings":
        """Load settings from environment variables."""
        settings = cls()
        if os.getenv("FAULTGRAPH_SETTLE_MS"):
            settings.timing.settle_tree_ms = int(os.environ["FAULTGRAPH_SETTLE_MS"])
        if os.getenv("FAULTGRAPH_VISIBLE_DEPTH"):
            settings.local.visible_depth = int(os.environ["FAULTGRAPH_VISIBLE_DEPTH"])
        if os.getenv("FAULTGRAPH_CURVATURE_BASE"):
            settings.view.curvature_base = float(os.environ["FAULTGRAPH_CURVATURE_BASE"])
        if os.getenv("FAULTGRAPH_SHOW_INTERFACE"):
            settings.view.show_interface = os.environ["FAULTGRAPH_SHOW_INTERFACE"].lower() in ("1", "true", "yes", "on")
        if os.getenv("FAULTGRAPH_SEED"):
            settings.seed = int(os.environ["FAULTGRAPH_SEED"])
        return settings

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutSettings":
        return _build(cls, data or {}, "settings")

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "LayoutSettings":
        """Load settings from a YAML or JSON file."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as exc:
                    raise ValueError(f"Invalid YAML in settings file {path}: {exc}") from exc
        if data is not None and not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls.from_dict(data or {})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _build(cls, data: Dict[str, Any], where: str):
    """Recursively build a settings dataclass, rejecting unknown keys."""
    known = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(known)
    if unknown:
        raise ValueError(f"Unknown {where} keys: {', '.join(sorted(unknown))}")

    defaults = cls() if cls is not RelationForce else None
    kwargs = {}
    for name, value in data.items():
        current = getattr(defaults, name, None) if defaults is not None else None
        if is_dataclass(current) and isinstance(value, dict):
            merged = {**asdict(current), **value}
            kwargs[name] = _build(type(current), merged, f"{where}.{name}")
        else:
            kwargs[name] = value
    return cls(**kwargs)
