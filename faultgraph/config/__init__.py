from .settings import (
    ForceSettings,
    LayoutSettings,
    LocalViewSettings,
    PlacementSettings,
    RelationForce,
    ScalingSettings,
    TimingSettings,
    ViewSettings,
)

__all__ = [
    "ForceSettings",
    "LayoutSettings",
    "LocalViewSettings",
    "PlacementSettings",
    "RelationForce",
    "ScalingSettings",
    "TimingSettings",
    "ViewSettings",
]
