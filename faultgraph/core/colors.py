"""
Severity Color Ramp

Two-stop interpolation (light -> dark) over normalized severity.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Tuple

LIGHT = "#FFE3FF"
DARK = "#6B0F6B"

#: Neutral ramp position used when no node declares a severity.
DEFAULT_NEUTRAL_T = 0.35


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = int(color.lstrip("#"), 16)
    return (value >> 16) & 255, (value >> 8) & 255, value & 255


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{max(0, min(255, round(v))):02x}" for v in (r, g, b))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


@dataclass(frozen=True)
class SeverityRamp:
    """
    Maps severities onto the light -> dark ramp.

    The range is taken from the nodes that declare a numeric severity;
    ``[0, 1]`` when none do. A degenerate range (min == max) normalizes
    every severity to 1.
    """
    minimum: float = 0.0
    maximum: float = 1.0
    light: str = LIGHT
    dark: str = DARK

    @classmethod
    def from_severities(cls, severities: Iterable[float], light: str = LIGHT, dark: str = DARK) -> "SeverityRamp":
        values = list(severities)
        if not values:
            return cls(0.0, 1.0, light, dark)
        return cls(min(values), max(values), light, dark)

    def normalize(self, severity: float) -> float:
        if self.maximum == self.minimum:
            return 1.0
        t = (severity - self.minimum) / (self.maximum - self.minimum)
        return max(0.0, min(1.0, t))

    def color_at(self, t: float) -> str:
        a, b = hex_to_rgb(self.light), hex_to_rgb(self.dark)
        return rgb_to_hex(lerp(a[0], b[0], t), lerp(a[1], b[1], t), lerp(a[2], b[2], t))

    def color_for(self, severity: float) -> str:
        return self.color_at(self.normalize(severity))
