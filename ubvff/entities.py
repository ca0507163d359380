from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from .byteorder import ViewBounds


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def scaled(self, scale: int) -> Tuple[float, float]:
        return self.x / scale, self.y / scale


@dataclass(frozen=True)
class Cubic:
    points: Tuple[Point, Point, Point]

    @classmethod
    def from_points(cls, points) -> "Cubic":
        if len(points) != 3:
            raise ValueError(f"a cubic needs exactly 3 points, got {len(points)}")
        return cls(points=(points[0], points[1], points[2]))


@dataclass(frozen=True)
class Color:
    r: int = 0
    g: int = 0
    b: int = 0

    @classmethod
    def from_word(cls, word: int) -> "Color":
        # Type 1 packs the channels into one 32-bit word, red in the low byte.
        return cls(r=word & 0xFF, g=(word >> 8) & 0xFF, b=(word >> 16) & 0xFF)

    def as_rgb(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"


@dataclass(frozen=True)
class Type1Header:
    x1: int = 0
    y1: int = 0
    x2: int = 0
    y2: int = 0
    unknown: int = 0


@dataclass(frozen=True)
class Type2Header:
    z1: int
    command_count: int
    z2: int
    x1: int
    y1: int
    x2: int
    y2: int


@dataclass(frozen=True)
class Type2Footer:
    cmd: int
    points_file_number: int
    z1: int
    z2: int
    z3: int


@dataclass(frozen=True)
class LayerRef:
    file_number: int
    layer_number: int


@dataclass(frozen=True)
class PathEntity:
    """One finished path: SVG-style ops in fixed-point units plus its paint."""

    ops: Tuple[Tuple[str, Tuple[Point, ...]], ...]
    fill: Color | None
    stroke: Color | None
    stroke_width: int
    layer: int = 0


@dataclass
class DrawContext:
    """Mutable paint state threaded through one decode."""

    stroke_width: int
    fill_color: Color = field(default_factory=Color)
    stroke_color: Color = field(default_factory=Color)
    has_fill: bool = False
    has_stroke: bool = False
    stroke_flag_a: int = 0
    stroke_flag_b: int = 0
    bounds: ViewBounds = field(default_factory=ViewBounds)
