"""
Geometry Types for Handwritten Math

Immutable value types shared by the layout engine, stroke generator and
animator:
- Point, Stroke: pen geometry in absolute (or normalized) coordinates
- SymbolMetrics: normalized glyph outline plus its metrics
- PositionedSymbol: a glyph placed at an absolute origin and size
- DecorationStroke: a structural mark (fraction bar, radical, accent)
- LayoutBox: bounding box with baseline offset

Usage:
    from math_handwriter.data.types import Point, Stroke

    stroke = Stroke.from_list([[0, 0], [10, 0], [10, 10]])
    arr = stroke.to_array()      # [N, 2] numpy array
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np


# =============================================================================
# Pen Geometry
# =============================================================================

@dataclass(frozen=True)
class Point:
    """A 2D point. Consumers interpret units as pixels."""
    x: float
    y: float

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def translated(self, dx: float, dy: float) -> 'Point':
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Stroke:
    """A single stroke (pen down to pen up) with an optional pre-delay in ms."""
    points: Tuple[Point, ...]
    delay: float = 0.0

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, 'points', tuple(self.points))

    @classmethod
    def from_list(cls, point_list: Iterable[Sequence[float]], delay: float = 0.0) -> 'Stroke':
        """Create from [[x, y], [x, y], ...] format."""
        return cls(points=tuple(Point(float(p[0]), float(p[1])) for p in point_list), delay=delay)

    @classmethod
    def from_array(cls, arr: np.ndarray, delay: float = 0.0) -> 'Stroke':
        """Create from a numpy array [N, 2]."""
        return cls(points=tuple(Point(float(x), float(y)) for x, y in arr[:, :2]), delay=delay)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [N, 2]."""
        if not self.points:
            return np.zeros((0, 2), dtype=np.float64)
        return np.array([[p.x, p.y] for p in self.points], dtype=np.float64)

    def to_list(self) -> List[List[float]]:
        return [[p.x, p.y] for p in self.points]

    def with_points(self, points: Iterable[Point]) -> 'Stroke':
        """New stroke with the same delay and different geometry."""
        return Stroke(points=tuple(points), delay=self.delay)

    @property
    def num_points(self) -> int:
        return len(self.points)

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """Return (x_min, y_min, x_max, y_max)."""
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))


# =============================================================================
# Glyph Metrics and Placement
# =============================================================================

@dataclass(frozen=True)
class SymbolMetrics:
    """
    Normalized glyph shape for one character.

    Strokes live in a 0..1 box with a top-left origin. Instances are shared
    read-only data: many PositionedSymbols reference the same object.
    """
    char: str
    strokes: Tuple[Stroke, ...]
    baseline: float       # 0 = top, 1 = bottom of the glyph box
    aspect_ratio: float   # width / height
    advance: float        # pen advance after drawing, relative to own width

    def __post_init__(self):
        if not isinstance(self.strokes, tuple):
            object.__setattr__(self, 'strokes', tuple(self.strokes))


@dataclass(frozen=True)
class PositionedSymbol:
    """A glyph placed at an absolute top-left origin and height."""
    metrics: SymbolMetrics
    origin: Point
    height: float
    rotation: Optional[float] = None  # radians, about the symbol center

    @property
    def width(self) -> float:
        return self.height * self.metrics.aspect_ratio

    @property
    def center(self) -> Point:
        return Point(self.origin.x + self.width / 2, self.origin.y + self.height / 2)

    def translated(self, dx: float, dy: float) -> 'PositionedSymbol':
        return PositionedSymbol(
            metrics=self.metrics,
            origin=self.origin.translated(dx, dy),
            height=self.height,
            rotation=self.rotation,
        )


@dataclass(frozen=True)
class DecorationStroke:
    """Absolute-space mark emitted directly by the layout engine."""
    points: Tuple[Point, ...]
    kind: str = ""  # fraction_bar, radical, accent

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, 'points', tuple(self.points))

    def translated(self, dx: float, dy: float) -> 'DecorationStroke':
        return DecorationStroke(points=tuple(p.translated(dx, dy) for p in self.points), kind=self.kind)


# =============================================================================
# Layout Box
# =============================================================================

@dataclass(frozen=True)
class LayoutBox:
    """Bounding box of a laid-out subtree. `baseline` is measured from `y`."""
    x: float
    y: float
    width: float
    height: float
    baseline: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def baseline_y(self) -> float:
        return self.y + self.baseline

    def translated(self, dx: float, dy: float) -> 'LayoutBox':
        return LayoutBox(self.x + dx, self.y + dy, self.width, self.height, self.baseline)

    def to_dict(self) -> dict:
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'baseline': self.baseline,
        }
