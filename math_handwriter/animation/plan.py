"""
Drawing plan: timed stroke and pause instructions.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..data.types import LayoutBox, Point

STROKE = 'stroke'
PAUSE = 'pause'


@dataclass(frozen=True)
class DrawingInstruction:
    """One step of the animation. Times are ms from the animation start."""
    kind: str                        # 'stroke' | 'pause'
    start_time: float
    end_time: float
    points: Tuple[Point, ...] = ()   # stroke only

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, 'points', tuple(self.points))

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    @property
    def is_stroke(self) -> bool:
        return self.kind == STROKE

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'type': self.kind,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'duration': self.duration,
        }
        if self.is_stroke:
            result['points'] = [[p.x, p.y] for p in self.points]
        return result


@dataclass(frozen=True)
class DrawingPlan:
    """Strictly sequential instructions plus the expression's bounding box."""
    instructions: Tuple[DrawingInstruction, ...]
    total_duration: float
    bounds: LayoutBox

    def __post_init__(self):
        if not isinstance(self.instructions, tuple):
            object.__setattr__(self, 'instructions', tuple(self.instructions))

    @property
    def stroke_instructions(self) -> List[DrawingInstruction]:
        return [ins for ins in self.instructions if ins.is_stroke]

    @property
    def num_strokes(self) -> int:
        return len(self.stroke_instructions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_duration': self.total_duration,
            'bounds': self.bounds.to_dict(),
            'instructions': [ins.to_dict() for ins in self.instructions],
        }
