"""
Animation: drawing plans and time queries.
"""

from .plan import DrawingInstruction, DrawingPlan
from .animator import (
    create_drawing_plan,
    frame_count,
    frames,
    interpolate_stroke,
    state_at_time,
)

__all__ = [
    'DrawingInstruction',
    'DrawingPlan',
    'create_drawing_plan',
    'frame_count',
    'frames',
    'interpolate_stroke',
    'state_at_time',
]
