"""
Animator

Assigns timestamps to strokes and reconstructs the partial drawing at any
instant.

Timeline per stroke (clock starts at 0):
    [pause: stroke pre-delay] -> [stroke: length / speed * 1000 ms] -> [pause: inter-stroke]

Usage:
    plan = create_drawing_plan(strokes, layout.box, AnimationConfig(speed=300))
    for snapshot in frames(plan, fps=30):
        draw(snapshot)   # List[List[Point]]
"""

import math
from typing import Iterator, List, Sequence

import numpy as np

from ..configs.settings import AnimationConfig
from ..data.types import LayoutBox, Point, Stroke
from ..strokes.curves import stroke_length
from .plan import PAUSE, STROKE, DrawingInstruction, DrawingPlan


def create_drawing_plan(strokes: Sequence[Stroke], bounds: LayoutBox, config: AnimationConfig) -> DrawingPlan:
    """Build a strictly sequential plan; invalid configs raise ValueError first.

    `config.pause_between_chars` is validated but not applied here: character
    pauses are already folded into stroke delays by `generate_strokes(char_pause=...)`.
    """
    config.validate()

    instructions: List[DrawingInstruction] = []
    current_time = 0.0
    pause = config.pause_between_strokes

    for stroke in strokes:
        if stroke.delay > 0:
            instructions.append(DrawingInstruction(PAUSE, current_time, current_time + stroke.delay))
            current_time += stroke.delay

        duration = stroke_length(stroke) / config.speed * 1000.0
        instructions.append(DrawingInstruction(STROKE, current_time, current_time + duration, stroke.points))
        current_time += duration

        if pause > 0:
            instructions.append(DrawingInstruction(PAUSE, current_time, current_time + pause))
            current_time += pause

    return DrawingPlan(instructions=tuple(instructions), total_duration=current_time, bounds=bounds)


def interpolate_stroke(points: Sequence[Point], progress: float) -> List[Point]:
    """
    Prefix of a polyline covering `progress` (0..1) of its arc length.

    Returns the whole points before the target plus one interpolated point.
    At progress 0 that is [first, first]; at progress >= 1 the full list.
    """
    points = list(points)
    if progress >= 1 or len(points) < 2:
        return points
    progress = max(progress, 0.0)

    arr = np.array([[p.x, p.y] for p in points], dtype=np.float64)
    deltas = np.diff(arr, axis=0)
    segment_lengths = np.hypot(deltas[:, 0], deltas[:, 1])
    target = float(segment_lengths.sum()) * progress

    accumulated = 0.0
    for i, length in enumerate(segment_lengths):
        if accumulated + length >= target:
            fraction = (target - accumulated) / length if length > 0 else 0.0
            p1, p2 = points[i], points[i + 1]
            tip = Point(p1.x + (p2.x - p1.x) * fraction, p1.y + (p2.y - p1.y) * fraction)
            return points[:i + 1] + [tip]
        accumulated += float(length)

    return points


def state_at_time(plan: DrawingPlan, time: float) -> List[List[Point]]:
    """Visible stroke geometry at `time` ms, one entry per started stroke."""
    if time <= 0 and not (time == 0 and plan.total_duration == 0):
        return []

    state = []
    for instruction in plan.instructions:
        if not instruction.is_stroke:
            continue
        if time >= instruction.end_time:
            state.append(list(instruction.points))
        elif time >= instruction.start_time:
            progress = (time - instruction.start_time) / instruction.duration
            state.append(interpolate_stroke(instruction.points, progress))
    return state


def _check_fps(fps: float):
    if not math.isfinite(fps) or fps <= 0:
        raise ValueError(f"fps must be a positive finite number, got {fps!r}")


def _iter_frames(plan: DrawingPlan, frame_duration: float) -> Iterator[List[List[Point]]]:
    k = 0
    while k * frame_duration <= plan.total_duration:
        yield state_at_time(plan, k * frame_duration)
        k += 1
    # Final frame with complete drawing
    yield state_at_time(plan, plan.total_duration)


def frames(plan: DrawingPlan, fps: float = 60) -> Iterator[List[List[Point]]]:
    """
    Lazy snapshots every 1000 / fps ms from 0 through the total duration,
    then one final frame at exactly the total duration.

    Each call starts a fresh sequence.
    """
    _check_fps(fps)
    return _iter_frames(plan, 1000.0 / fps)


def frame_count(plan: DrawingPlan, fps: float = 60) -> int:
    """Number of snapshots frames(plan, fps) yields."""
    _check_fps(fps)
    frame_duration = 1000.0 / fps
    k = int(plan.total_duration // frame_duration)
    while (k + 1) * frame_duration <= plan.total_duration:
        k += 1
    while k > 0 and k * frame_duration > plan.total_duration:
        k -= 1
    return k + 2
