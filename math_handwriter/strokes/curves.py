"""
Stroke curve utilities: length, Catmull-Rom smoothing, arc-length resampling.

All functions return new Strokes and keep the input's pre-delay.
"""

from typing import List

import numpy as np

from ..data.types import Point, Stroke


def stroke_length(stroke: Stroke) -> float:
    """Sum of Euclidean segment lengths."""
    if stroke.num_points < 2:
        return 0.0
    deltas = np.diff(stroke.to_array(), axis=0)
    return float(np.hypot(deltas[:, 0], deltas[:, 1]).sum())


def _catmull_rom(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray, p3: np.ndarray,
                 t: np.ndarray, tension: float) -> np.ndarray:
    """Cubic Hermite form of the Catmull-Rom segment p1 -> p2 at parameters t [K, 1]."""
    v0 = (p2 - p0) * tension
    v1 = (p3 - p1) * tension
    t2 = t * t
    t3 = t2 * t
    return ((2 * p1 - 2 * p2 + v0 + v1) * t3
            + (-3 * p1 + 3 * p2 - 2 * v0 - v1) * t2
            + v0 * t
            + p1)


def smooth_stroke(stroke: Stroke, tension: float = 0.5, segment_length: float = 5.0) -> Stroke:
    """
    Catmull-Rom spline through the stroke's points.

    Each segment gets max(2, floor(length / segment_length)) samples, taken
    at t = k / steps for k < steps, so joints appear once. Strokes with fewer
    than three points are returned unchanged.
    """
    if segment_length <= 0:
        raise ValueError(f"segment_length must be positive, got {segment_length}")
    if stroke.num_points < 3:
        return stroke

    arr = stroke.to_array()
    n = len(arr)
    samples: List[np.ndarray] = []

    for i in range(n - 1):
        p0 = arr[max(0, i - 1)]
        p1 = arr[i]
        p2 = arr[i + 1]
        p3 = arr[min(n - 1, i + 2)]

        distance = float(np.hypot(*(p2 - p1)))
        steps = max(2, int(distance // segment_length))
        t = (np.arange(steps, dtype=np.float64) / steps)[:, None]
        samples.append(_catmull_rom(p0, p1, p2, p3, t, tension))

    middle = np.concatenate(samples)[1:]
    points = [stroke.points[0]]
    points.extend(Point(float(x), float(y)) for x, y in middle)
    points.append(stroke.points[-1])
    return stroke.with_points(points)


def resample_stroke(stroke: Stroke, spacing: float = 2.0) -> Stroke:
    """
    Evenly spaced points along the stroke's arc length.

    Samples every `spacing` units of travelled distance (linear interpolation
    inside each segment). The first and last input points are kept exactly.
    """
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")
    if stroke.num_points < 2:
        return stroke

    arr = stroke.to_array()
    deltas = np.diff(arr, axis=0)
    cumulative = np.concatenate([[0.0], np.cumsum(np.hypot(deltas[:, 0], deltas[:, 1]))])
    total = float(cumulative[-1])

    targets = np.arange(spacing, total, spacing)
    # Drop samples that would land on top of the final point
    targets = targets[targets < total - 1e-9 * max(1.0, total)]

    xs = np.interp(targets, cumulative, arr[:, 0])
    ys = np.interp(targets, cumulative, arr[:, 1])

    points = [stroke.points[0]]
    points.extend(Point(float(x), float(y)) for x, y in zip(xs, ys))
    points.append(stroke.points[-1])
    return stroke.with_points(points)
