"""
Stroke-order figure (matplotlib).

Draws every stroke of a plan colored by its start time, with the layout
bounds as a dashed rectangle. Useful for checking drawing order and layout.
"""

from typing import Optional

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
from matplotlib import cm
from matplotlib.colors import Normalize

from ..animation.plan import DrawingPlan


def plot_drawing_plan(
    plan: DrawingPlan,
    ax: Optional[plt.Axes] = None,
    cmap: str = 'viridis',
    show_bounds: bool = True,
    line_width: float = 1.5,
) -> plt.Figure:
    """Plot strokes in plan coordinates (y grows downward)."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 4))
    else:
        fig = ax.figure

    norm = Normalize(vmin=0.0, vmax=max(plan.total_duration, 1e-9))
    colormap = plt.get_cmap(cmap)

    for instruction in plan.stroke_instructions:
        if not instruction.points:
            continue
        xs = [p.x for p in instruction.points]
        ys = [p.y for p in instruction.points]
        ax.plot(xs, ys, color=colormap(norm(instruction.start_time)), linewidth=line_width)

    if show_bounds:
        box = plan.bounds
        ax.add_patch(mpatches.Rectangle(
            (box.x, box.y), box.width, box.height,
            fill=False, linestyle='--', edgecolor='gray', linewidth=0.8,
        ))
        ax.axhline(box.baseline_y, color='lightgray', linewidth=0.5)

    ax.set_aspect('equal')
    ax.invert_yaxis()
    ax.set_title(f"{plan.num_strokes} strokes, {plan.total_duration:.0f} ms")

    mappable = cm.ScalarMappable(norm=norm, cmap=colormap)
    mappable.set_array([])
    fig.colorbar(mappable, ax=ax, label='start time (ms)')

    return fig
