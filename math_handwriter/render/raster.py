"""
Raster preview of drawing plans (Pillow).

Renders snapshots from the animator onto grayscale images, as a final PNG
or an animated GIF of the writing process.

Usage:
    renderer = PlanRenderer(scale=2.0)
    renderer.save_png(plan, "equation.png")
    renderer.save_gif(plan, "equation.gif", fps=30)
"""

import math
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw
from tqdm import tqdm

from ..animation.animator import frame_count, frames, state_at_time
from ..animation.plan import DrawingPlan
from ..data.types import Point

Snapshot = Sequence[Sequence[Point]]
Transform = Tuple[float, float, float]


class PlanRenderer:
    """Render plan snapshots to images."""

    def __init__(
        self,
        scale: float = 1.0,
        padding: int = 20,
        line_width: int = 2,
        background: int = 255,
        foreground: int = 0,
    ):
        """
        Args:
            scale: Pixels per plan unit
            padding: Margin around the content in output pixels
            line_width: Stroke line width in pixels
            background: Background color (0-255)
            foreground: Foreground/stroke color (0-255)
        """
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        self.scale = scale
        self.padding = padding
        self.line_width = line_width
        self.background = background
        self.foreground = foreground

    def canvas_for(self, plan: DrawingPlan) -> Tuple[Tuple[int, int], Transform]:
        """Image size and (scale, offset_x, offset_y) covering the whole plan."""
        xs = [plan.bounds.x, plan.bounds.right]
        ys = [plan.bounds.y, plan.bounds.bottom]
        for instruction in plan.stroke_instructions:
            xs.extend(p.x for p in instruction.points)
            ys.extend(p.y for p in instruction.points)

        x_min, x_max = min(xs), max(xs)
        y_min, y_max = min(ys), max(ys)

        width = max(1, int(math.ceil((x_max - x_min) * self.scale)) + 2 * self.padding)
        height = max(1, int(math.ceil((y_max - y_min) * self.scale)) + 2 * self.padding)

        offset_x = self.padding - x_min * self.scale
        offset_y = self.padding - y_min * self.scale
        return (width, height), (self.scale, offset_x, offset_y)

    def render_state(self, state: Snapshot, size: Tuple[int, int], transform: Transform) -> Image.Image:
        """Draw one snapshot (list of point lists)."""
        img = Image.new('L', size, self.background)
        draw = ImageDraw.Draw(img)
        for points in state:
            self._draw_polyline(draw, points, transform)
        return img

    def _draw_polyline(self, draw: 'ImageDraw.ImageDraw', points: Sequence[Point], transform: Transform):
        if len(points) < 2:
            return
        scale, offset_x, offset_y = transform
        point_list = [(p.x * scale + offset_x, p.y * scale + offset_y) for p in points]
        draw.line(point_list, fill=self.foreground, width=self.line_width, joint='curve')

    def render(self, plan: DrawingPlan, return_numpy: bool = False) -> Union[np.ndarray, Image.Image]:
        """The finished drawing."""
        size, transform = self.canvas_for(plan)
        img = self.render_state(state_at_time(plan, plan.total_duration), size, transform)
        return np.array(img) if return_numpy else img

    def render_frames(self, plan: DrawingPlan, fps: float = 30, show_progress: bool = True) -> List[Image.Image]:
        """Every animation frame as an image."""
        size, transform = self.canvas_for(plan)
        return [
            self.render_state(state, size, transform)
            for state in tqdm(frames(plan, fps), total=frame_count(plan, fps),
                              desc="Rendering frames", disable=not show_progress)
        ]

    def save_png(self, plan: DrawingPlan, path: Union[str, Path]) -> Path:
        path = Path(path)
        self.render(plan).save(path)
        return path

    def save_gif(
        self,
        plan: DrawingPlan,
        path: Union[str, Path],
        fps: float = 30,
        hold_ms: Optional[int] = 1000,
        show_progress: bool = True,
    ) -> Path:
        """Animated GIF of the writing; the last frame is held for `hold_ms`."""
        path = Path(path)
        images = self.render_frames(plan, fps, show_progress=show_progress)
        frame_ms = max(1, int(round(1000.0 / fps)))
        durations = [frame_ms] * len(images)
        if hold_ms:
            durations[-1] = hold_ms
        images[0].save(path, save_all=True, append_images=images[1:], duration=durations, loop=0)
        return path
