"""
Handwriter

One-call pipeline from LaTeX to a timed drawing plan:

    parse -> layout -> strokes (+ jitter) -> smooth -> resample -> plan

Usage:
    from math_handwriter import Handwriter, HandwriterConfig

    writer = Handwriter(HandwriterConfig(font_size=60, seed=7))
    plan = writer.create_drawing_plan(r"\\frac{a}{b}")
    elements = writer.to_excalidraw_elements(r"x^2 + y^2")
"""

import logging
import random
from typing import Any, Dict, List, Optional

from .animation.animator import create_drawing_plan
from .animation.plan import DrawingPlan
from .configs.settings import HandwriterConfig, replace_config
from .data.expression import ExpressionNode
from .data.latex_parser import parse_latex
from .data.types import Stroke
from .glyphs.metrics import MetricsProvider, default_glyphs
from .layout.engine import LayoutContext, LayoutEngine, LayoutResult
from .render.excalidraw import ExcalidrawStyle, to_excalidraw_elements
from .strokes.curves import resample_stroke, smooth_stroke
from .strokes.generator import generate_strokes

logger = logging.getLogger(__name__)


class Handwriter:
    """Runs the full pipeline with one validated configuration."""

    def __init__(self, config: Optional[HandwriterConfig] = None, glyphs: Optional[MetricsProvider] = None):
        self.config = (config or HandwriterConfig()).validate()
        self.engine = LayoutEngine(glyphs if glyphs is not None else default_glyphs())

    def update_config(self, **changes) -> HandwriterConfig:
        """Replace some settings; the new config is validated before it is used."""
        self.config = replace_config(self.config, **changes)
        return self.config

    def layout(self, tree: ExpressionNode) -> LayoutResult:
        context = LayoutContext.at(self.config.position, self.config.font_size, self.config.spacing)
        return self.engine.layout(tree, context)

    def strokes_for(self, layout: LayoutResult) -> List[Stroke]:
        """Absolute, smoothed and resampled strokes for a layout."""
        config = self.config
        strokes = generate_strokes(
            layout.symbols,
            layout.decorations,
            jitter_amount=config.variation,
            rng=random.Random(config.seed),
            char_pause=config.pause_between_chars,
        )
        if config.smoothing > 0:
            strokes = [smooth_stroke(s, tension=config.smoothing) for s in strokes]
        return [resample_stroke(s, config.resample_spacing) for s in strokes]

    def plan_tree(self, tree: ExpressionNode) -> DrawingPlan:
        """Drawing plan for an already-built expression tree."""
        layout = self.layout(tree)
        strokes = self.strokes_for(layout)
        plan = create_drawing_plan(strokes, layout.box, self.config.animation_config())
        logger.debug(
            "Planned %d symbols, %d decorations -> %d strokes, %.0f ms",
            len(layout.symbols), len(layout.decorations), plan.num_strokes, plan.total_duration,
        )
        return plan

    def create_drawing_plan(self, latex: str) -> DrawingPlan:
        """Parse LaTeX and build its drawing plan."""
        return self.plan_tree(parse_latex(latex))

    def to_excalidraw_elements(self, latex: str, style: Optional[ExcalidrawStyle] = None) -> List[Dict[str, Any]]:
        return to_excalidraw_elements(self.create_drawing_plan(latex), style)


def create_handwritten_equation(latex: str, config: Optional[HandwriterConfig] = None, **changes) -> DrawingPlan:
    """Convenience wrapper: `create_handwritten_equation("x^2", speed=500)`."""
    config = config or HandwriterConfig()
    if changes:
        config = replace_config(config, **changes)
    return Handwriter(config).create_drawing_plan(latex)


def latex_to_excalidraw(latex: str, config: Optional[HandwriterConfig] = None,
                        style: Optional[ExcalidrawStyle] = None) -> List[Dict[str, Any]]:
    return Handwriter(config).to_excalidraw_elements(latex, style)
