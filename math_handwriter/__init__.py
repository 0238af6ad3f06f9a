"""
math_handwriter: LaTeX math -> timed handwritten pen strokes.

Pipeline:
    LaTeX --parse_latex--> expression tree --LayoutEngine--> positioned symbols
    --generate_strokes / smooth / resample--> strokes --create_drawing_plan-->
    DrawingPlan --state_at_time / frames--> snapshots for a renderer
"""

from .data import (
    Point,
    Stroke,
    SymbolMetrics,
    PositionedSymbol,
    DecorationStroke,
    LayoutBox,
    ExpressionNode,
    node_from_dict,
    node_to_dict,
    LatexParseError,
    parse_latex,
)
from .glyphs import GlyphDatabase, default_glyphs
from .configs import AnimationConfig, HandwriterConfig, replace_config, setup_logging
from .layout import LayoutContext, LayoutEngine, LayoutResult, layout_expression
from .strokes import generate_strokes, resample_stroke, smooth_stroke, stroke_length
from .animation import (
    DrawingInstruction,
    DrawingPlan,
    create_drawing_plan,
    frame_count,
    frames,
    interpolate_stroke,
    state_at_time,
)
from .handwriter import Handwriter, create_handwritten_equation, latex_to_excalidraw

__version__ = '0.1.0'

__all__ = [
    # Data
    'Point',
    'Stroke',
    'SymbolMetrics',
    'PositionedSymbol',
    'DecorationStroke',
    'LayoutBox',
    'ExpressionNode',
    'node_from_dict',
    'node_to_dict',
    'LatexParseError',
    'parse_latex',
    # Glyphs
    'GlyphDatabase',
    'default_glyphs',
    # Config
    'AnimationConfig',
    'HandwriterConfig',
    'replace_config',
    'setup_logging',
    # Layout
    'LayoutContext',
    'LayoutEngine',
    'LayoutResult',
    'layout_expression',
    # Strokes
    'generate_strokes',
    'resample_stroke',
    'smooth_stroke',
    'stroke_length',
    # Animation
    'DrawingInstruction',
    'DrawingPlan',
    'create_drawing_plan',
    'frame_count',
    'frames',
    'interpolate_stroke',
    'state_at_time',
    # Facade
    'Handwriter',
    'create_handwritten_equation',
    'latex_to_excalidraw',
]
