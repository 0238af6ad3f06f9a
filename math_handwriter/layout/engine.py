"""
Layout Engine

Recursively positions every symbol of an expression tree in absolute
coordinates. Each node variant has its own layout rule; all rules return a
LayoutResult:
- symbols:     PositionedSymbols (glyph + origin + height)
- decorations: DecorationStrokes not tied to a glyph (fraction bars,
               radical hooks, accent marks)
- box:         LayoutBox of the subtree (baseline offset from its top)

Boxes compose through explicit arithmetic on the children's boxes; nothing
is re-derived from stroke geometry.

Usage:
    from math_handwriter.layout import LayoutEngine, LayoutContext

    engine = LayoutEngine(default_glyphs())
    context = LayoutContext.at(position=(100, 100), font_size=40, spacing=0.1)
    result = engine.layout(tree, context)
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

from ..data.expression import (
    AccentNode,
    DelimiterNode,
    ExpressionNode,
    FractionNode,
    GroupNode,
    LargeOperatorNode,
    ScriptNode,
    SqrtNode,
    TextNode,
)
from ..data.types import DecorationStroke, LayoutBox, Point, PositionedSymbol
from ..glyphs.metrics import MetricsProvider, default_glyphs

logger = logging.getLogger(__name__)


# =============================================================================
# Layout Constants (multiples of the current font size)
# =============================================================================

INITIAL_BASELINE = 0.7        # baseline below the requested top-left position
TEXT_BASELINE = 0.85          # box baseline of a leaf, Latin glyph proportions
SPACE_ADVANCE = 0.3

FRACTION_SCALE = 0.65
NUMERATOR_RAISE = 0.7
DENOMINATOR_DROP = 0.5
FRACTION_PADDING = 0.15
FRACTION_BAR_RAISE = 0.05
FRACTION_TOP = 0.8
FRACTION_HEIGHT = 1.4
FRACTION_BASELINE = 0.55      # of the fraction box height

SCRIPT_SCALE = 0.6
SUPERSCRIPT_RAISE = 0.6
SUBSCRIPT_DROP = 0.2

RADICAL_WIDTH = 0.5
SQRT_SCALE = 0.9
SQRT_PADDING = 0.15
SQRT_TOP = 0.85
ROOT_INDEX_SCALE = 0.45
ROOT_INDEX_BASELINE = 0.45    # of the radical height

INTEGRAL_HEIGHT = 2.8
OPERATOR_HEIGHT = 2.0
OPERATOR_RAISE = 0.6          # of the operator height above the baseline
LIMIT_SCALE = 0.45
LOWER_LIMIT_SHIFT = -0.1
LOWER_LIMIT_DROP = 1.1
UPPER_LIMIT_SHIFT = 0.6       # of the operator glyph width
UPPER_LIMIT_RAISE = 1.8

DELIMITER_GAP = 0.3
ACCENT_GAP = 0.2

OPERATOR_GLYPHS = {
    'integral': '∫',
    'sum': '∑',
    'product': '∏',
}

DELIMITER_GLYPHS = {
    '\\{': '{',
    '\\}': '}',
    '\\lbrace': '{',
    '\\rbrace': '}',
    '\\lbrack': '[',
    '\\rbrack': ']',
    '\\langle': '<',
    '\\rangle': '>',
    '\\vert': '|',
    '\\lvert': '|',
    '\\rvert': '|',
    '\\|': '|',
    '\\Vert': '|',
    '\\lVert': '|',
    '\\rVert': '|',
    '.': '',
}


# =============================================================================
# Context and Result
# =============================================================================

@dataclass(frozen=True)
class LayoutContext:
    """Pen state handed down the tree."""
    font_size: float
    spacing: float
    current_x: float
    current_y: float
    baseline_y: float

    @classmethod
    def at(cls, position: Tuple[float, float], font_size: float, spacing: float = 0.1) -> 'LayoutContext':
        """Context for an expression whose top-left corner is `position`."""
        x, y = position
        return cls(
            font_size=font_size,
            spacing=spacing,
            current_x=x,
            current_y=y,
            baseline_y=y + font_size * INITIAL_BASELINE,
        )


@dataclass(frozen=True)
class LayoutResult:
    """Output of one layout rule."""
    symbols: Tuple[PositionedSymbol, ...]
    box: LayoutBox
    decorations: Tuple[DecorationStroke, ...] = ()

    @classmethod
    def empty(cls, context: LayoutContext) -> 'LayoutResult':
        """Zero-size layout at the current pen position."""
        return cls(symbols=(), box=LayoutBox(context.current_x, context.current_y, 0.0, 0.0, 0.0))

    def translated(self, dx: float, dy: float = 0.0) -> 'LayoutResult':
        if dx == 0 and dy == 0:
            return self
        return LayoutResult(
            symbols=tuple(s.translated(dx, dy) for s in self.symbols),
            box=self.box.translated(dx, dy),
            decorations=tuple(d.translated(dx, dy) for d in self.decorations),
        )


# =============================================================================
# Layout Engine
# =============================================================================

class LayoutEngine:
    """
    Lays out expression trees using an explicit metrics provider.

    Unknown variants and missing children degrade to an empty layout so the
    rest of the expression still renders.
    """

    def __init__(self, glyphs: Optional[MetricsProvider] = None):
        self.glyphs = glyphs if glyphs is not None else default_glyphs()
        self._rules: Dict[type, Callable[[ExpressionNode, LayoutContext], LayoutResult]] = {
            TextNode: self._layout_text,
            FractionNode: self._layout_fraction,
            ScriptNode: self._layout_script,
            SqrtNode: self._layout_sqrt,
            LargeOperatorNode: self._layout_operator,
            DelimiterNode: self._layout_delimiter,
            GroupNode: self._layout_group,
            AccentNode: self._layout_accent,
        }

    def layout(self, node: Optional[ExpressionNode], context: LayoutContext) -> LayoutResult:
        """Dispatch on the node variant."""
        if node is None:
            logger.warning("Missing child node, laying out as empty")
            return LayoutResult.empty(context)

        rule = self._rules.get(type(node))
        if rule is None:
            node_type = getattr(node, 'node_type', type(node).__name__)
            logger.warning("Unknown node type for layout: %s", node_type)
            return LayoutResult.empty(context)

        return rule(node, context)

    # -------------------------------------------------------------------------
    # Leaves
    # -------------------------------------------------------------------------

    def _layout_text(self, node: TextNode, context: LayoutContext) -> LayoutResult:
        font_size = context.font_size
        symbols: List[PositionedSymbol] = []
        x = context.current_x

        for char in node.value:
            if char == ' ':
                x += font_size * SPACE_ADVANCE
                continue

            metrics = self.glyphs.lookup(char)
            height = font_size
            width = height * metrics.aspect_ratio
            y = context.baseline_y - height * metrics.baseline

            symbols.append(PositionedSymbol(metrics=metrics, origin=Point(x, y), height=height))
            x += width * metrics.advance + font_size * context.spacing

        box = LayoutBox(
            x=context.current_x,
            y=context.baseline_y - font_size,
            width=x - context.current_x,
            height=font_size,
            baseline=font_size * TEXT_BASELINE,
        )
        return LayoutResult(symbols=tuple(symbols), box=box)

    # -------------------------------------------------------------------------
    # Fractions
    # -------------------------------------------------------------------------

    def _layout_fraction(self, node: FractionNode, context: LayoutContext) -> LayoutResult:
        font_size = context.font_size
        child_size = font_size * FRACTION_SCALE

        numerator = self.layout(node.numerator, replace(
            context, font_size=child_size, baseline_y=context.baseline_y - font_size * NUMERATOR_RAISE))
        denominator = self.layout(node.denominator, replace(
            context, font_size=child_size, baseline_y=context.baseline_y + font_size * DENOMINATOR_DROP))

        max_width = max(numerator.box.width, denominator.box.width)
        padding = font_size * FRACTION_PADDING

        # Center both parts over the wider one, inside the padded bar
        numerator = numerator.translated(padding + (max_width - numerator.box.width) / 2)
        denominator = denominator.translated(padding + (max_width - denominator.box.width) / 2)

        line_y = context.baseline_y - font_size * FRACTION_BAR_RAISE
        total_width = max_width + padding * 2
        bar = DecorationStroke(
            points=(Point(context.current_x, line_y), Point(context.current_x + total_width, line_y)),
            kind='fraction_bar',
        )

        total_height = font_size * FRACTION_HEIGHT
        box = LayoutBox(
            x=context.current_x,
            y=context.baseline_y - font_size * FRACTION_TOP,
            width=total_width,
            height=total_height,
            baseline=total_height * FRACTION_BASELINE,
        )
        return LayoutResult(
            symbols=numerator.symbols + denominator.symbols,
            box=box,
            decorations=numerator.decorations + denominator.decorations + (bar,),
        )

    # -------------------------------------------------------------------------
    # Scripts
    # -------------------------------------------------------------------------

    def _layout_script(self, node: ScriptNode, context: LayoutContext) -> LayoutResult:
        font_size = context.font_size
        base = self.layout(node.base, context)

        script_x = context.current_x + base.box.width
        if node.kind == 'subscript':
            script_baseline = context.baseline_y + font_size * SUBSCRIPT_DROP
        else:
            script_baseline = context.baseline_y - font_size * SUPERSCRIPT_RAISE

        script = self.layout(node.script, replace(
            context, font_size=font_size * SCRIPT_SCALE, current_x=script_x, baseline_y=script_baseline))

        top = min(base.box.y, script.box.y)
        bottom = max(base.box.bottom, script.box.bottom)
        box = LayoutBox(
            x=context.current_x,
            y=top,
            width=script_x + script.box.width - context.current_x,
            height=bottom - top,
            baseline=context.baseline_y - top,
        )
        return LayoutResult(
            symbols=base.symbols + script.symbols,
            box=box,
            decorations=base.decorations + script.decorations,
        )

    # -------------------------------------------------------------------------
    # Roots
    # -------------------------------------------------------------------------

    def _layout_sqrt(self, node: SqrtNode, context: LayoutContext) -> LayoutResult:
        font_size = context.font_size
        radical_width = font_size * RADICAL_WIDTH

        content = self.layout(node.content, replace(
            context, current_x=context.current_x + radical_width, font_size=font_size * SQRT_SCALE))

        padding = font_size * SQRT_PADDING
        radical_height = content.box.height + padding * 2
        y1 = context.baseline_y - font_size * SQRT_TOP
        y2 = y1 + radical_height

        # The index sits above the hook; a wide index pushes the radical right
        index = None
        shift = 0.0
        if node.index is not None:
            index = self.layout(node.index, replace(
                context,
                font_size=font_size * ROOT_INDEX_SCALE,
                baseline_y=y1 + radical_height * ROOT_INDEX_BASELINE,
            ))
            shift = max(0.0, index.box.width - radical_width * 0.3)
            content = content.translated(shift)

        x = context.current_x + shift
        radical = DecorationStroke(points=(
            Point(x, y1 + radical_height * 0.5),
            Point(x + radical_width * 0.3, y1 + radical_height * 0.7),
            Point(x + radical_width * 0.5, y2),
            Point(x + radical_width * 0.7, y1),
            Point(x + radical_width + content.box.width + padding, y1),
        ), kind='radical')

        top, bottom = y1, y2
        symbols = content.symbols
        decorations = content.decorations
        if index is not None:
            top = min(top, index.box.y)
            bottom = max(bottom, index.box.bottom)
            symbols = index.symbols + symbols
            decorations = index.decorations + decorations

        box = LayoutBox(
            x=context.current_x,
            y=top,
            width=shift + radical_width + content.box.width + padding,
            height=bottom - top,
            baseline=context.baseline_y - top,
        )
        return LayoutResult(symbols=symbols, box=box, decorations=decorations + (radical,))

    # -------------------------------------------------------------------------
    # Large Operators
    # -------------------------------------------------------------------------

    def _layout_operator(self, node: LargeOperatorNode, context: LayoutContext) -> LayoutResult:
        char = OPERATOR_GLYPHS.get(node.kind)
        if char is None:
            logger.warning("Unknown large operator: %s", node.kind)
            return LayoutResult.empty(context)

        font_size = context.font_size
        height = font_size * (INTEGRAL_HEIGHT if node.kind == 'integral' else OPERATOR_HEIGHT)
        metrics = self.glyphs.lookup(char)
        width = height * metrics.aspect_ratio
        y = context.baseline_y - height * OPERATOR_RAISE

        symbols = [PositionedSymbol(metrics=metrics, origin=Point(context.current_x, y), height=height)]
        decorations: List[DecorationStroke] = []

        total_width = width * metrics.advance
        top = y
        bottom = y + height
        limit_size = font_size * LIMIT_SCALE

        limits = (
            (node.lower, context.current_x + font_size * LOWER_LIMIT_SHIFT,
             context.baseline_y + font_size * LOWER_LIMIT_DROP),
            (node.upper, context.current_x + width * UPPER_LIMIT_SHIFT,
             context.baseline_y - font_size * UPPER_LIMIT_RAISE),
        )
        for limit, limit_x, limit_baseline in limits:
            if limit is None:
                continue
            result = self.layout(limit, replace(
                context, font_size=limit_size, current_x=limit_x, baseline_y=limit_baseline))
            symbols.extend(result.symbols)
            decorations.extend(result.decorations)
            top = min(top, result.box.y)
            bottom = max(bottom, result.box.bottom)
            total_width = max(total_width, result.box.right - context.current_x)

        box = LayoutBox(
            x=context.current_x,
            y=top,
            width=total_width,
            height=bottom - top,
            baseline=context.baseline_y - top,
        )
        return LayoutResult(symbols=tuple(symbols), box=box, decorations=tuple(decorations))

    # -------------------------------------------------------------------------
    # Delimiters
    # -------------------------------------------------------------------------

    def _layout_delimiter(self, node: DelimiterNode, context: LayoutContext) -> LayoutResult:
        font_size = context.font_size
        gap = font_size * DELIMITER_GAP

        content = self.layout(node.content, replace(context, current_x=context.current_x + gap))

        if node.stretchy:
            delimiter_height = max(content.box.height, font_size)
        else:
            delimiter_height = font_size

        top = content.box.y
        right_x = context.current_x + gap + content.box.width
        symbols: List[PositionedSymbol] = []

        left_char = _delimiter_glyph(node.left)
        if left_char:
            symbols.append(PositionedSymbol(
                metrics=self.glyphs.lookup(left_char),
                origin=Point(context.current_x, top),
                height=delimiter_height,
            ))

        symbols.extend(content.symbols)

        right_width = 0.0
        right_char = _delimiter_glyph(node.right)
        if right_char:
            right = PositionedSymbol(
                metrics=self.glyphs.lookup(right_char),
                origin=Point(right_x, top),
                height=delimiter_height,
            )
            right_width = right.width
            symbols.append(right)

        box = LayoutBox(
            x=context.current_x,
            y=top,
            width=right_x + right_width - context.current_x,
            height=max(content.box.height, delimiter_height),
            baseline=content.box.baseline,
        )
        return LayoutResult(symbols=tuple(symbols), box=box, decorations=content.decorations)

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    def _layout_group(self, node: GroupNode, context: LayoutContext) -> LayoutResult:
        symbols: List[PositionedSymbol] = []
        decorations: List[DecorationStroke] = []

        x = context.current_x
        top = context.baseline_y
        bottom = context.baseline_y

        for child in node.children:
            result = self.layout(child, replace(context, current_x=x))
            symbols.extend(result.symbols)
            decorations.extend(result.decorations)

            x += result.box.width
            top = min(top, result.box.y)
            bottom = max(bottom, result.box.bottom)

        box = LayoutBox(
            x=context.current_x,
            y=top,
            width=x - context.current_x,
            height=bottom - top,
            baseline=context.baseline_y - top,
        )
        return LayoutResult(symbols=tuple(symbols), box=box, decorations=tuple(decorations))

    # -------------------------------------------------------------------------
    # Accents
    # -------------------------------------------------------------------------

    def _layout_accent(self, node: AccentNode, context: LayoutContext) -> LayoutResult:
        font_size = context.font_size
        base = self.layout(node.base, context)

        accent_y = base.box.y - font_size * ACCENT_GAP
        center_x = context.current_x + base.box.width / 2

        shape = ACCENT_SHAPES.get(_accent_name(node.accent))
        if shape is None:
            logger.debug("No accent shape for %r", node.accent)
            accent_strokes: Tuple[DecorationStroke, ...] = ()
        else:
            accent_strokes = tuple(
                DecorationStroke(points=points, kind='accent')
                for points in shape(center_x, accent_y, font_size)
            )

        box = LayoutBox(
            x=base.box.x,
            y=accent_y,
            width=base.box.width,
            height=base.box.bottom - accent_y,
            baseline=base.box.baseline + (base.box.y - accent_y),
        )
        return LayoutResult(symbols=base.symbols, box=box, decorations=base.decorations + accent_strokes)


# =============================================================================
# Accent Shapes
# =============================================================================

def _caret(cx: float, y: float, fs: float) -> List[Tuple[Point, ...]]:
    return [(Point(cx - fs * 0.15, y + fs * 0.1), Point(cx, y), Point(cx + fs * 0.15, y + fs * 0.1))]


def _bar(cx: float, y: float, fs: float) -> List[Tuple[Point, ...]]:
    return [(Point(cx - fs * 0.2, y), Point(cx + fs * 0.2, y))]


def _arrow(cx: float, y: float, fs: float) -> List[Tuple[Point, ...]]:
    return [
        (Point(cx - fs * 0.2, y), Point(cx + fs * 0.2, y)),
        (Point(cx + fs * 0.12, y - fs * 0.07), Point(cx + fs * 0.2, y), Point(cx + fs * 0.12, y + fs * 0.07)),
    ]


def _tilde(cx: float, y: float, fs: float) -> List[Tuple[Point, ...]]:
    return [(
        Point(cx - fs * 0.18, y + fs * 0.05),
        Point(cx - fs * 0.08, y - fs * 0.03),
        Point(cx + fs * 0.08, y + fs * 0.05),
        Point(cx + fs * 0.18, y - fs * 0.03),
    )]


def _dot(cx: float, y: float, fs: float) -> List[Tuple[Point, ...]]:
    return [(Point(cx, y), Point(cx, y + fs * 0.04))]


ACCENT_SHAPES: Dict[str, Callable[[float, float, float], List[Tuple[Point, ...]]]] = {
    'hat': _caret,
    'widehat': _caret,
    'ˆ': _caret,
    '^': _caret,
    'bar': _bar,
    'overline': _bar,
    '¯': _bar,
    'vec': _arrow,
    'overrightarrow': _arrow,
    '→': _arrow,
    'tilde': _tilde,
    'widetilde': _tilde,
    '˜': _tilde,
    '~': _tilde,
    'dot': _dot,
    '˙': _dot,
}


def _accent_name(accent: str) -> str:
    return accent[1:] if accent.startswith('\\') else accent


def _delimiter_glyph(delimiter: str) -> str:
    """Glyph character for a delimiter; '' means draw nothing."""
    if not delimiter:
        return ''
    return DELIMITER_GLYPHS.get(delimiter, delimiter)


def layout_expression(
    node: ExpressionNode,
    context: LayoutContext,
    glyphs: Optional[MetricsProvider] = None,
) -> LayoutResult:
    """Convenience wrapper around LayoutEngine.layout."""
    return LayoutEngine(glyphs).layout(node, context)
