"""
Stroke Generator

Maps positioned symbols (normalized glyph outlines) and decoration strokes to
absolute-space pen strokes:

    absolute = origin + p * (width, height)

followed by an optional rotation about the symbol center and optional
jitter. Output order: every symbol's strokes in symbol order, then the
decorations.

Usage:
    strokes = generate_strokes(layout.symbols, layout.decorations,
                               jitter_amount=0.3, rng=random.Random(7))
"""

import math
import random
from typing import List, Optional, Sequence

from ..data.types import DecorationStroke, Point, PositionedSymbol, Stroke


def _jitter(point: Point, amount: float, rng: random.Random) -> Point:
    """Independent uniform offset in [-amount, amount] per coordinate."""
    if amount == 0:
        return point
    return Point(
        x=point.x + rng.uniform(-amount, amount),
        y=point.y + rng.uniform(-amount, amount),
    )


def transform_symbol(symbol: PositionedSymbol, jitter_amount: float = 0.0,
                     rng: Optional[random.Random] = None) -> List[Stroke]:
    """Absolute strokes for one positioned symbol."""
    rng = rng if rng is not None else random.Random()
    width = symbol.width
    height = symbol.height
    ox, oy = symbol.origin.x, symbol.origin.y

    if symbol.rotation:
        cos_r = math.cos(symbol.rotation)
        sin_r = math.sin(symbol.rotation)
        cx = ox + width / 2
        cy = oy + height / 2

    strokes = []
    for stroke in symbol.metrics.strokes:
        points = []
        for p in stroke.points:
            x = ox + p.x * width
            y = oy + p.y * height
            if symbol.rotation:
                dx = x - cx
                dy = y - cy
                x = cx + dx * cos_r - dy * sin_r
                y = cy + dx * sin_r + dy * cos_r
            points.append(_jitter(Point(x, y), jitter_amount, rng))
        strokes.append(Stroke(points=tuple(points), delay=stroke.delay))
    return strokes


def generate_strokes(
    symbols: Sequence[PositionedSymbol],
    decorations: Sequence[DecorationStroke] = (),
    jitter_amount: float = 0.0,
    rng: Optional[random.Random] = None,
    char_pause: float = 0.0,
) -> List[Stroke]:
    """
    Convert a layout into drawable strokes.

    Args:
        symbols: Positioned glyphs, drawn first in the given order
        decorations: Fraction bars, radicals, accents, drawn after the symbols
        jitter_amount: Max per-coordinate offset in pixels (0 = exact geometry)
        rng: Random source for jitter (a fresh Random() if omitted)
        char_pause: Extra pre-delay (ms) before the first stroke of every
            symbol after the first

    Returns:
        List of Strokes in drawing order
    """
    if jitter_amount < 0:
        raise ValueError(f"jitter_amount must be non-negative, got {jitter_amount}")
    if char_pause < 0:
        raise ValueError(f"char_pause must be non-negative, got {char_pause}")
    rng = rng if rng is not None else random.Random()

    all_strokes: List[Stroke] = []

    for index, symbol in enumerate(symbols):
        strokes = transform_symbol(symbol, jitter_amount, rng)
        if index > 0 and char_pause > 0 and strokes:
            first = strokes[0]
            strokes[0] = Stroke(points=first.points, delay=first.delay + char_pause)
        all_strokes.extend(strokes)

    for decoration in decorations:
        points = tuple(_jitter(p, jitter_amount, rng) for p in decoration.points)
        all_strokes.append(Stroke(points=points))

    return all_strokes
