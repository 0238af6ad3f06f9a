"""
Tests for converting positioned symbols and decorations into strokes.
"""

import math
import random

import pytest

from math_handwriter.data.types import DecorationStroke, Point, PositionedSymbol
from math_handwriter.strokes.generator import generate_strokes, transform_symbol


def _symbol(glyphs, char='a', x=10.0, y=20.0, height=40.0, rotation=None):
    return PositionedSymbol(metrics=glyphs.lookup(char), origin=Point(x, y), height=height, rotation=rotation)


def test_transform_scales_into_symbol_box(mock_glyphs):
    strokes = transform_symbol(_symbol(mock_glyphs))
    assert len(strokes) == 1
    # Mock glyph is a diagonal across a 20 x 40 box
    assert strokes[0].points == (Point(10.0, 20.0), Point(30.0, 60.0))


def test_rotation_about_center(mock_glyphs):
    strokes = transform_symbol(_symbol(mock_glyphs, rotation=math.pi))
    start, end = strokes[0].points
    assert start.x == pytest.approx(30.0)
    assert start.y == pytest.approx(60.0)
    assert end.x == pytest.approx(10.0)
    assert end.y == pytest.approx(20.0)


def test_symbols_first_then_decorations(mock_glyphs):
    symbols = [_symbol(mock_glyphs, 'a'), _symbol(mock_glyphs, 'b', x=40)]
    bar = DecorationStroke(points=(Point(0, 5), Point(50, 5)), kind='fraction_bar')

    strokes = generate_strokes(symbols, [bar])
    assert len(strokes) == 3
    assert strokes[1].points[0] == Point(40.0, 20.0)
    assert strokes[2].points == bar.points


def test_zero_jitter_is_deterministic(mock_glyphs):
    symbols = [_symbol(mock_glyphs, c, x=10.0 * i) for i, c in enumerate("abc")]
    bar = DecorationStroke(points=(Point(0, 5), Point(50, 5)))

    first = generate_strokes(symbols, [bar], jitter_amount=0.0)
    second = generate_strokes(symbols, [bar], jitter_amount=0.0)
    assert first == second


def test_jitter_bounded_and_seeded(mock_glyphs):
    symbols = [_symbol(mock_glyphs)]
    exact = generate_strokes(symbols)

    jittered = generate_strokes(symbols, jitter_amount=0.5, rng=random.Random(3))
    again = generate_strokes(symbols, jitter_amount=0.5, rng=random.Random(3))
    assert jittered == again
    assert jittered != exact

    for p, q in zip(exact[0].points, jittered[0].points):
        assert abs(p.x - q.x) <= 0.5
        assert abs(p.y - q.y) <= 0.5


def test_negative_jitter_rejected(mock_glyphs):
    with pytest.raises(ValueError):
        generate_strokes([_symbol(mock_glyphs)], jitter_amount=-0.1)


def test_char_pause_delays_following_symbols(mock_glyphs):
    symbols = [_symbol(mock_glyphs, c, x=10.0 * i) for i, c in enumerate("abc")]
    strokes = generate_strokes(symbols, char_pause=80.0)
    assert [s.delay for s in strokes] == [0.0, 80.0, 80.0]


def test_empty_input():
    assert generate_strokes([], []) == []
