"""
Tests for the layout engine.

Most tests use MockGlyphs (baseline 0.8, aspect 0.5, advance 1.0) and a
font size of 40 at the origin, so the baseline sits at y = 28.
"""

import logging
from dataclasses import replace

import pytest

from math_handwriter.data.expression import (
    AccentNode,
    DelimiterNode,
    FractionNode,
    GroupNode,
    LargeOperatorNode,
    ScriptNode,
    SqrtNode,
    TextNode,
    UnknownNode,
)
from math_handwriter.glyphs import default_glyphs
from math_handwriter.layout.engine import LayoutContext, LayoutEngine, layout_expression
from math_handwriter.strokes.generator import generate_strokes


def test_single_x_leaf_scenario(context):
    glyphs = default_glyphs()
    metrics = glyphs.lookup('x')
    result = layout_expression(TextNode('x'), context, glyphs)

    assert len(result.symbols) == 1
    symbol = result.symbols[0]
    assert symbol.origin.x == pytest.approx(0.0)
    assert symbol.origin.y == pytest.approx(context.baseline_y - 40 * metrics.baseline)
    assert symbol.width == pytest.approx(40 * metrics.aspect_ratio)


def test_leaf_box_and_spaces(mock_glyphs, context):
    result = LayoutEngine(mock_glyphs).layout(TextNode('a b'), context)

    assert [s.metrics.char for s in result.symbols] == ['a', 'b']
    # 20 (a) + 12 (space) + 20 (b)
    assert result.symbols[1].origin.x == pytest.approx(32.0)
    assert result.box.width == pytest.approx(52.0)
    assert result.box.y == pytest.approx(28.0 - 40.0)
    assert result.box.height == pytest.approx(40.0)
    assert result.box.baseline == pytest.approx(34.0)


def test_leaf_spacing_factor(mock_glyphs, context):
    spaced = replace(context, spacing=0.1)
    result = LayoutEngine(mock_glyphs).layout(TextNode('ab'), spaced)
    assert result.symbols[1].origin.x == pytest.approx(24.0)


def test_metrics_shared_by_reference(mock_glyphs, context):
    result = LayoutEngine(mock_glyphs).layout(TextNode('aa'), context)
    assert result.symbols[0].metrics is result.symbols[1].metrics


def test_fraction_bar_symmetric(mock_glyphs, context):
    tree = FractionNode(TextNode('a'), TextNode('b'))
    result = LayoutEngine(mock_glyphs).layout(tree, context)

    assert len(result.decorations) == 1
    bar = result.decorations[0]
    assert bar.kind == 'fraction_bar'
    start, end = bar.points
    center = result.box.center_x
    assert (start.x + end.x) / 2 == pytest.approx(center)
    assert start.y == pytest.approx(28.0 - 2.0)

    # Children at 0.65 * 40 = 26px, centered under the bar
    for symbol in result.symbols:
        assert symbol.height == pytest.approx(26.0)
        assert symbol.center.x == pytest.approx(center)

    strokes = generate_strokes(result.symbols, result.decorations)
    assert len(strokes) == 3


def test_fraction_box(mock_glyphs, context):
    tree = FractionNode(TextNode('abc'), TextNode('d'))
    result = LayoutEngine(mock_glyphs).layout(tree, context)

    padding = 6.0
    numerator_width = 3 * 13.0
    assert result.box.width == pytest.approx(numerator_width + 2 * padding)
    assert result.box.y == pytest.approx(28.0 - 32.0)
    assert result.box.height == pytest.approx(56.0)
    assert result.box.baseline == pytest.approx(56.0 * 0.55)

    denominator = result.symbols[-1]
    assert denominator.center.x == pytest.approx(result.box.center_x)


def test_superscript_and_subscript(mock_glyphs, context):
    engine = LayoutEngine(mock_glyphs)
    sup = engine.layout(ScriptNode(TextNode('x'), TextNode('2'), 'superscript'), context)
    sub = engine.layout(ScriptNode(TextNode('x'), TextNode('i'), 'subscript'), context)

    base, script = sup.symbols
    assert script.height == pytest.approx(24.0)
    assert script.origin.x == pytest.approx(20.0)
    # Script baseline at 28 - 24 = 4
    assert script.origin.y == pytest.approx(4.0 - 24.0 * 0.8)
    assert sup.box.y == pytest.approx(min(base.origin.y, 4.0 - 24.0))
    assert sup.box.baseline_y == pytest.approx(28.0)

    assert sub.symbols[1].origin.y == pytest.approx(36.0 - 24.0 * 0.8)
    assert sub.box.width == pytest.approx(20.0 + 12.0)


def test_sqrt_radical(mock_glyphs, context):
    result = LayoutEngine(mock_glyphs).layout(SqrtNode(TextNode('a')), context)

    assert len(result.decorations) == 1
    radical = result.decorations[0]
    assert radical.kind == 'radical'
    assert len(radical.points) == 5

    content = result.symbols[0]
    assert content.height == pytest.approx(36.0)
    assert content.origin.x == pytest.approx(20.0)

    content_width = 18.0
    padding = 6.0
    y1 = 28.0 - 34.0
    assert radical.points[0].x == pytest.approx(0.0)
    assert radical.points[3].y == pytest.approx(y1)
    assert radical.points[-1].x == pytest.approx(20.0 + content_width + padding)
    assert result.box.width == pytest.approx(20.0 + content_width + padding)
    assert result.box.y == pytest.approx(y1)
    assert result.box.height == pytest.approx(36.0 + 2 * padding)


def test_sqrt_index_shifts_radical(mock_glyphs, context):
    result = LayoutEngine(mock_glyphs).layout(SqrtNode(TextNode('x'), index=TextNode('33')), context)

    index_symbols = result.symbols[:2]
    assert all(s.height == pytest.approx(18.0) for s in index_symbols)
    assert index_symbols[0].origin.x == pytest.approx(0.0)

    # Index is 18px wide, hook allowance is 0.3 * 20 = 6px
    shift = 18.0 - 6.0
    radical = result.decorations[-1]
    assert radical.points[0].x == pytest.approx(shift)
    assert result.symbols[2].origin.x == pytest.approx(20.0 + shift)


def test_integral_with_limits(mock_glyphs, context):
    tree = LargeOperatorNode('integral', lower=TextNode('0'), upper=TextNode('1'))
    result = LayoutEngine(mock_glyphs).layout(tree, context)

    operator, lower, upper = result.symbols
    assert operator.metrics.char == '∫'
    assert operator.height == pytest.approx(112.0)
    assert operator.origin.y == pytest.approx(28.0 - 112.0 * 0.6)

    assert lower.height == pytest.approx(18.0)
    assert lower.origin.x == pytest.approx(-4.0)
    assert lower.origin.y == pytest.approx(28.0 + 44.0 - 18.0 * 0.8)
    assert upper.origin.x == pytest.approx(56.0 * 0.6)
    assert upper.origin.y == pytest.approx(28.0 - 72.0 - 18.0 * 0.8)

    assert result.box.y <= upper.origin.y
    assert result.box.bottom >= operator.origin.y + operator.height


def test_sum_and_product_height(mock_glyphs, context):
    engine = LayoutEngine(mock_glyphs)
    for kind, char in (('sum', '∑'), ('product', '∏')):
        symbol = engine.layout(LargeOperatorNode(kind), context).symbols[0]
        assert symbol.metrics.char == char
        assert symbol.height == pytest.approx(80.0)


def test_delimiters(mock_glyphs, context):
    engine = LayoutEngine(mock_glyphs)
    result = engine.layout(DelimiterNode(TextNode('a'), left='\\{', right='\\}', kind='brace'), context)

    left, content, right = result.symbols
    assert left.metrics.char == '{'
    assert right.metrics.char == '}'
    assert content.origin.x == pytest.approx(12.0)
    assert right.origin.x == pytest.approx(12.0 + 20.0)
    assert left.height == pytest.approx(40.0)
    assert result.box.width == pytest.approx(12.0 + 20.0 + 20.0)


def test_stretchy_delimiter_grows_with_content(mock_glyphs, context):
    engine = LayoutEngine(mock_glyphs)
    fraction = FractionNode(TextNode('a'), TextNode('b'))

    stretchy = engine.layout(DelimiterNode(fraction, left='(', right=')', stretchy=True), context)
    fixed = engine.layout(DelimiterNode(fraction, left='(', right=')', stretchy=False), context)

    assert stretchy.symbols[0].height == pytest.approx(56.0)
    assert stretchy.symbols[-1].height == pytest.approx(56.0)
    assert fixed.symbols[0].height == pytest.approx(40.0)
    assert fixed.symbols[-1].height == pytest.approx(40.0)
    assert fixed.box.height == pytest.approx(56.0)


def test_norm_delimiters_use_bar_glyph(mock_glyphs, context):
    engine = LayoutEngine(mock_glyphs)
    for left, right in (('\\|', '\\|'), ('\\lVert', '\\rVert'), ('\\Vert', '\\Vert')):
        result = engine.layout(DelimiterNode(TextNode('a'), left=left, right=right), context)
        assert [s.metrics.char for s in result.symbols] == ['|', 'a', '|']


def test_empty_delimiter_draws_nothing(mock_glyphs, context):
    tree = DelimiterNode(TextNode('a'), left='(', right='.')
    result = LayoutEngine(mock_glyphs).layout(tree, context)
    assert [s.metrics.char for s in result.symbols] == ['(', 'a']


def test_group_children_follow_each_other(mock_glyphs, context):
    tree = GroupNode((TextNode('a'), FractionNode(TextNode('b'), TextNode('c')), TextNode('d')))
    result = LayoutEngine(mock_glyphs).layout(tree, context)

    fraction_width = 13.0 + 12.0
    last = result.symbols[-1]
    assert last.origin.x == pytest.approx(20.0 + fraction_width)
    assert result.box.width == pytest.approx(20.0 + fraction_width + 20.0)
    assert result.box.baseline_y == pytest.approx(28.0)


def test_hat_accent(mock_glyphs, context):
    result = LayoutEngine(mock_glyphs).layout(AccentNode(TextNode('a'), '\\hat'), context)

    assert len(result.decorations) == 1
    caret = result.decorations[0]
    assert caret.kind == 'accent'
    left, apex, right = caret.points
    assert apex.x == pytest.approx(10.0)
    assert apex.y == pytest.approx(28.0 - 40.0 - 8.0)
    assert right.x - left.x == pytest.approx(12.0)
    assert result.box.y == pytest.approx(apex.y)


def test_bar_accent_and_unknown_accent(mock_glyphs, context):
    engine = LayoutEngine(mock_glyphs)
    bar = engine.layout(AccentNode(TextNode('a'), '¯'), context).decorations[0]
    assert bar.points[1].x - bar.points[0].x == pytest.approx(16.0)

    plain = engine.layout(AccentNode(TextNode('a'), '\\breve'), context)
    assert plain.decorations == ()
    assert len(plain.symbols) == 1


def test_unknown_node_degrades(mock_glyphs, context, caplog):
    engine = LayoutEngine(mock_glyphs)
    with caplog.at_level(logging.WARNING, logger='math_handwriter'):
        result = engine.layout(UnknownNode('matrix', {'rows': []}), context)

    assert result.symbols == ()
    assert result.box.width == 0
    assert result.box.x == context.current_x
    assert result.box.y == context.current_y
    assert 'matrix' in caplog.text


def test_missing_child_keeps_rest(mock_glyphs, context):
    tree = GroupNode((FractionNode(None, TextNode('b')), TextNode('c')))
    result = LayoutEngine(mock_glyphs).layout(tree, context)
    assert [s.metrics.char for s in result.symbols] == ['b', 'c']
    assert len(result.decorations) == 1


def test_initial_context():
    context = LayoutContext.at(position=(100, 100), font_size=40)
    assert context.baseline_y == pytest.approx(128.0)
    assert context.spacing == pytest.approx(0.1)
