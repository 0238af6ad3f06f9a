"""
Tests for the glyph database.
"""

import json
import logging

import pytest

from math_handwriter.data.types import Stroke, SymbolMetrics
from math_handwriter.glyphs.metrics import (
    DEFAULT_GLYPH_PATH,
    GlyphDatabase,
    default_glyphs,
    placeholder_metrics,
)


def test_default_glyph_set():
    glyphs = default_glyphs()
    assert len(glyphs) == 88
    for char in ['x', '0', '+', '=', '(', '{', '∫', '∑', '∏', 'α', '√']:
        assert char in glyphs
    assert default_glyphs() is glyphs


def test_every_glyph_is_drawable():
    glyphs = default_glyphs()
    for char in glyphs.chars():
        metrics = glyphs.lookup(char)
        assert metrics.strokes, char
        assert all(stroke.num_points >= 2 for stroke in metrics.strokes), char
        assert metrics.aspect_ratio > 0
        assert 0 <= metrics.baseline <= 1


def test_x_metrics():
    metrics = default_glyphs().lookup('x')
    assert metrics.char == 'x'
    assert metrics.baseline == pytest.approx(0.7)
    assert metrics.aspect_ratio == pytest.approx(0.7)
    assert len(metrics.strokes) == 2


def test_unknown_char_placeholder_warns_once(caplog):
    glyphs = GlyphDatabase()
    with caplog.at_level(logging.WARNING, logger='math_handwriter'):
        first = glyphs.lookup('€')
        second = glyphs.lookup('€')

    assert first == second == placeholder_metrics('€')
    assert len(first.strokes) == 3
    assert first.baseline == pytest.approx(0.85)
    assert first.aspect_ratio == pytest.approx(0.7)
    assert first.advance == pytest.approx(0.75)
    assert len([r for r in caplog.records if '€' in r.getMessage()]) == 1


def test_register_returns_new_database():
    base = GlyphDatabase.from_json(DEFAULT_GLYPH_PATH)
    custom = SymbolMetrics('€', (Stroke.from_list([[0, 0], [1, 1]]),), 0.8, 0.6, 0.7)

    extended = base.register([custom])
    assert '€' in extended
    assert '€' not in base
    assert len(extended) == len(base) + 1
    assert extended.lookup('€') is custom


def test_from_json_with_delays(tmp_path):
    path = tmp_path / "glyphs.json"
    path.write_text(json.dumps({
        "version": 1,
        "glyphs": {
            "T": {"baseline": 0.9, "aspect_ratio": 0.6, "advance": 0.8,
                  "strokes": [[[0, 0], [1, 0]], [[0.5, 0], [0.5, 1]]],
                  "delays": [0, 40]},
        },
    }), encoding='utf-8')

    glyphs = GlyphDatabase.from_json(path)
    metrics = glyphs.lookup('T')
    assert [s.delay for s in metrics.strokes] == [0.0, 40.0]
    assert metrics.strokes[1].points[1].y == 1.0


def test_from_json_rejects_missing_delays(tmp_path):
    path = tmp_path / "glyphs.json"
    path.write_text(json.dumps({
        "glyphs": {
            "T": {"baseline": 0.9, "aspect_ratio": 0.6, "advance": 0.8,
                  "strokes": [[[0, 0], [1, 0]], [[0.5, 0], [0.5, 1]]],
                  "delays": [10]},
        },
    }), encoding='utf-8')

    with pytest.raises(ValueError, match="2 strokes but 1 delays"):
        GlyphDatabase.from_json(path)


def test_from_json_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        GlyphDatabase.from_json(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"glyphs": {"a": {"strokes": [[[0, 0], [1, 1]]]}}}), encoding='utf-8')
    with pytest.raises(ValueError):
        GlyphDatabase.from_json(bad)
