"""
Shared helpers for the math_handwriter tests.
"""

import logging

import matplotlib
matplotlib.use('Agg')

import pytest

from math_handwriter.animation.animator import create_drawing_plan
from math_handwriter.configs.settings import AnimationConfig
from math_handwriter.data.types import LayoutBox, Stroke, SymbolMetrics
from math_handwriter.layout.engine import LayoutContext


class MockGlyphs:
    """Every character is the same box glyph: one diagonal stroke."""

    BASELINE = 0.8
    ASPECT_RATIO = 0.5
    ADVANCE = 1.0

    def __init__(self):
        self.requested = []
        self._metrics = {}

    def lookup(self, char: str) -> SymbolMetrics:
        self.requested.append(char)
        if char not in self._metrics:
            self._metrics[char] = SymbolMetrics(
                char=char,
                strokes=(Stroke.from_list([[0.0, 0.0], [1.0, 1.0]]),),
                baseline=self.BASELINE,
                aspect_ratio=self.ASPECT_RATIO,
                advance=self.ADVANCE,
            )
        return self._metrics[char]


@pytest.fixture
def mock_glyphs():
    return MockGlyphs()


@pytest.fixture
def context():
    """Font size 40 at the origin with no extra spacing (baseline at y = 28)."""
    return LayoutContext.at(position=(0.0, 0.0), font_size=40.0, spacing=0.0)


def line_stroke(length: float, y: float = 0.0, delay: float = 0.0) -> Stroke:
    return Stroke.from_list([[0.0, y], [length, y]], delay=delay)


def make_plan(strokes, speed: float = 1000.0, pause: float = 50.0):
    return create_drawing_plan(
        strokes,
        LayoutBox(0.0, 0.0, 100.0, 100.0, 70.0),
        AnimationConfig(speed=speed, pause_between_strokes=pause),
    )


@pytest.fixture(autouse=True)
def restore_package_logger():
    """setup_logging() disables propagation; undo it so caplog keeps working."""
    logger = logging.getLogger('math_handwriter')
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
