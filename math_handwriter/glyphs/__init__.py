"""
Glyph database: normalized handwritten outlines and their metrics.
"""

from .metrics import (
    GlyphDatabase,
    MetricsProvider,
    default_glyphs,
    placeholder_metrics,
    DEFAULT_GLYPH_PATH,
)

__all__ = [
    'GlyphDatabase',
    'MetricsProvider',
    'default_glyphs',
    'placeholder_metrics',
    'DEFAULT_GLYPH_PATH',
]
