"""
Stroke generation and curve utilities.
"""

from .curves import resample_stroke, smooth_stroke, stroke_length
from .generator import generate_strokes, transform_symbol

__all__ = [
    'generate_strokes',
    'transform_symbol',
    'stroke_length',
    'smooth_stroke',
    'resample_stroke',
]
