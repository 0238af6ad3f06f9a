"""
Layout engine: expression tree -> positioned symbols, decorations, box.
"""

from .engine import (
    LayoutContext,
    LayoutEngine,
    LayoutResult,
    layout_expression,
)

__all__ = [
    'LayoutContext',
    'LayoutEngine',
    'LayoutResult',
    'layout_expression',
]
