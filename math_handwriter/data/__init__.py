"""
Data model: geometry types, expression tree and the LaTeX parser.
"""

from .types import (
    Point,
    Stroke,
    SymbolMetrics,
    PositionedSymbol,
    DecorationStroke,
    LayoutBox,
)
from .expression import (
    ExpressionNode,
    TextNode,
    FractionNode,
    ScriptNode,
    SqrtNode,
    LargeOperatorNode,
    DelimiterNode,
    AccentNode,
    GroupNode,
    UnknownNode,
    node_from_dict,
    node_to_dict,
    extract_text,
)
from .latex_parser import (
    LatexParseError,
    LatexParser,
    parse_latex,
    tokenize,
)

__all__ = [
    # Geometry
    'Point',
    'Stroke',
    'SymbolMetrics',
    'PositionedSymbol',
    'DecorationStroke',
    'LayoutBox',
    # Expression tree
    'ExpressionNode',
    'TextNode',
    'FractionNode',
    'ScriptNode',
    'SqrtNode',
    'LargeOperatorNode',
    'DelimiterNode',
    'AccentNode',
    'GroupNode',
    'UnknownNode',
    'node_from_dict',
    'node_to_dict',
    'extract_text',
    # Parser
    'LatexParseError',
    'LatexParser',
    'parse_latex',
    'tokenize',
]
