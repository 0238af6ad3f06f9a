"""
Expression Tree

Tagged-variant tree consumed by the layout engine. Each variant is a frozen
dataclass; `node_type` returns the tag used by the external parser's dict
format:

    text | symbol | operator          -> TextNode
    fraction                          -> FractionNode
    superscript | subscript           -> ScriptNode
    sqrt                              -> SqrtNode
    integral | sum | product          -> LargeOperatorNode
    parenthesis | bracket | brace     -> DelimiterNode
    accent                            -> AccentNode
    group                             -> GroupNode
    (anything else)                   -> UnknownNode

Usage:
    tree = node_from_dict({
        "type": "fraction",
        "numerator": {"type": "text", "value": "1"},
        "denominator": {"type": "text", "value": "2"},
    })
    node_to_dict(tree)  # round-trips to the same shape
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


LEAF_KINDS = ('text', 'symbol', 'operator')
SCRIPT_KINDS = ('superscript', 'subscript')
OPERATOR_KINDS = ('integral', 'sum', 'product')
DELIMITER_KINDS = ('parenthesis', 'bracket', 'brace')


class ExpressionNode:
    """Base class of all tree variants."""

    @property
    def node_type(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class TextNode(ExpressionNode):
    value: str
    kind: str = 'text'
    style: Optional[str] = None  # e.g. 'normal', 'italic'

    @property
    def node_type(self) -> str:
        return self.kind


@dataclass(frozen=True)
class FractionNode(ExpressionNode):
    numerator: Optional[ExpressionNode]
    denominator: Optional[ExpressionNode]

    @property
    def node_type(self) -> str:
        return 'fraction'


@dataclass(frozen=True)
class ScriptNode(ExpressionNode):
    base: Optional[ExpressionNode]
    script: Optional[ExpressionNode]
    kind: str = 'superscript'

    @property
    def node_type(self) -> str:
        return self.kind

    @property
    def is_superscript(self) -> bool:
        return self.kind == 'superscript'


@dataclass(frozen=True)
class SqrtNode(ExpressionNode):
    content: Optional[ExpressionNode]
    index: Optional[ExpressionNode] = None

    @property
    def node_type(self) -> str:
        return 'sqrt'


@dataclass(frozen=True)
class LargeOperatorNode(ExpressionNode):
    kind: str = 'integral'
    lower: Optional[ExpressionNode] = None
    upper: Optional[ExpressionNode] = None

    @property
    def node_type(self) -> str:
        return self.kind


@dataclass(frozen=True)
class DelimiterNode(ExpressionNode):
    content: Optional[ExpressionNode]
    left: str = '('
    right: str = ')'
    stretchy: bool = True
    kind: str = 'parenthesis'

    @property
    def node_type(self) -> str:
        return self.kind


@dataclass(frozen=True)
class AccentNode(ExpressionNode):
    base: Optional[ExpressionNode]
    accent: str

    @property
    def node_type(self) -> str:
        return 'accent'


@dataclass(frozen=True)
class GroupNode(ExpressionNode):
    children: Tuple[ExpressionNode, ...] = ()

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, 'children', tuple(self.children))

    @property
    def node_type(self) -> str:
        return 'group'


@dataclass(frozen=True)
class UnknownNode(ExpressionNode):
    """A variant outside the known vocabulary, kept with its raw payload."""
    type: str
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def node_type(self) -> str:
        return self.type


# =============================================================================
# Dict Conversion
# =============================================================================

def _child(data: Dict[str, Any], key: str) -> Optional[ExpressionNode]:
    value = data.get(key)
    if value is None:
        return None
    return node_from_dict(value)


def node_from_dict(data: Dict[str, Any]) -> ExpressionNode:
    """
    Build a tree from the parser's dict format.

    Unknown tags become UnknownNode; missing required children become None
    and are rendered as empty layouts.
    """
    node_type = data.get('type', '')

    if node_type in LEAF_KINDS:
        return TextNode(value=str(data.get('value', '')), kind=node_type, style=data.get('style'))

    if node_type == 'fraction':
        return FractionNode(numerator=_child(data, 'numerator'), denominator=_child(data, 'denominator'))

    if node_type in SCRIPT_KINDS:
        return ScriptNode(base=_child(data, 'base'), script=_child(data, 'script'), kind=node_type)

    if node_type == 'sqrt':
        return SqrtNode(content=_child(data, 'content'), index=_child(data, 'index'))

    if node_type in OPERATOR_KINDS:
        return LargeOperatorNode(kind=node_type, lower=_child(data, 'lower'), upper=_child(data, 'upper'))

    if node_type in DELIMITER_KINDS:
        return DelimiterNode(
            content=_child(data, 'content'),
            left=data.get('left', ''),
            right=data.get('right', ''),
            stretchy=bool(data.get('stretchy', True)),
            kind=node_type,
        )

    if node_type == 'accent':
        return AccentNode(base=_child(data, 'base'), accent=data.get('accent', ''))

    if node_type == 'group':
        return GroupNode(children=tuple(node_from_dict(c) for c in data.get('children', [])))

    payload = {k: v for k, v in data.items() if k != 'type'}
    return UnknownNode(type=node_type, payload=payload)


def node_to_dict(node: Optional[ExpressionNode]) -> Optional[Dict[str, Any]]:
    """Dump a tree back to the parser's dict format."""
    if node is None:
        return None

    if isinstance(node, TextNode):
        result = {'type': node.kind, 'value': node.value}
        if node.style is not None:
            result['style'] = node.style
        return result

    if isinstance(node, FractionNode):
        return {'type': 'fraction',
                'numerator': node_to_dict(node.numerator),
                'denominator': node_to_dict(node.denominator)}

    if isinstance(node, ScriptNode):
        return {'type': node.kind, 'base': node_to_dict(node.base), 'script': node_to_dict(node.script)}

    if isinstance(node, SqrtNode):
        result = {'type': 'sqrt', 'content': node_to_dict(node.content)}
        if node.index is not None:
            result['index'] = node_to_dict(node.index)
        return result

    if isinstance(node, LargeOperatorNode):
        result = {'type': node.kind}
        if node.lower is not None:
            result['lower'] = node_to_dict(node.lower)
        if node.upper is not None:
            result['upper'] = node_to_dict(node.upper)
        return result

    if isinstance(node, DelimiterNode):
        return {'type': node.kind, 'content': node_to_dict(node.content),
                'left': node.left, 'right': node.right, 'stretchy': node.stretchy}

    if isinstance(node, AccentNode):
        return {'type': 'accent', 'base': node_to_dict(node.base), 'accent': node.accent}

    if isinstance(node, GroupNode):
        return {'type': 'group', 'children': [node_to_dict(c) for c in node.children]}

    if isinstance(node, UnknownNode):
        return dict(node.payload, type=node.type)

    raise TypeError(f"Not an expression node: {node!r}")


def extract_text(node: Optional[ExpressionNode]) -> str:
    """Concatenate leaf values (debugging helper)."""
    if node is None:
        return ""
    if isinstance(node, TextNode):
        return node.value
    if isinstance(node, GroupNode):
        return "".join(extract_text(c) for c in node.children)
    if isinstance(node, FractionNode):
        return extract_text(node.numerator) + "/" + extract_text(node.denominator)
    if isinstance(node, ScriptNode):
        marker = "^" if node.is_superscript else "_"
        return extract_text(node.base) + marker + extract_text(node.script)
    if isinstance(node, (SqrtNode, DelimiterNode)):
        return extract_text(node.content)
    if isinstance(node, AccentNode):
        return extract_text(node.base)
    return ""
