"""
LaTeX Math Parser

Small recursive-descent parser for the subset of LaTeX math notation the
layout engine understands. Produces the expression tree vocabulary of
`math_handwriter.data.expression`.

Supported:
- Characters, digits, operators (`-` becomes the minus sign U+2212)
- Greek letters and named symbols (\\alpha, \\infty, \\leq, ...)
- Function names (\\sin, \\log, ...) and \\text / \\mathrm / \\operatorname
- \\frac, \\dfrac, \\tfrac
- Superscripts and subscripts (both together nest subscript(superscript))
- \\sqrt{...} and \\sqrt[n]{...}
- \\int, \\sum, \\prod with limits
- \\left ... \\right delimiters
- Accents (\\hat, \\bar, \\overline, \\vec, \\tilde, \\dot)
- Spacing commands (\\, \\; \\quad ...)

Usage:
    from math_handwriter.data.latex_parser import parse_latex

    tree = parse_latex(r"\\frac{a}{b} + \\sqrt{x^2}")
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .expression import (
    AccentNode,
    DelimiterNode,
    ExpressionNode,
    FractionNode,
    GroupNode,
    LargeOperatorNode,
    ScriptNode,
    SqrtNode,
    TextNode,
)


# =============================================================================
# Vocabulary
# =============================================================================

GREEK_LETTERS = {
    'alpha': 'α', 'beta': 'β', 'gamma': 'γ', 'delta': 'δ', 'epsilon': 'ε',
    'varepsilon': 'ε', 'zeta': 'ζ', 'eta': 'η', 'theta': 'θ', 'vartheta': 'θ',
    'iota': 'ι', 'kappa': 'κ', 'lambda': 'λ', 'mu': 'μ', 'nu': 'ν', 'xi': 'ξ',
    'pi': 'π', 'rho': 'ρ', 'sigma': 'σ', 'tau': 'τ', 'upsilon': 'υ',
    'phi': 'φ', 'varphi': 'φ', 'chi': 'χ', 'psi': 'ψ', 'omega': 'ω',
    'Gamma': 'Γ', 'Delta': 'Δ', 'Theta': 'Θ', 'Lambda': 'Λ', 'Xi': 'Ξ',
    'Pi': 'Π', 'Sigma': 'Σ', 'Upsilon': 'Υ', 'Phi': 'Φ', 'Psi': 'Ψ',
    'Omega': 'Ω',
}

LATEX_TO_UNICODE = {
    # Binary operators
    'pm': '±', 'mp': '∓', 'times': '×', 'div': '÷', 'cdot': '·',
    'ast': '∗', 'star': '⋆', 'circ': '∘', 'bullet': '•',
    'cap': '∩', 'cup': '∪', 'wedge': '∧', 'vee': '∨',
    # Relations
    'le': '≤', 'leq': '≤', 'ge': '≥', 'geq': '≥', 'ne': '≠', 'neq': '≠',
    'equiv': '≡', 'approx': '≈', 'sim': '∼', 'cong': '≅', 'propto': '∝',
    'in': '∈', 'notin': '∉', 'subset': '⊂', 'supset': '⊃',
    'subseteq': '⊆', 'supseteq': '⊇', 'perp': '⊥', 'parallel': '∥',
    # Arrows
    'to': '→', 'rightarrow': '→', 'leftarrow': '←', 'leftrightarrow': '↔',
    'Rightarrow': '⇒', 'Leftarrow': '⇐', 'Leftrightarrow': '⇔',
    # Other symbols
    'infty': '∞', 'partial': '∂', 'nabla': '∇', 'emptyset': '∅',
    'varnothing': '∅', 'neg': '¬', 'lnot': '¬', 'forall': '∀',
    'exists': '∃', 'nexists': '∄', 'dots': '…', 'ldots': '…',
    'cdots': '⋯', 'vdots': '⋮', 'ddots': '⋱', 'ell': 'ℓ', 'hbar': 'ℏ',
    'Re': 'ℜ', 'Im': 'ℑ', 'wp': '℘', 'deg': '°', 'angle': '∠',
}

OPERATOR_SYMBOLS = set('+=<>±∓×÷·∗⋆∘•∩∪∧∨≤≥≠≡≈∼≅∝∈∉⊂⊃⊆⊇⊥∥→←↔⇒⇐⇔−')

FUNCTION_NAMES = {
    'sin', 'cos', 'tan', 'cot', 'sec', 'csc', 'sinh', 'cosh', 'tanh',
    'arcsin', 'arccos', 'arctan', 'log', 'ln', 'exp', 'lim', 'max', 'min',
    'sup', 'inf', 'det', 'gcd', 'dim', 'ker', 'arg',
}

LARGE_OPERATORS = {'int': 'integral', 'sum': 'sum', 'prod': 'product'}

FRACTION_COMMANDS = {'frac', 'dfrac', 'tfrac'}

ACCENT_COMMANDS = {'hat', 'widehat', 'bar', 'overline', 'vec', 'overrightarrow',
                   'tilde', 'widetilde', 'dot'}

TEXT_COMMANDS = {'text', 'textrm', 'mathrm', 'operatorname'}

STYLE_COMMANDS = {'mathbf', 'mathit', 'boldsymbol', 'mathsf', 'mathcal'}

IGNORED_COMMANDS = {'displaystyle', 'textstyle', 'limits', 'nolimits'}

SPACING_COMMANDS = {',': ' ', ':': ' ', ';': ' ', ' ': ' ', '!': '',
                    'quad': '  ', 'qquad': '    '}

ESCAPED_CHARS = {'{': '{', '}': '}', '|': '|', '%': '%', '$': '$', '#': '#', '_': '_', '&': '&'}

DELIMITER_KINDS = {'(': 'parenthesis', ')': 'parenthesis',
                   '[': 'bracket', ']': 'bracket',
                   '\\{': 'brace', '\\}': 'brace', '{': 'brace', '}': 'brace'}

TOKEN_PATTERN = re.compile(r'\\[a-zA-Z]+|\\.|\s+|.', re.DOTALL)


class LatexParseError(ValueError):
    """Malformed LaTeX input. `position` is the character offset of the problem."""

    def __init__(self, message: str, position: int):
        super().__init__(f"{message} at position {position}")
        self.position = position


@dataclass(frozen=True)
class Token:
    text: str
    position: int

    @property
    def is_command(self) -> bool:
        return len(self.text) > 1 and self.text.startswith('\\')

    @property
    def command(self) -> str:
        return self.text[1:]


def tokenize(latex: str) -> List[Token]:
    """Split LaTeX source into command, whitespace and single-char tokens."""
    return [Token(m.group(0), m.start()) for m in TOKEN_PATTERN.finditer(latex)]


# =============================================================================
# Parser
# =============================================================================

class LatexParser:
    """Recursive-descent parser over a token list."""

    def __init__(self, latex: str):
        self.latex = latex
        self.tokens = tokenize(latex)
        self.index = 0

    # -------------------------------------------------------------------------
    # Token stream
    # -------------------------------------------------------------------------

    def _peek(self, skip_space: bool = True) -> Optional[Token]:
        if skip_space:
            self._skip_space()
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def _next(self, skip_space: bool = True) -> Optional[Token]:
        token = self._peek(skip_space)
        if token is not None:
            self.index += 1
        return token

    def _skip_space(self):
        while self.index < len(self.tokens) and self.tokens[self.index].text.isspace():
            self.index += 1

    def _end_position(self) -> int:
        return len(self.latex)

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def parse(self) -> ExpressionNode:
        nodes = self._parse_sequence(stop=())
        token = self._peek()
        if token is not None:
            raise LatexParseError(f"Unexpected {token.text!r}", token.position)
        return _collapse(nodes)

    # -------------------------------------------------------------------------
    # Sequences and atoms
    # -------------------------------------------------------------------------

    def _parse_sequence(self, stop: Tuple[str, ...]) -> List[ExpressionNode]:
        """Parse atoms (with their scripts) until a stop token or end of input."""
        nodes: List[ExpressionNode] = []
        while True:
            token = self._peek()
            if token is None or token.text in stop:
                break
            if token.text == '}':
                raise LatexParseError("Unbalanced '}'", token.position)
            if token.text == '\\right':
                raise LatexParseError("\\right without matching \\left", token.position)

            if token.text in ('^', '_'):
                base: ExpressionNode = TextNode(value='')
            else:
                base = self._parse_atom()
                if base is None:
                    continue
            nodes.append(self._parse_scripts(base))
        return _merge_text(nodes)

    def _parse_scripts(self, base: ExpressionNode) -> ExpressionNode:
        superscript = None
        subscript = None
        while True:
            token = self._peek()
            if token is not None and token.text in ('\\limits', '\\nolimits'):
                self._next()
                continue
            if token is None or token.text not in ('^', '_'):
                break
            self._next()
            argument = self._parse_argument(token)
            if token.text == '^':
                if superscript is not None:
                    raise LatexParseError("Double superscript", token.position)
                superscript = argument
            else:
                if subscript is not None:
                    raise LatexParseError("Double subscript", token.position)
                subscript = argument

        if superscript is None and subscript is None:
            return base

        if isinstance(base, LargeOperatorNode) and base.lower is None and base.upper is None:
            return LargeOperatorNode(kind=base.kind, lower=subscript, upper=superscript)

        if superscript is not None and subscript is not None:
            inner = ScriptNode(base=base, script=superscript, kind='superscript')
            return ScriptNode(base=inner, script=subscript, kind='subscript')
        if superscript is not None:
            return ScriptNode(base=base, script=superscript, kind='superscript')
        return ScriptNode(base=base, script=subscript, kind='subscript')

    def _parse_argument(self, owner: Token) -> ExpressionNode:
        """A braced group or a single atom (for commands and scripts)."""
        token = self._peek()
        if token is None or token.text in ('}', '^', '_', ']') or token.text == '\\right':
            position = token.position if token is not None else self._end_position()
            raise LatexParseError(f"Missing argument for {owner.text!r}", position)
        atom = self._parse_atom()
        if atom is None:
            raise LatexParseError(f"Missing argument for {owner.text!r}", token.position)
        return atom

    def _parse_group(self, open_token: Token) -> ExpressionNode:
        nodes = self._parse_sequence(stop=('}',))
        if self._next() is None:
            raise LatexParseError("Missing '}'", open_token.position)
        return _collapse(nodes)

    def _parse_atom(self) -> Optional[ExpressionNode]:
        token = self._next()
        text = token.text

        if text == '{':
            return self._parse_group(token)
        if token.is_command or text.startswith('\\'):
            return self._parse_command(token)
        if text == '~':
            return TextNode(value=' ')
        if text in ('&',):
            raise LatexParseError(f"Unsupported token {text!r}", token.position)
        return _char_node(text)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def _parse_command(self, token: Token) -> Optional[ExpressionNode]:
        name = token.command

        if name in ESCAPED_CHARS and len(name) == 1:
            return TextNode(value=ESCAPED_CHARS[name], kind='symbol')
        if name in SPACING_COMMANDS:
            spaces = SPACING_COMMANDS[name]
            return TextNode(value=spaces) if spaces else None
        if name in IGNORED_COMMANDS:
            return None

        if name in FRACTION_COMMANDS:
            numerator = self._parse_argument(token)
            denominator = self._parse_argument(token)
            return FractionNode(numerator=numerator, denominator=denominator)

        if name == 'sqrt':
            index = None
            next_token = self._peek()
            if next_token is not None and next_token.text == '[':
                self._next()
                index = _collapse(self._parse_sequence(stop=(']',)))
                if self._next() is None:
                    raise LatexParseError("Missing ']'", next_token.position)
            return SqrtNode(content=self._parse_argument(token), index=index)

        if name in LARGE_OPERATORS:
            return LargeOperatorNode(kind=LARGE_OPERATORS[name])

        if name == 'left':
            return self._parse_left_right(token)

        if name in ACCENT_COMMANDS:
            return AccentNode(base=self._parse_argument(token), accent=token.text)

        if name in TEXT_COMMANDS:
            kind = 'operator' if name == 'operatorname' else 'text'
            return TextNode(value=self._read_raw_group(token), kind=kind, style='normal')

        if name in STYLE_COMMANDS:
            return self._parse_argument(token)

        if name in FUNCTION_NAMES:
            return TextNode(value=name, kind='operator', style='normal')

        if name in GREEK_LETTERS:
            return TextNode(value=GREEK_LETTERS[name], style='italic')

        if name in LATEX_TO_UNICODE:
            symbol = LATEX_TO_UNICODE[name]
            kind = 'operator' if symbol in OPERATOR_SYMBOLS else 'symbol'
            return TextNode(value=symbol, kind=kind)

        raise LatexParseError(f"Unknown command {token.text!r}", token.position)

    def _parse_left_right(self, left_token: Token) -> DelimiterNode:
        left = self._read_delimiter(left_token)
        nodes = self._parse_sequence(stop=('\\right',))
        right_token = self._next()
        if right_token is None:
            raise LatexParseError("\\left without matching \\right", left_token.position)
        right = self._read_delimiter(right_token)
        return DelimiterNode(
            content=_collapse(nodes),
            left=left,
            right=right,
            stretchy=True,
            kind=DELIMITER_KINDS.get(left, DELIMITER_KINDS.get(right, 'parenthesis')),
        )

    def _read_delimiter(self, owner: Token) -> str:
        token = self._next()
        if token is None:
            raise LatexParseError(f"Missing delimiter after {owner.text!r}", self._end_position())
        if token.text in ('{', '}', '^', '_'):
            raise LatexParseError(f"Invalid delimiter {token.text!r}", token.position)
        return token.text

    def _read_raw_group(self, owner: Token) -> str:
        """Raw text of a braced argument, spaces preserved."""
        open_token = self._next()
        if open_token is None or open_token.text != '{':
            position = open_token.position if open_token is not None else self._end_position()
            raise LatexParseError(f"Missing argument for {owner.text!r}", position)

        depth = 1
        parts = []
        while True:
            token = self._next(skip_space=False)
            if token is None:
                raise LatexParseError("Missing '}'", open_token.position)
            if token.text == '{':
                depth += 1
            elif token.text == '}':
                depth -= 1
                if depth == 0:
                    break
            else:
                parts.append(token.command if token.is_command and token.command in ESCAPED_CHARS
                             else token.text)
        return re.sub(r'\s+', ' ', ''.join(parts))


# =============================================================================
# Helpers
# =============================================================================

def _char_node(char: str) -> TextNode:
    if char == '-':
        return TextNode(value='−', kind='operator')
    if char in OPERATOR_SYMBOLS:
        return TextNode(value=char, kind='operator')
    if char.isalpha():
        return TextNode(value=char, style='italic')
    return TextNode(value=char)


def _merge_text(nodes: List[ExpressionNode]) -> List[ExpressionNode]:
    """Join runs of plain leaves with the same kind and style into one leaf."""
    merged: List[ExpressionNode] = []
    for node in nodes:
        previous = merged[-1] if merged else None
        if (isinstance(node, TextNode) and isinstance(previous, TextNode)
                and node.kind == previous.kind == 'text' and node.style == previous.style):
            merged[-1] = TextNode(value=previous.value + node.value, kind='text', style=node.style)
        else:
            merged.append(node)
    return merged


def _collapse(nodes: List[ExpressionNode]) -> ExpressionNode:
    if not nodes:
        return TextNode(value='')
    if len(nodes) == 1:
        return nodes[0]
    return GroupNode(children=tuple(nodes))


def parse_latex(latex: str) -> ExpressionNode:
    """Parse LaTeX math source into an expression tree."""
    return LatexParser(latex).parse()
