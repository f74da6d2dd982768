"""
Data model for the grammar dialect: locations, tokens, expression trees and rules.

Responsibilities
- Define Loc and Token, attached to every lexeme and tree node for diagnostics.
- Define the closed set of Expr node types (Symbol, String, Range, Concat,
  Alternation, Repetition) as frozen dataclasses.
- Define Rule, the single mutable record of the model: its body is replaced when
  an incremental alternative (`=/`) extends it.
- Render expressions back to dialect text (used by `-dump`).

Notes
- Trees are owned exclusively by their parent: no sharing, no cycles. Cycles only
  appear through Symbol names resolved against a Grammar.
- Range bound ordering is not checked here; the generator checks it when the node
  is expanded.

Examples
--------
>>> from bnfuzzer.core.expr import Alternation, Loc, String, render
>>> loc = Loc("g.bnf", 0, 0)
>>> render(Alternation(loc, (String(loc, "0"), String(loc, "1"))))
'"0" | "1"'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .constants import is_symbol_start

__all__ = [
    "Loc",
    "TokenKind",
    "Token",
    "Symbol",
    "String",
    "Range",
    "Concat",
    "Alternation",
    "Repetition",
    "Expr",
    "Rule",
    "render",
    "render_string",
]


@dataclass(frozen=True, slots=True)
class Loc:
    """
    Source position. Stored zero-based, displayed one-based.

    Attributes:
        file_path (str): Path of the grammar file (or a pseudo name like "<string>").
        row (int): Zero-based line index.
        col (int): Zero-based character index within the line.
    """

    file_path: str
    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.file_path}:{self.row + 1}:{self.col + 1}"


class TokenKind(Enum):
    """Token categories produced by the lexer. `.value` is the human-readable name."""

    EOL = "end of line"
    SYMBOL = "symbol"
    DEFINITION = "definition symbol"
    INCREMENTAL_ALTERNATIVE = "incremental alternative"
    ALTERNATION = "alternation symbol"
    STRING = "string literal"
    BRACKET_OPEN = "open bracket"
    BRACKET_CLOSE = "close bracket"
    CURLY_OPEN = "open curly"
    CURLY_CLOSE = "close curly"
    PAREN_OPEN = "open paren"
    PAREN_CLOSE = "close paren"
    ELLIPSIS = "ellipsis"
    DASH = "dash"
    ASTERISK = "asterisk"
    NUMBER = "number"
    VALUE_RANGE = "value range"


@dataclass(frozen=True, slots=True)
class Token:
    """
    Single lexeme.

    Attributes:
        kind (TokenKind): Category.
        text (str): Raw characters, or the decoded contents for string literals.
        loc (Loc): Position of the first character.
        number (int | None): Parsed value for NUMBER tokens.
        bounds (tuple[str, str] | None): Lower/upper characters for VALUE_RANGE tokens.
    """

    kind: TokenKind
    text: str
    loc: Loc
    number: int | None = None
    bounds: tuple[str, str] | None = None


# ============================================================================
# Expression nodes
# ============================================================================


@dataclass(frozen=True, slots=True)
class Symbol:
    """Reference to another rule by name."""

    loc: Loc
    name: str


@dataclass(frozen=True, slots=True)
class String:
    """Literal emitted verbatim."""

    loc: Loc
    text: str


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive character range; `lower` and `upper` are single characters."""

    loc: Loc
    lower: str
    upper: str


@dataclass(frozen=True, slots=True)
class Concat:
    """Sequential composition."""

    loc: Loc
    elements: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Alternation:
    """Mutually exclusive choice between variants."""

    loc: Loc
    variants: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Repetition:
    """`body` repeated between `lower` and `upper` times, inclusive."""

    loc: Loc
    body: Expr
    lower: int
    upper: int


Expr = Union[Symbol, String, Range, Concat, Alternation, Repetition]


@dataclass(slots=True)
class Rule:
    """
    Named production.

    Attributes:
        head (Token): SYMBOL token naming the rule; its loc is the definition site.
        body (Expr): Expansion. Replaced (never edited in place) by `Grammar.extend`.
    """

    head: Token
    body: Expr

    @property
    def name(self) -> str:
        return self.head.text

    def render(self) -> str:
        name = self.name
        head = name if name and is_symbol_start(name[0]) else f"<{name}>"
        return f"{head} ::= {render(self.body)}"


# ============================================================================
# Rendering
# ============================================================================

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\0": "\\0"}


def render_string(text: str) -> str:
    """Quote `text` as a double-quoted literal the lexer reads back unchanged."""
    out: list[str] = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _render_operand(expr: Expr) -> str:
    # Composite bodies need grouping to keep their extent when prefixed or juxtaposed.
    if isinstance(expr, (Concat, Alternation)):
        return f"( {render(expr)} )"
    return render(expr)


def render(expr: Expr) -> str:
    """
    Reconstruct dialect text for an expression.

    Returns:
        str: Text that parses back to an equivalent tree (locations aside).
            Repetitions use `[ x ]` for 0..1, `n x` for exact counts and `n*m x`
            otherwise, so the output does not depend on the configured default cap.
    """
    if isinstance(expr, Symbol):
        return f"<{expr.name}>"
    if isinstance(expr, String):
        return render_string(expr.text)
    if isinstance(expr, Range):
        return f"{render_string(expr.lower)} ... {render_string(expr.upper)}"
    if isinstance(expr, Concat):
        return " ".join(_render_operand(e) for e in expr.elements)
    if isinstance(expr, Alternation):
        return " | ".join(
            f"( {render(v)} )" if isinstance(v, Alternation) else render(v)
            for v in expr.variants
        )
    if isinstance(expr, Repetition):
        if expr.lower == 0 and expr.upper == 1:
            return f"[ {render(expr.body)} ]"
        if expr.lower == expr.upper:
            return f"{expr.lower} {_render_operand(expr.body)}"
        return f"{expr.lower}*{expr.upper} {_render_operand(expr.body)}"
    raise AssertionError(f"unreachable: unknown expression node {expr!r}")
