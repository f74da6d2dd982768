"""
Recursive-descent parser from tokens to expression trees.

Precedence, lowest to highest:

    alt     := concat (("|" | "/") concat)*
    concat  := primary primary*
    primary := "(" alt ")" | "{" alt "}" | "[" alt "]"
             | symbol | string | string "..." string | value-range
             | "*" [number] primary
             | number "*" [number] primary
             | number primary

A concat or alternation with a single member collapses to that member. `{ x }`
and open-ended `*` forms are capped at `max_repetition`.
"""

from __future__ import annotations

import logging

from .constants import DEFAULT_MAX_REPETITION
from .errors import ParseError
from .expr import (
    Alternation,
    Concat,
    Expr,
    Range,
    Repetition,
    Rule,
    String,
    Symbol,
    Token,
    TokenKind,
)
from .lexer import Lexer

__all__ = ["Parser", "is_primary_start", "parse_rule", "parse_expr"]

LOG = logging.getLogger(__name__)

_PRIMARY_START = frozenset(
    {
        TokenKind.SYMBOL,
        TokenKind.STRING,
        TokenKind.BRACKET_OPEN,
        TokenKind.CURLY_OPEN,
        TokenKind.PAREN_OPEN,
        TokenKind.NUMBER,
        TokenKind.ASTERISK,
        TokenKind.VALUE_RANGE,
    }
)


def is_primary_start(kind: TokenKind) -> bool:
    """True if a token of this kind can begin a primary expression."""
    return kind in _PRIMARY_START


class Parser:
    """
    Parser bound to a single line's lexer.

    Args:
        lexer (Lexer): Token source for one line.
        max_repetition (int): Upper bound for `{ ... }` and `*` without an explicit bound.
    """

    def __init__(self, lexer: Lexer, max_repetition: int = DEFAULT_MAX_REPETITION) -> None:
        self.lexer = lexer
        self.max_repetition = max_repetition

    def expect(self, kind: TokenKind) -> Token:
        token = self.lexer.next()
        if token.kind is not kind:
            raise ParseError(token.loc, f"Expected {kind.value} but got {token.kind.value}")
        return token

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def parse_rule(self) -> tuple[Rule, bool]:
        """
        Parse `SYMBOL (::= | = | =/) alt`.

        Returns:
            tuple[Rule, bool]: The rule and whether it was an incremental
            alternative (`=/`). The caller checks for the trailing EOL.
        """
        head = self.expect(TokenKind.SYMBOL)
        sep = self.lexer.next()
        if sep.kind not in (TokenKind.DEFINITION, TokenKind.INCREMENTAL_ALTERNATIVE):
            raise ParseError(
                sep.loc,
                f"Expected {TokenKind.DEFINITION.value} or "
                f"{TokenKind.INCREMENTAL_ALTERNATIVE.value} but got {sep.kind.value}",
            )
        body = self.parse_expr()
        return Rule(head=head, body=body), sep.kind is TokenKind.INCREMENTAL_ALTERNATIVE

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def parse_expr(self) -> Expr:
        return self.parse_alt()

    def parse_alt(self) -> Expr:
        first = self.parse_concat()
        if self.lexer.peek().kind is not TokenKind.ALTERNATION:
            return first

        variants = [first]
        while self.lexer.peek().kind is TokenKind.ALTERNATION:
            self.lexer.next()
            variants.append(self.parse_concat())
        return Alternation(first.loc, tuple(variants))

    def parse_concat(self) -> Expr:
        first = self.parse_primary()
        if not is_primary_start(self.lexer.peek().kind):
            return first

        elements = [first]
        while is_primary_start(self.lexer.peek().kind):
            elements.append(self.parse_primary())
        return Concat(first.loc, tuple(elements))

    def parse_primary(self) -> Expr:
        token = self.lexer.next()
        kind = token.kind

        if kind is TokenKind.PAREN_OPEN:
            inner = self.parse_alt()
            self.expect(TokenKind.PAREN_CLOSE)
            return inner

        if kind is TokenKind.CURLY_OPEN:
            body = self.parse_alt()
            self.expect(TokenKind.CURLY_CLOSE)
            return Repetition(token.loc, body, 0, self.max_repetition)

        if kind is TokenKind.BRACKET_OPEN:
            body = self.parse_alt()
            self.expect(TokenKind.BRACKET_CLOSE)
            return Repetition(token.loc, body, 0, 1)

        if kind is TokenKind.SYMBOL:
            return Symbol(token.loc, token.text)

        if kind is TokenKind.STRING:
            return self._parse_string_or_range(token)

        if kind is TokenKind.VALUE_RANGE:
            assert token.bounds is not None
            lower, upper = token.bounds
            return Range(token.loc, lower, upper)

        if kind is TokenKind.ASTERISK:
            upper = self.max_repetition
            if self.lexer.peek().kind is TokenKind.NUMBER:
                upper = self._number(self.lexer.next())
            body = self.parse_primary()
            return Repetition(token.loc, body, 0, upper)

        if kind is TokenKind.NUMBER:
            lower = self._number(token)
            if self.lexer.peek().kind is not TokenKind.ASTERISK:
                body = self.parse_primary()
                return Repetition(token.loc, body, lower, lower)
            self.lexer.next()
            upper = self.max_repetition
            if self.lexer.peek().kind is TokenKind.NUMBER:
                upper = self._number(self.lexer.next())
            body = self.parse_primary()
            return Repetition(token.loc, body, lower, upper)

        raise ParseError(token.loc, f"Expected start of an expression, but got {kind.value}")

    def _parse_string_or_range(self, lower: Token) -> Expr:
        if self.lexer.peek().kind is not TokenKind.ELLIPSIS:
            return String(lower.loc, lower.text)

        ellipsis = self.lexer.next()
        if len(lower.text) != 1:
            raise ParseError(
                lower.loc,
                "The lower boundary of the range is expected to be 1 symbol string. "
                f"Got {len(lower.text)} instead.",
            )
        upper = self.expect(TokenKind.STRING)
        if len(upper.text) != 1:
            raise ParseError(
                upper.loc,
                "The upper boundary of the range is expected to be 1 symbol string. "
                f"Got {len(upper.text)} instead.",
            )
        return Range(ellipsis.loc, lower.text, upper.text)

    @staticmethod
    def _number(token: Token) -> int:
        assert token.number is not None
        return token.number


def parse_rule(
    line: str,
    file_path: str = "<string>",
    row: int = 0,
    *,
    max_repetition: int = DEFAULT_MAX_REPETITION,
) -> tuple[Rule, bool] | None:
    """
    Parse one full source line.

    Returns:
        tuple[Rule, bool] | None: The rule and its incremental flag, or None for a
        blank or comment-only line.

    Raises:
        LexError | ParseError: On malformed input, including trailing tokens after
            the expression.
    """
    lexer = Lexer(line, file_path, row)
    if lexer.peek().kind is TokenKind.EOL:
        return None
    parser = Parser(lexer, max_repetition=max_repetition)
    rule, incremental = parser.parse_rule()
    parser.expect(TokenKind.EOL)
    LOG.debug("parsed %s:%d rule %s (incremental=%s)", file_path, row + 1, rule.name, incremental)
    return rule, incremental


def parse_expr(text: str, *, max_repetition: int = DEFAULT_MAX_REPETITION) -> Expr:
    """Parse a standalone expression (the whole of `text`)."""
    parser = Parser(Lexer(text), max_repetition=max_repetition)
    expr = parser.parse_expr()
    parser.expect(TokenKind.EOL)
    return expr
