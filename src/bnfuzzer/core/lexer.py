"""
Single-line tokenizer with one token of lookahead.

Each grammar line is lexed independently. The lexer skips whitespace, truncates
the line at a comment marker (`//` or `;`), and then applies these rules in
priority order:

1. decimal digits -> NUMBER
2. letter, `-` or `_` followed by letters, digits, `-`, `_` -> SYMBOL
3. `<name>` -> SYMBOL (angle-bracket form)
4. `"..."` / `'...'` -> STRING (escapes: \\n \\r \\\\ \\0 \\xHH and the quote itself)
5. `%xHH-HH` -> VALUE_RANGE
6. fixed literals, longest first (`::=` and `=/` before `=`, `...` before others)
7. end of line -> EOL
8. anything else -> LexError("Invalid token")

Examples
--------
>>> from bnfuzzer.core.lexer import Lexer
>>> lx = Lexer('digit ::= "0" | "1"', "g.bnf", 0)
>>> [lx.next().kind.name for _ in range(6)]
['SYMBOL', 'DEFINITION', 'STRING', 'ALTERNATION', 'STRING', 'EOL']
"""

from __future__ import annotations

from typing import Final

from .constants import COMMENT_MARKERS, is_symbol_char, is_symbol_start
from .errors import LexError
from .expr import Loc, Token, TokenKind

__all__ = ["Lexer", "LITERAL_TOKENS"]

# Order matters: a prefix scan takes the first match, so longer spellings that
# share a prefix with shorter ones come first.
LITERAL_TOKENS: Final[tuple[tuple[str, TokenKind], ...]] = (
    ("::=", TokenKind.DEFINITION),
    ("=/", TokenKind.INCREMENTAL_ALTERNATIVE),
    ("=", TokenKind.DEFINITION),
    ("...", TokenKind.ELLIPSIS),
    ("|", TokenKind.ALTERNATION),
    ("/", TokenKind.ALTERNATION),
    ("[", TokenKind.BRACKET_OPEN),
    ("]", TokenKind.BRACKET_CLOSE),
    ("{", TokenKind.CURLY_OPEN),
    ("}", TokenKind.CURLY_CLOSE),
    ("(", TokenKind.PAREN_OPEN),
    (")", TokenKind.PAREN_CLOSE),
    ("*", TokenKind.ASTERISK),
    ("-", TokenKind.DASH),
)

_DEC_DIGITS: Final[frozenset[str]] = frozenset("0123456789")
_HEX_DIGITS: Final[frozenset[str]] = _DEC_DIGITS | frozenset("abcdefABCDEF")


class Lexer:
    """
    Tokenizer over one line of grammar source.

    Args:
        content (str): The line, without its trailing newline.
        file_path (str): Used in token locations.
        row (int): Zero-based line index, used in token locations.
    """

    def __init__(self, content: str, file_path: str = "<string>", row: int = 0) -> None:
        self.content = content
        self.file_path = file_path
        self.row = row
        self.col = 0
        self._peeked: Token | None = None
        self._peek_start = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def next(self) -> Token:
        """Consume and return the next token."""
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        return self._chop_token()

    def peek(self) -> Token:
        """Return the next token without consuming it."""
        if self._peeked is None:
            start = self.col
            self._peeked = self._chop_token()
            self._peek_start = start
        return self._peeked

    def invalidate_peek(self) -> None:
        """Drop the cached lookahead and rewind so the next call lexes it again."""
        if self._peeked is not None:
            self.col = self._peek_start
            self._peeked = None

    def loc(self) -> Loc:
        return Loc(self.file_path, self.row, self.col)

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self.col >= len(self.content)

    def _current(self) -> str:
        return self.content[self.col]

    def _trim(self) -> None:
        while not self._at_end() and self._current().isspace():
            self.col += 1

    def _prefix(self, prefix: str) -> bool:
        return self.content.startswith(prefix, self.col)

    def _error(self, message: str, col: int | None = None) -> LexError:
        return LexError(Loc(self.file_path, self.row, self.col if col is None else col), message)

    # ------------------------------------------------------------------
    # Token rules
    # ------------------------------------------------------------------

    def _chop_token(self) -> Token:
        self._trim()
        if any(self._prefix(marker) for marker in COMMENT_MARKERS):
            self.col = len(self.content)

        loc = self.loc()
        if self._at_end():
            return Token(TokenKind.EOL, "", loc)

        ch = self._current()
        if ch in _DEC_DIGITS:
            return self._chop_number(loc)
        if is_symbol_start(ch):
            return self._chop_bare_symbol(loc)
        if ch == "<":
            return self._chop_angle_symbol(loc)
        if ch in ('"', "'"):
            return Token(TokenKind.STRING, self._chop_string_literal(), loc)
        if self._prefix("%x"):
            return self._chop_value_range(loc)

        for text, kind in LITERAL_TOKENS:
            if self._prefix(text):
                self.col += len(text)
                return Token(kind, text, loc)

        raise self._error("Invalid token")

    def _chop_number(self, loc: Loc) -> Token:
        begin = self.col
        while not self._at_end() and self._current() in _DEC_DIGITS:
            self.col += 1
        text = self.content[begin : self.col]
        return Token(TokenKind.NUMBER, text, loc, number=int(text))

    def _chop_bare_symbol(self, loc: Loc) -> Token:
        begin = self.col
        self.col += 1
        while not self._at_end() and is_symbol_char(self._current()):
            self.col += 1
        return Token(TokenKind.SYMBOL, self.content[begin : self.col], loc)

    def _chop_angle_symbol(self, loc: Loc) -> Token:
        self.col += 1
        begin = self.col
        while not self._at_end() and self._current() != ">":
            ch = self._current()
            if not is_symbol_char(ch):
                raise self._error(f"Unexpected character in symbol name {ch}")
            self.col += 1
        if self._at_end():
            raise self._error("Expected '>' at the end of the symbol name")
        name = self.content[begin : self.col]
        self.col += 1
        return Token(TokenKind.SYMBOL, name, loc)

    def _chop_string_literal(self) -> str:
        quote_col = self.col
        quote = self._current()
        self.col += 1

        lit: list[str] = []
        while not self._at_end() and self._current() != quote:
            ch = self._current()
            if ch == "\\":
                lit.append(self._chop_escape(quote))
            else:
                lit.append(ch)
            self.col += 1

        if self._at_end():
            raise self._error(f"Expected '{quote}' at the end of this string literal", quote_col)
        self.col += 1
        return "".join(lit)

    def _chop_escape(self, quote: str) -> str:
        # On entry self.col points at the backslash; on exit at the last
        # character of the escape sequence.
        if self.col + 1 >= len(self.content):
            raise self._error("Unfinished escape sequence")
        self.col += 1
        ch = self._current()
        if ch == "n":
            return "\n"
        if ch == "r":
            return "\r"
        if ch == "\\":
            return "\\"
        if ch == "0":
            return "\0"
        if ch == quote:
            return quote
        if ch == "x":
            digits = self.content[self.col + 1 : self.col + 3]
            if len(digits) != 2 or not all(d in _HEX_DIGITS for d in digits):
                raise self._error("Expected two hex digits after \\x")
            self.col += 2
            return chr(int(digits, 16))
        raise self._error(f"Unknown escape sequence starting with {ch}")

    def _chop_hex_byte(self) -> str:
        digits = self.content[self.col : self.col + 2]
        if len(digits) != 2 or not all(d in _HEX_DIGITS for d in digits):
            raise self._error("Expected two hex digits in value range")
        self.col += 2
        return chr(int(digits, 16))

    def _chop_value_range(self, loc: Loc) -> Token:
        begin = self.col
        self.col += 2
        lower = self._chop_hex_byte()
        if not self._prefix("-"):
            raise self._error("Expected '-' between the bounds of the value range")
        self.col += 1
        upper = self._chop_hex_byte()
        return Token(
            TokenKind.VALUE_RANGE,
            self.content[begin : self.col],
            loc,
            bounds=(lower, upper),
        )
