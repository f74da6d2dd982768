"""
Grammar dialect defaults shared by the lexer, parser and configuration layer.

Notes:
    - DEFAULT_MAX_REPETITION caps `{ ... }` and open-ended `*` repetitions. It is
      a generation policy, not something the grammar text can express.
    - Symbol character classes mirror the bare and angle-bracket symbol forms.
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "DEFAULT_MAX_REPETITION",
    "COMMENT_MARKERS",
    "SYMBOL_PUNCTUATION",
    "is_symbol_start",
    "is_symbol_char",
]

# Upper bound used for `{ x }`, `*x` and `n*x` when no explicit upper bound is given.
DEFAULT_MAX_REPETITION: Final[int] = 20

# Everything from one of these markers to the end of the line is ignored.
COMMENT_MARKERS: Final[tuple[str, ...]] = ("//", ";")

SYMBOL_PUNCTUATION: Final[frozenset[str]] = frozenset("-_")


def is_symbol_start(ch: str) -> bool:
    return ch.isalpha() or ch in SYMBOL_PUNCTUATION


def is_symbol_char(ch: str) -> bool:
    return ch.isalpha() or ch.isdigit() or ch in SYMBOL_PUNCTUATION
