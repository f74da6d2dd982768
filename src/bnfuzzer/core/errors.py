"""
Core diagnostic values and the exception types that carry them.

Every lexical, syntactic and semantic failure is described by a Diagnostic: a
source location plus a message. Parse and generation failures raise a
DiagnosticError subclass wrapping one Diagnostic; the validators return plain
lists of Diagnostic values so every violation can be reported at once.

Taxonomy:
    - LexError: invalid characters, unterminated literals, bad escapes, malformed
      `%x` ranges.
    - ParseError: unexpected tokens, missing closers, wrong range bound lengths.
    - GrammarError: rule table violations (RedefinitionError, UndefinedRuleError).
    - GenerationError: failures while expanding (UndefinedSymbolError, BoundsError).

Examples:
    >>> from bnfuzzer.core.expr import Loc
    >>> from bnfuzzer.core.errors import Diagnostic
    >>> str(Diagnostic(Loc("g.bnf", 0, 4), "Invalid token"))
    'g.bnf:1:5: ERROR: Invalid token'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .expr import Loc

__all__ = [
    "Diagnostic",
    "DiagnosticError",
    "LexError",
    "ParseError",
    "GrammarError",
    "RedefinitionError",
    "UndefinedRuleError",
    "GenerationError",
    "UndefinedSymbolError",
    "BoundsError",
]


@dataclass(frozen=True)
class Diagnostic:
    """Located message. `severity` is "ERROR" for failures and "NOTE" for context."""

    loc: Loc
    message: str
    severity: str = "ERROR"

    def __str__(self) -> str:
        return f"{self.loc}: {self.severity}: {self.message}"


class DiagnosticError(ValueError):
    """
    Base class for located failures raised by the core.

    Attributes:
        diagnostic (Diagnostic): The primary diagnostic.
        notes (tuple[Diagnostic, ...]): Secondary diagnostics pointing at related
            locations (e.g., the original definition of a redefined rule).
    """

    def __init__(self, loc: Loc, message: str, *, notes: tuple[Diagnostic, ...] = ()) -> None:
        self.diagnostic = Diagnostic(loc, message)
        self.notes = notes
        super().__init__(str(self))

    @property
    def loc(self) -> Loc:
        return self.diagnostic.loc

    @property
    def message(self) -> str:
        return self.diagnostic.message

    def __str__(self) -> str:
        return "\n".join([str(self.diagnostic), *(str(n) for n in self.notes)])


class LexError(DiagnosticError):
    """Source text could not be split into tokens."""


class ParseError(DiagnosticError):
    """Tokens do not form a valid rule or expression."""


class GrammarError(DiagnosticError):
    """Rule table violation."""


class RedefinitionError(GrammarError):
    """A rule name was defined twice with `::=`/`=`."""


class UndefinedRuleError(GrammarError):
    """`=/` was used on a rule name that has no definition yet."""


class GenerationError(DiagnosticError):
    """Expansion of an expression failed."""


class UndefinedSymbolError(GenerationError):
    """A symbol reference has no matching rule."""


class BoundsError(GenerationError):
    """A range or repetition has its lower bound above its upper bound."""
