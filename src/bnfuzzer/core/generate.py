"""
Stochastic expansion of expressions into text.

All random draws come from the `random.Random` passed by the caller, in
expansion order, so a fixed seed reproduces the same output for the same
grammar.

Draws per node:
- Alternation: one index in [0, len(variants)).
- Repetition: one count in [lower, upper].
- Range: one code point in [ord(lower), ord(upper)].

There is no depth limit. A rule whose every expansion re-enters itself recurses
until the interpreter's recursion limit is hit.
"""

from __future__ import annotations

import logging
import random
from typing import assert_never

from .errors import BoundsError, UndefinedSymbolError
from .expr import Alternation, Concat, Expr, Loc, Range, Repetition, String, Symbol
from .grammar import Grammar

__all__ = ["expand", "generate"]

LOG = logging.getLogger(__name__)


def expand(grammar: Grammar, expr: Expr, rng: random.Random) -> str:
    """
    Expand `expr` into one random string.

    Raises:
        UndefinedSymbolError: If a Symbol has no rule in `grammar`.
        BoundsError: If a Range or Repetition has lower > upper.
    """
    match expr:
        case String(text=text):
            return text
        case Symbol(name=name):
            rule = grammar.lookup(name)
            if rule is None:
                raise UndefinedSymbolError(expr.loc, f"Symbol <{name}> is not defined")
            return expand(grammar, rule.body, rng)
        case Concat(elements=elements):
            return "".join(expand(grammar, e, rng) for e in elements)
        case Alternation(variants=variants):
            return expand(grammar, variants[rng.randrange(len(variants))], rng)
        case Repetition(body=body, lower=lower, upper=upper):
            if lower > upper:
                raise BoundsError(
                    expr.loc,
                    f"Lower bound {lower} of the repetition is greater than its upper bound {upper}",
                )
            count = rng.randint(lower, upper)
            return "".join(expand(grammar, body, rng) for _ in range(count))
        case Range(lower=lower, upper=upper):
            if lower > upper:
                raise BoundsError(
                    expr.loc,
                    f"Lower bound {lower!r} of the range is greater than its upper bound {upper!r}",
                )
            return chr(rng.randint(ord(lower), ord(upper)))
        case _:
            assert_never(expr)


def generate(grammar: Grammar, entry: str, rng: random.Random) -> str:
    """
    Expand the body of the rule named `entry`.

    Raises:
        UndefinedSymbolError: If `entry` is not defined (located at an unknown
            position since the name comes from outside the grammar).
    """
    rule = grammar.lookup(entry)
    if rule is None:
        raise UndefinedSymbolError(Loc("<entry>", 0, 0), f"Symbol <{entry}> is not defined")
    text = expand(grammar, rule.body, rng)
    LOG.debug("generated %d character(s) from %s", len(text), entry)
    return text
