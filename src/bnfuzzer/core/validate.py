"""
Static checks over a complete grammar.

Both checks are read-only and return every violation found rather than stopping
at the first:

- check_defined: every Symbol reference, in every rule body, names a defined rule.
- check_reachable: every rule is reachable from the entry rule through Symbol
  references. The walk keeps a visited set keyed by rule name, so mutually
  recursive grammars terminate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import assert_never

from .errors import Diagnostic
from .expr import Alternation, Concat, Expr, Range, Repetition, String, Symbol
from .grammar import Grammar

__all__ = ["iter_symbols", "check_defined", "used_symbols", "check_reachable"]

LOG = logging.getLogger(__name__)


def iter_symbols(expr: Expr) -> Iterator[Symbol]:
    """Yield every Symbol leaf of `expr` in source order."""
    match expr:
        case Symbol():
            yield expr
        case String() | Range():
            return
        case Concat(elements=children) | Alternation(variants=children):
            for child in children:
                yield from iter_symbols(child)
        case Repetition(body=body):
            yield from iter_symbols(body)
        case _:
            assert_never(expr)


def check_defined(grammar: Grammar) -> list[Diagnostic]:
    """
    Report each Symbol reference whose name has no rule.

    Returns:
        list[Diagnostic]: One entry per offending reference, at the reference's
        location, in definition order. Empty when the grammar is closed.
    """
    diagnostics: list[Diagnostic] = []
    for rule in grammar:
        for symbol in iter_symbols(rule.body):
            if symbol.name not in grammar:
                diagnostics.append(Diagnostic(symbol.loc, f"Symbol <{symbol.name}> is not defined"))
    LOG.debug("definedness check: %d undefined reference(s)", len(diagnostics))
    return diagnostics


def used_symbols(grammar: Grammar, entry: str) -> set[str]:
    """
    Names of the rules reachable from `entry`, including `entry` itself if defined.

    Undefined names are skipped; reporting them is check_defined's job.
    """
    visited: set[str] = set()
    stack = [entry]
    while stack:
        name = stack.pop()
        if name in visited:
            continue
        rule = grammar.lookup(name)
        if rule is None:
            continue
        visited.add(name)
        stack.extend(s.name for s in iter_symbols(rule.body) if s.name not in visited)
    return visited


def check_reachable(grammar: Grammar, entry: str) -> list[Diagnostic]:
    """
    Report each rule that cannot be reached from `entry`.

    Returns:
        list[Diagnostic]: One entry per unused rule, at its definition, in
        definition order.
    """
    used = used_symbols(grammar, entry)
    diagnostics = [
        Diagnostic(rule.head.loc, f"Symbol <{rule.name}> is not used")
        for rule in grammar
        if rule.name not in used
    ]
    LOG.debug("reachability check from %s: %d used, %d unused", entry, len(used), len(diagnostics))
    return diagnostics
