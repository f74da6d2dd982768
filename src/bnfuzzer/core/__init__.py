"""
Grammar compiler and stochastic expander.

## Contracts
- expr: Loc, Token, Expr node types, Rule, rendering back to dialect text.
- lexer / parser: one source line to a Rule (plus its `=/` flag).
- grammar: rule table with redefinition and incremental-alternative semantics.
- validate: undefined-symbol and unused-rule reports.
- generate: random expansion driven by an injected `random.Random`.
- errors: Diagnostic values and the DiagnosticError hierarchy.
- hashing / schema: grammar fingerprint and the SampleRow model.

## Notes
- Zero-IO: stdlib + pydantic only; file reading and writing live in bnfuzzer.io.

## Examples
```python
import random
from bnfuzzer.core import Grammar, generate, parse_rule

g = Grammar()
g.add(*parse_rule('digit ::= "0" | "1" | "2"'))
generate(g, "digit", random.Random(7))  # one of '0', '1', '2'
```
"""

from __future__ import annotations

from .constants import DEFAULT_MAX_REPETITION
from .errors import (
    BoundsError,
    Diagnostic,
    DiagnosticError,
    GenerationError,
    GrammarError,
    LexError,
    ParseError,
    RedefinitionError,
    UndefinedRuleError,
    UndefinedSymbolError,
)
from .expr import Alternation, Concat, Expr, Loc, Range, Repetition, Rule, String, Symbol, render
from .generate import expand, generate
from .grammar import Grammar
from .lexer import Lexer
from .parser import Parser, parse_expr, parse_rule
from .validate import check_defined, check_reachable

__all__ = [
    "DEFAULT_MAX_REPETITION",
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
    "Loc",
    "Expr",
    "Symbol",
    "String",
    "Range",
    "Concat",
    "Alternation",
    "Repetition",
    "Rule",
    "render",
    "Lexer",
    "Parser",
    "parse_rule",
    "parse_expr",
    "Grammar",
    "check_defined",
    "check_reachable",
    "expand",
    "generate",
]
