"""
Grammar file reader and per-line driver.

Overview
- Splits source text into lines and parses each one independently.
- Adds every parsed rule to a Grammar (`=/` lines extend, others define).
- Collects every per-line failure instead of stopping at the first, so one run
  reports all broken lines of a file.

Notes
- Blank and comment-only lines are skipped.
- A line that fails leaves the grammar as it was before that line.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from bnfuzzer.core.constants import DEFAULT_MAX_REPETITION
from bnfuzzer.core.errors import Diagnostic, DiagnosticError, ParseError
from bnfuzzer.core.expr import Loc
from bnfuzzer.core.grammar import Grammar
from bnfuzzer.core.parser import parse_rule

from .errors import IoReadError

__all__ = ["LoadResult", "load_grammar", "read_grammar"]

LOG = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """
    Outcome of loading a grammar source.

    Attributes:
        grammar (Grammar): Every rule that parsed and was accepted by the table.
        errors (list[DiagnosticError]): One entry per failed line, in line order.
    """

    grammar: Grammar
    errors: list[DiagnosticError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [e.diagnostic for e in self.errors]


def load_grammar(
    text: str,
    file_path: str = "<string>",
    *,
    max_repetition: int = DEFAULT_MAX_REPETITION,
) -> LoadResult:
    """
    Parse grammar source text line by line.

    Args:
        text (str): Whole grammar source.
        file_path (str): Name used in diagnostics.
        max_repetition (int): Cap for `{ ... }` and open-ended `*` repetitions.

    Returns:
        LoadResult: The accumulated grammar and every per-line error.
    """
    result = LoadResult(grammar=Grammar())
    for row, line in enumerate(text.split("\n")):
        try:
            parsed = parse_rule(line.rstrip("\r"), file_path, row, max_repetition=max_repetition)
            if parsed is not None:
                result.grammar.add(*parsed)
        except DiagnosticError as exc:
            LOG.debug("line %d rejected: %s", row + 1, exc.message)
            result.errors.append(exc)
        except RecursionError:
            LOG.debug("line %d rejected: nesting too deep", row + 1)
            result.errors.append(
                ParseError(Loc(file_path, row, 0), "Expression is nested too deeply to parse")
            )
    LOG.debug(
        "loaded %s: %d rule(s), %d error(s)", file_path, len(result.grammar), len(result.errors)
    )
    return result


def read_grammar(
    path: str | os.PathLike[str],
    *,
    max_repetition: int = DEFAULT_MAX_REPETITION,
) -> LoadResult:
    """
    Read a UTF-8 grammar file and load it with `load_grammar`.

    Raises:
        IoReadError: If the file cannot be opened or decoded.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise IoReadError(f"could not read file {p}: {exc}") from exc
    return load_grammar(text, str(path), max_repetition=max_repetition)
