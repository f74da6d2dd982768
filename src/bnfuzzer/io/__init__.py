"""
bnfuzzer.io: file-facing layer around the grammar core.

## Responsibilities
- GenSettings: run configuration with env > TOML > defaults precedence.
- read_grammar / load_grammar: per-line driver that accumulates a Grammar and
  every per-line diagnostic.
- write_samples: persist generated messages as text, NDJSON, CSV or Parquet.

## Import DAG discipline
- Depends on stdlib, polars, and bnfuzzer.core.*; never imports bnfuzzer.cli.
"""

from __future__ import annotations

from .config import GenSettings
from .read import LoadResult, load_grammar, read_grammar
from .write import write_samples

__all__ = [
    "GenSettings",
    "LoadResult",
    "load_grammar",
    "read_grammar",
    "write_samples",
]
