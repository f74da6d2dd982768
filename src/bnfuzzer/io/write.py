"""
Sample writer.

Overview
- Validates each sample as a bnfuzzer.core.schema.SampleRow.
- Builds a Polars frame with a fixed column order and dtypes.
- Writes it as NDJSON, CSV or Parquet, or as plain text (one message per line).

Format selection
- An explicit format wins; "auto" picks by suffix: .jsonl/.ndjson, .csv,
  .parquet/.pq, anything else is text.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

import polars as pl

from bnfuzzer.core.schema import SAMPLE_COLUMNS, SampleRow

from .config import OutFormat
from .errors import IoWriteError

__all__ = ["resolve_format", "samples_frame", "write_samples"]

LOG = logging.getLogger(__name__)

_SUFFIX_FORMATS: dict[str, OutFormat] = {
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
    ".csv": "csv",
    ".parquet": "parquet",
    ".pq": "parquet",
}

# Polars dtype classes (loosely typed across polars versions).
_SCHEMA: dict[str, object] = {
    "entry": pl.Utf8,
    "index": pl.Int64,
    "seed": pl.Int64,
    "grammar_digest": pl.Utf8,
    "text": pl.Utf8,
}


def resolve_format(path: str | os.PathLike[str], fmt: OutFormat = "auto") -> OutFormat:
    """Return `fmt`, or the format implied by the suffix of `path` when `fmt` is "auto"."""
    if fmt != "auto":
        return fmt
    return _SUFFIX_FORMATS.get(Path(path).suffix.lower(), "text")


def samples_frame(rows: Iterable[SampleRow]) -> pl.DataFrame:
    """Build the samples frame (columns in SAMPLE_COLUMNS order)."""
    dumped = [row.model_dump() for row in rows]
    columns = {c: [d[c] for d in dumped] for c in SAMPLE_COLUMNS}
    return pl.DataFrame(columns, schema=_SCHEMA)  # type: ignore[arg-type]


def write_samples(
    rows: Iterable[SampleRow],
    path: str | os.PathLike[str],
    fmt: OutFormat = "auto",
) -> Path:
    """
    Write samples to `path`.

    Returns:
        Path: The written file.

    Raises:
        IoWriteError: If the destination cannot be written.
    """
    out = Path(path)
    resolved = resolve_format(out, fmt)
    df = samples_frame(rows)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        if resolved == "jsonl":
            df.write_ndjson(out)
        elif resolved == "csv":
            df.write_csv(out)
        elif resolved == "parquet":
            df.write_parquet(out)
        else:
            out.write_text(
                "".join(t + "\n" for t in df.get_column("text").to_list()), encoding="utf-8"
            )
    except OSError as exc:
        raise IoWriteError(f"failed to write samples to {out}: {exc}") from exc
    LOG.debug("wrote %d sample(s) to %s as %s", df.height, out, resolved)
    return out
