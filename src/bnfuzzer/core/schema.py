"""
Pydantic v2 model for generated samples.

SampleRow is the record written by `bnfuzzer.io.write` when samples are saved to
a file. Validation happens once per row before the frame is built, so a writer
never sees a negative index or an empty entry name.

Table mapping
- Columns, in order: entry (str), index (i64), seed (i64, nullable),
  grammar_digest (str), text (str).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = ["SampleRow", "SAMPLE_COLUMNS"]

SAMPLE_COLUMNS: tuple[str, ...] = ("entry", "index", "seed", "grammar_digest", "text")


class SampleRow(BaseModel):
    """
    One generated message.

    Attributes:
        entry (str): Rule the message was generated from.
        index (int): Zero-based position within the run.
        seed (int | None): Seed of the run's random source, if one was fixed.
        grammar_digest (str): `bnfuzzer.core.hashing.grammar_digest` of the grammar.
        text (str): The generated message.

    Raises:
        pydantic.ValidationError: If index is negative, entry is empty, or the
            digest is not a 64-character hex string.

    Examples:
        >>> SampleRow(entry="digit", index=0, seed=1, grammar_digest="0" * 64, text="7").text
        '7'
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    entry: str = Field(..., min_length=1)
    index: int = Field(..., ge=0)
    seed: int | None = None
    grammar_digest: str
    text: str

    @field_validator("grammar_digest")
    @classmethod
    def _check_digest(cls, v: str) -> str:
        if len(v) != 64 or any(c not in "0123456789abcdef" for c in v):
            raise ValueError(f"grammar_digest must be a lowercase sha256 hex digest (got: {v!r})")
        return v
