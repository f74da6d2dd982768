"""
Configuration for generation runs.

Defines GenSettings, a frozen dataclass carrying the runtime knobs of the CLI.
Defaults come from bnfuzzer.core.constants. Explicit CLI flags are applied on top
by the caller with dataclasses.replace.

Precedence
- environment (BNFUZZER_*) > TOML (bnfuzzer.toml or [tool.bnfuzzer] in
  pyproject.toml) > defaults.

Notes
- Invalid values raise IoConfigError instead of being ignored, so a typo in
  BNFUZZER_SEED never silently yields unseeded output.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal, get_args

from bnfuzzer.core.constants import DEFAULT_MAX_REPETITION

from .errors import IoConfigError

OutFormat = Literal["auto", "text", "jsonl", "csv", "parquet"]

_OUT_FORMATS: frozenset[str] = frozenset(get_args(OutFormat))


@dataclass(frozen=True)
class GenSettings:
    """
    Runtime settings for grammar loading and generation.

    Attributes:
        count (int): Messages generated per run; zero or less generates nothing.
        seed (int | None): Seed for the run's random source; None draws from OS entropy.
        max_repetition (int): Cap for `{ ... }` and open-ended `*` repetitions (>= 0).
        out_format (OutFormat): Sample file format; "auto" picks by file suffix.

    Examples:
        >>> GenSettings(count=3).count
        3
    """

    count: int = 1
    seed: int | None = None
    max_repetition: int = DEFAULT_MAX_REPETITION
    out_format: OutFormat = "auto"

    def __post_init__(self) -> None:
        if self.max_repetition < 0:
            raise IoConfigError(f"max_repetition must be >= 0 (got: {self.max_repetition})")
        if self.out_format not in _OUT_FORMATS:
            raise IoConfigError(
                f"out_format must be one of {sorted(_OUT_FORMATS)} (got: {self.out_format!r})"
            )

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: GenSettings, cfg: dict[str, Any] | None) -> GenSettings:
        """Apply a loose config mapping onto GenSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        def _int(key: str, v: Any) -> int:
            if isinstance(v, bool):
                raise IoConfigError(f"{key} must be an integer (got: {v!r})")
            try:
                return int(v)
            except (TypeError, ValueError) as exc:
                raise IoConfigError(f"{key} must be an integer (got: {v!r})") from exc

        s = base
        if "count" in cfg:
            s = replace(s, count=_int("count", cfg["count"]))
        if "seed" in cfg:
            s = replace(s, seed=None if cfg["seed"] is None else _int("seed", cfg["seed"]))
        if "max_repetition" in cfg:
            s = replace(s, max_repetition=_int("max_repetition", cfg["max_repetition"]))
        if "out_format" in cfg:
            s = replace(s, out_format=str(cfg["out_format"]).strip().lower())  # type: ignore[arg-type]
        return s

    @classmethod
    def from_env(cls, base: GenSettings | None = None, prefix: str = "BNFUZZER_") -> GenSettings:
        """
        Build GenSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - BNFUZZER_COUNT
            - BNFUZZER_SEED
            - BNFUZZER_MAX_REPETITION
            - BNFUZZER_OUT_FORMAT ("auto" | "text" | "jsonl" | "csv" | "parquet")
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for key in ("count", "seed", "max_repetition", "out_format"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> GenSettings:
        """
        Build GenSettings from a TOML file.

        Search order when `path` is None:
            1) ./bnfuzzer.toml (with either a [generate] table or direct keys)
            2) ./pyproject.toml under [tool.bnfuzzer]

        Returns defaults if no file is present.

        Raises:
            IoConfigError: If an explicit `path` is missing, or a found file is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
            if not cand[0].exists():
                raise IoConfigError(f"config file not found: {cand[0]}")
        else:
            cand.append(Path.cwd() / "bnfuzzer.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as exc:
                raise IoConfigError(f"invalid TOML in {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("bnfuzzer") if isinstance(tool, dict) else None
            elif isinstance(data.get("generate"), dict):
                cfg = data["generate"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> GenSettings:
        """
        Load GenSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (bnfuzzer.toml, pyproject.toml).
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
