"""
Custom exceptions for the bnfuzzer.io module.

Purpose
- Provide IO-layer error types, distinct from the located diagnostics raised by
  bnfuzzer.core (see bnfuzzer.core.errors).

Boundaries
- bnfuzzer.core raises DiagnosticError subclasses for grammar text problems.
- bnfuzzer.io raises Io* errors for filesystem and configuration problems:
  - IoConfigError: invalid configuration value.
  - IoReadError: grammar file missing or undecodable.
  - IoWriteError: sample output could not be written.
"""

from __future__ import annotations


class IoError(Exception):
    """Base class for IO-related errors in bnfuzzer.io."""


class IoConfigError(IoError):
    """
    Raised when configuration is invalid.

    Examples:
        - count < 1
        - max_repetition < 0
        - unknown output format
    """


class IoReadError(IoError):
    """Raised when a grammar file cannot be read or decoded as UTF-8."""


class IoWriteError(IoError):
    """Raised when samples cannot be written to the requested path."""
