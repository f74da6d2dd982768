"""
Canonical JSON serialization and grammar fingerprinting.

A grammar's digest is the SHA-256 of the canonical JSON of its rendered rules
(name -> dialect text). Locations and comment/whitespace layout do not affect
it, so two files that define the same rules hash the same.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
    - Hashing is performed over the UTF-8 encoded canonical JSON string.
    - Sample rows carry the digest so a corpus can be traced back to its grammar.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from .grammar import Grammar

__all__ = [
    "json_dumps_canonical",
    "grammar_digest",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sort_keys=True, compact separators,
        and ensure_ascii=False.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _sha256_hexdigest(s: str) -> str:
    h = hashlib.sha256()
    h.update(s.encode("utf-8"))
    return h.hexdigest()


def grammar_digest(grammar: Grammar) -> str:
    """
    Compute a stable fingerprint of a grammar.

    Returns:
        str: SHA-256 hex digest over the canonical JSON of {name: rendered rule}.

    Examples:
        >>> from bnfuzzer.core.grammar import Grammar
        >>> grammar_digest(Grammar()) == grammar_digest(Grammar())
        True
    """
    return _sha256_hexdigest(json_dumps_canonical({rule.name: rule.render() for rule in grammar}))
