import pytest
from pydantic import ValidationError

from bnfuzzer.core.grammar import Grammar
from bnfuzzer.core.hashing import grammar_digest, json_dumps_canonical
from bnfuzzer.core.parser import parse_rule
from bnfuzzer.core.schema import SampleRow


def _grammar(*lines: str) -> Grammar:
    g = Grammar()
    for row, line in enumerate(lines):
        g.add(*parse_rule(line, "g.bnf", row))
    return g


def test_json_dumps_canonical_sorted_and_ascii_policy() -> None:
    s1 = json_dumps_canonical({"b": 2, "a": 1, "emoji": "🙂"})
    s2 = json_dumps_canonical({"emoji": "🙂", "a": 1, "b": 2})
    assert s1 == s2
    assert "🙂" in s1


def test_grammar_digest_ignores_layout() -> None:
    a = _grammar('x ::= "a" | "b"', "y = <x>")
    b = _grammar("y   ::=   <x>   // comment", "x = 'a' / 'b'")
    assert grammar_digest(a) == grammar_digest(b)
    assert len(grammar_digest(a)) == 64


def test_grammar_digest_changes_with_rules() -> None:
    a = _grammar('x ::= "a"')
    b = _grammar('x ::= "b"')
    assert grammar_digest(a) != grammar_digest(b)


def test_sample_row_validation() -> None:
    row = SampleRow(entry="x", index=0, seed=None, grammar_digest="a" * 64, text="")
    assert row.seed is None
    with pytest.raises(ValidationError):
        SampleRow(entry="x", index=-1, grammar_digest="a" * 64, text="t")
    with pytest.raises(ValidationError):
        SampleRow(entry="", index=0, grammar_digest="a" * 64, text="t")
    with pytest.raises(ValidationError):
        SampleRow(entry="x", index=0, grammar_digest="not-a-digest", text="t")
    with pytest.raises(ValidationError):
        SampleRow(entry="x", index=0, grammar_digest="a" * 64, text="t", extra=1)
