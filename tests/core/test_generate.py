import random

import pytest

from bnfuzzer.core.errors import BoundsError, UndefinedSymbolError
from bnfuzzer.core.expr import Loc, Range, Repetition, String
from bnfuzzer.core.generate import expand, generate
from bnfuzzer.core.grammar import Grammar
from bnfuzzer.core.parser import parse_rule

LOC = Loc("<test>", 0, 0)


def _grammar(*lines: str) -> Grammar:
    g = Grammar()
    for row, line in enumerate(lines):
        g.add(*parse_rule(line, "g.bnf", row))
    return g


def test_digit_alternatives() -> None:
    g = _grammar('digit ::= "0" | "1" | "2"')
    rng = random.Random(1)
    outputs = {generate(g, "digit", rng) for _ in range(300)}
    assert outputs == {"0", "1", "2"}


def test_octal_value_range() -> None:
    g = _grammar("OCTAL ::= %x30-37")
    rng = random.Random(2)
    for _ in range(300):
        out = generate(g, "OCTAL", rng)
        assert len(out) == 1 and "0" <= out <= "7"


def test_repetition_counts_stay_within_bounds() -> None:
    g = Grammar()
    rng = random.Random(3)
    rep = Repetition(LOC, String(LOC, "x"), 2, 5)
    counts = {len(expand(g, rep, rng)) for _ in range(300)}
    assert counts == {2, 3, 4, 5}


def test_range_characters_stay_within_bounds() -> None:
    rng = random.Random(4)
    chars = {expand(Grammar(), Range(LOC, "a", "e"), rng) for _ in range(300)}
    assert chars == set("abcde")


def test_inverted_bounds_always_error() -> None:
    rng = random.Random(5)
    with pytest.raises(BoundsError):
        expand(Grammar(), Repetition(LOC, String(LOC, "x"), 3, 1), rng)
    with pytest.raises(BoundsError):
        expand(Grammar(), Range(LOC, "z", "a"), rng)

    g = _grammar('r ::= "a" 5*2 "b"')
    with pytest.raises(BoundsError) as exc:
        generate(g, "r", rng)
    assert exc.value.loc.col == 10


def test_undefined_symbol_during_generation() -> None:
    g = _grammar('a ::= "x" <nope>')
    with pytest.raises(UndefinedSymbolError) as exc:
        generate(g, "a", random.Random(0))
    assert exc.value.message == "Symbol <nope> is not defined"
    assert exc.value.loc.col == 10

    with pytest.raises(UndefinedSymbolError):
        generate(g, "missing-entry", random.Random(0))


def test_concatenation_and_symbols() -> None:
    g = _grammar(
        "greeting ::= <hello> \" \" <name> '!'",
        'hello ::= "hi"',
        'name ::= "bob" | "ann"',
    )
    rng = random.Random(6)
    for _ in range(50):
        assert generate(g, "greeting", rng) in {"hi bob!", "hi ann!"}


def test_fixed_seed_is_reproducible() -> None:
    g = _grammar('word ::= 1*8 ("a" ... "z")')
    first = [generate(g, "word", random.Random(42)) for _ in range(3)]
    rng_a, rng_b = random.Random(42), random.Random(42)
    assert [generate(g, "word", rng_a) for _ in range(10)] == [
        generate(g, "word", rng_b) for _ in range(10)
    ]
    assert len(set(first)) == 1


def test_empty_repetition_and_exact_count() -> None:
    g = _grammar('none ::= 0 "x"', 'three ::= 3 "ab"')
    rng = random.Random(7)
    assert generate(g, "none", rng) == ""
    assert generate(g, "three", rng) == "ababab"
