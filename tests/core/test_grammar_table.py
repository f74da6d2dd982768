import random

import pytest

from bnfuzzer.core.errors import RedefinitionError, UndefinedRuleError
from bnfuzzer.core.expr import Alternation, String
from bnfuzzer.core.generate import generate
from bnfuzzer.core.grammar import Grammar
from bnfuzzer.core.parser import parse_rule


def _grammar(*lines: str) -> Grammar:
    g = Grammar()
    for row, line in enumerate(lines):
        parsed = parse_rule(line, "g.bnf", row)
        assert parsed is not None
        g.add(*parsed)
    return g


def test_define_and_lookup() -> None:
    g = _grammar('x ::= "a"', "y ::= <x>")
    assert "x" in g and "y" in g
    assert len(g) == 2
    assert g.lookup("missing") is None
    assert g.names() == ["x", "y"]


def test_redefinition_cites_both_locations_and_keeps_original() -> None:
    g = _grammar('x ::= "a"')
    rule, incremental = parse_rule('x ::= "b"', "g.bnf", 1)
    with pytest.raises(RedefinitionError) as exc:
        g.add(rule, incremental)
    err = exc.value
    assert err.loc.row == 1
    assert [n.loc.row for n in err.notes] == [0]
    assert "g.bnf:2:1" in str(err) and "g.bnf:1:1" in str(err)
    body = g.lookup("x").body
    assert isinstance(body, String) and body.text == "a"


def test_extend_requires_existing_rule() -> None:
    g = Grammar()
    rule, _ = parse_rule('x =/ "a"')
    with pytest.raises(UndefinedRuleError):
        g.extend(rule.head, rule.body)
    assert "x" not in g


def test_extend_promotes_single_body_to_alternation() -> None:
    g = _grammar('x ::= "a"', 'x =/ "b"')
    body = g.lookup("x").body
    assert isinstance(body, Alternation)
    assert [v.text for v in body.variants] == ["a", "b"]


def test_incremental_alternatives_match_inline_alternation() -> None:
    extended = _grammar('ruleset = "1" | "2"', 'ruleset =/ "3"')
    inline = _grammar('ruleset = "1" | "2" | "3"')
    assert extended.lookup("ruleset").render() == inline.lookup("ruleset").render()

    rng = random.Random(0)
    seen = {generate(extended, "ruleset", rng) for _ in range(200)}
    assert seen == {"1", "2", "3"}


def test_extend_flattens_incoming_alternation() -> None:
    g = _grammar('x = "a"', 'x =/ "b" / "c"')
    body = g.lookup("x").body
    assert isinstance(body, Alternation)
    assert [v.text for v in body.variants] == ["a", "b", "c"]


def test_names_sorted() -> None:
    g = _grammar('b ::= "1"', 'a ::= "2"', 'c ::= "3"')
    assert g.names(sort=True) == ["a", "b", "c"]
    assert [r.name for r in g] == ["b", "a", "c"]
