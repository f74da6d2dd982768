"""
Rule table for parsed grammars.

Responsibilities
- Store rules by name, keeping definition order for listing and reporting.
- Reject a second `::=`/`=` definition of a name, citing both locations.
- Merge `=/` incremental alternatives into an existing rule.

Notes
- Rules are never removed. `extend` replaces a rule's body with a new Alternation;
  the expression trees themselves stay immutable.
- An incoming Alternation is flattened into the existing variants, so
  `r = a | b` followed by `r =/ c | d` reads the same as `r = a | b | c | d`.

Examples
--------
>>> from bnfuzzer.core.grammar import Grammar
>>> from bnfuzzer.core.parser import parse_rule
>>> g = Grammar()
>>> _ = g.add(*parse_rule('digit ::= "0" | "1"'))
>>> _ = g.add(*parse_rule('digit =/ "2"'))
>>> g.lookup("digit").render()
'digit ::= "0" | "1" | "2"'
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .errors import Diagnostic, RedefinitionError, UndefinedRuleError
from .expr import Alternation, Expr, Rule, Token

__all__ = ["Grammar"]

LOG = logging.getLogger(__name__)


class Grammar:
    """Mapping from rule name to Rule with definition/extension semantics."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def define(self, head: Token, body: Expr) -> Rule:
        """
        Add a new rule.

        Raises:
            RedefinitionError: If `head.text` is already defined. The table is left
                unchanged and the error carries a note at the original definition.
        """
        name = head.text
        existing = self._rules.get(name)
        if existing is not None:
            raise RedefinitionError(
                head.loc,
                f"Redefinition of the rule <{name}>",
                notes=(Diagnostic(existing.head.loc, "The original definition is located here", "NOTE"),),
            )
        rule = Rule(head=head, body=body)
        self._rules[name] = rule
        LOG.debug("defined rule %s at %s", name, head.loc)
        return rule

    def extend(self, head: Token, body: Expr) -> Rule:
        """
        Append `body` as additional alternative(s) of an existing rule.

        Raises:
            UndefinedRuleError: If `head.text` has no definition yet.
        """
        name = head.text
        rule = self._rules.get(name)
        if rule is None:
            raise UndefinedRuleError(
                head.loc,
                f"Incremental alternative for the rule <{name}> that is not defined yet",
            )

        incoming = body.variants if isinstance(body, Alternation) else (body,)
        if isinstance(rule.body, Alternation):
            rule.body = Alternation(rule.body.loc, rule.body.variants + incoming)
        else:
            rule.body = Alternation(rule.body.loc, (rule.body, *incoming))
        LOG.debug("extended rule %s with %d variant(s) at %s", name, len(incoming), head.loc)
        return rule

    def add(self, rule: Rule, incremental: bool = False) -> Rule:
        """Dispatch a parsed rule to `extend` (for `=/`) or `define`."""
        if incremental:
            return self.extend(rule.head, rule.body)
        return self.define(rule.head, rule.body)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Rule | None:
        return self._rules.get(name)

    def names(self, *, sort: bool = False) -> list[str]:
        """Rule names in definition order, or alphabetically when `sort` is set."""
        return sorted(self._rules) if sort else list(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)
