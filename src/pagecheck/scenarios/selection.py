"""Scenario selection by tags and ``-k`` keyword expressions.

A keyword expression combines case-insensitive substrings with ``and``, ``or``,
``not`` and parentheses, e.g. ``(carousel or video) and not slow``. A substring
matches a scenario when it occurs in the scenario id, its requirement id or its
title.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import NoReturn

from pagecheck.scenarios.scenario import Scenario


_TOKEN = re.compile(r"\(|\)|[^\s()]+")
_OPERATORS = {"and", "or", "not"}

Predicate = Callable[[str], bool]


class KeywordExpression:
    """A parsed ``-k`` expression.

    Raises:
        ValueError: the expression is empty, unbalanced or ends mid-operator.
    """

    def __init__(self, expression: str) -> None:
        self.expression = expression
        self._tokens = _TOKEN.findall(expression)
        self._pos = 0
        self._predicate = self._expression()
        if self._pos < len(self._tokens):
            self._fail(f"unexpected {self._tokens[self._pos]!r}")

    def matches(self, text: str) -> bool:
        return self._predicate(text.lower())

    def matches_scenario(self, scn: Scenario) -> bool:
        return self.matches("\n".join((scn.id, scn.requirement_id, scn.title)))

    def _fail(self, problem: str) -> NoReturn:
        msg = f"Invalid keyword expression {self.expression!r}: {problem}"
        raise ValueError(msg)

    def _next_is(self, token: str) -> bool:
        return self._pos < len(self._tokens) and self._tokens[self._pos].lower() == token

    def _take(self) -> str:
        if self._pos >= len(self._tokens):
            self._fail("unexpected end")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    # expression := conjunction ("or" conjunction)*
    def _expression(self) -> Predicate:
        parts = [self._conjunction()]
        while self._next_is("or"):
            self._take()
            parts.append(self._conjunction())
        if len(parts) == 1:
            return parts[0]
        return lambda text: any(part(text) for part in parts)

    # conjunction := negation ("and" negation)*
    def _conjunction(self) -> Predicate:
        parts = [self._negation()]
        while self._next_is("and"):
            self._take()
            parts.append(self._negation())
        if len(parts) == 1:
            return parts[0]
        return lambda text: all(part(text) for part in parts)

    def _negation(self) -> Predicate:
        if self._next_is("not"):
            self._take()
            inner = self._negation()
            return lambda text: not inner(text)
        return self._atom()

    def _atom(self) -> Predicate:
        token = self._take()
        if token == "(":
            inner = self._expression()
            if not self._next_is(")"):
                self._fail("missing ')'")
            self._take()
            return inner
        if token == ")" or token.lower() in _OPERATORS:
            self._fail(f"unexpected {token!r}")
        needle = token.lower()
        return lambda text: needle in text


def select_scenarios(
    scenarios: Sequence[Scenario],
    include_tags: Sequence[str] = (),
    exclude_tags: Sequence[str] = (),
    keyword: str | None = None,
) -> list[Scenario]:
    """Scenarios carrying any ``include_tags``, none of ``exclude_tags``, matching ``keyword``.

    The keyword is parsed before anything is filtered, so a bad expression
    raises ``ValueError`` even when no scenarios were collected.
    """
    expression = KeywordExpression(keyword) if keyword else None
    include, exclude = set(include_tags), set(exclude_tags)
    return [
        scn
        for scn in scenarios
        if (not include or scn.tags & include)
        and not scn.tags & exclude
        and (expression is None or expression.matches_scenario(scn))
    ]


__all__ = ["KeywordExpression", "select_scenarios"]
