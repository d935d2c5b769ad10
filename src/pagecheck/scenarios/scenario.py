"""Scenario and requirement definitions.

This module provides:

- A :class:`Scenario` describing one named check: the requirement it covers,
  its title and category, where to navigate, and the predicate to run.
- The :func:`scenario` decorator that registers a predicate.
- The :func:`requirement` function that declares a requirement so it shows up
  in coverage even when no check covers it yet.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pagecheck.results.models import RequirementCoverage
from pagecheck.scenarios.tags import get_tag_data

if TYPE_CHECKING:
    from pagecheck.scenarios.context import CheckContext


CheckFn = Callable[["CheckContext"], Awaitable[bool | None] | bool | None]


@dataclass
class Scenario:
    """A registered check predicate plus the metadata needed to run and report it."""

    requirement_id: str
    title: str
    fn: CheckFn
    category: str = "General"
    path: str = "/"
    viewports: tuple[str, ...] | None = None
    settle_ms: int | None = None
    steps: tuple[str, ...] = ()
    expected: tuple[str, ...] = ()
    name: str | None = None

    @property
    def module(self) -> str:
        return getattr(self.fn, "__module__", "") or ""

    @property
    def id(self) -> str:
        return f"{self.module}::{self.name or self.fn.__name__}"

    @property
    def tags(self) -> set[str]:
        return get_tag_data(self.fn).tags

    @property
    def skip_reason(self) -> str | None:
        return get_tag_data(self.fn).skip_reason

    @property
    def description(self) -> str:
        return inspect.getdoc(self.fn) or ""

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.fn)

    def runs_on(self, viewport_name: str) -> bool:
        return self.viewports is None or viewport_name in self.viewports


@dataclass
class Requirement:
    """A named expectation about UI behavior."""

    id: str
    title: str
    description: str = ""
    category: str | None = None
    scenarios: list[Scenario] = field(default_factory=list, repr=False)

    def to_coverage(self) -> RequirementCoverage:
        category = self.category
        if category is None and self.scenarios:
            category = self.scenarios[0].category
        return RequirementCoverage(
            id=self.id,
            title=self.title,
            description=self.description,
            category=category or "General",
        )


_scenario_registry: dict[str, Scenario] = {}
_requirement_registry: dict[str, Requirement] = {}
_generation = 0


def get_scenario_registry() -> dict[str, Scenario]:
    """Get the global scenario registry keyed by scenario id."""
    return _scenario_registry


def get_requirement_registry() -> dict[str, Requirement]:
    """Get the global requirement registry keyed by requirement id."""
    return _requirement_registry


def clear_registry() -> None:
    """Forget all registered scenarios and requirements."""
    global _generation
    _scenario_registry.clear()
    _requirement_registry.clear()
    _generation += 1


def registry_generation() -> int:
    """Incremented by every :func:`clear_registry`."""
    return _generation


def requirement(
    id: str,
    title: str,
    description: str = "",
    category: str | None = None,
) -> Requirement:
    """Declare (or update) a requirement.

    Declaring a requirement that scenarios already reference keeps the
    scenarios and replaces the title, description and category.
    """
    existing = _requirement_registry.get(id)
    if existing is not None:
        existing.title = title
        existing.description = description or existing.description
        existing.category = category or existing.category
        return existing

    req = Requirement(id=id, title=title, description=description, category=category)
    _requirement_registry[id] = req
    return req


def _attach(scn: Scenario) -> None:
    req = _requirement_registry.get(scn.requirement_id)
    if req is None:
        req = Requirement(id=scn.requirement_id, title=scn.title, category=scn.category)
        _requirement_registry[req.id] = req
    req.scenarios = [s for s in req.scenarios if s.id != scn.id]
    req.scenarios.append(scn)


def scenario(
    requirement_id: str,
    title: str,
    *,
    category: str = "General",
    path: str = "/",
    viewports: Sequence[str] | None = None,
    settle_ms: int | None = None,
    steps: Sequence[str] = (),
    expected: Sequence[str] = (),
    name: str | None = None,
) -> Callable[[CheckFn], CheckFn]:
    """Register a check predicate.

    The predicate receives a :class:`~pagecheck.scenarios.context.CheckContext`
    after the runner has navigated to ``path`` and waited ``settle_ms``.

    Parameters
    ----------
    requirement_id:
        Requirement the check covers (e.g. ``"REQ-002"``).
    title:
        Human-readable name used for the result record.
    category:
        Report grouping.
    path:
        Path joined with the base URL before the check runs.
    viewports:
        Viewport names to restrict the check to. ``None`` runs on all.
    settle_ms:
        Fixed wait after navigation, overriding the configured default.
    steps, expected:
        Manual-testing instructions for the generated checklist.
    name:
        Override for the scenario id suffix (defaults to the function name).
    """

    def decorator(fn: CheckFn) -> CheckFn:
        if not callable(fn):
            msg = f"@scenario target must be callable, got {type(fn).__name__}"
            raise TypeError(msg)
        scn = Scenario(
            requirement_id=requirement_id,
            title=title,
            fn=fn,
            category=category,
            path=path,
            viewports=tuple(viewports) if viewports is not None else None,
            settle_ms=settle_ms,
            steps=tuple(steps),
            expected=tuple(expected),
            name=name,
        )
        _scenario_registry[scn.id] = scn
        _attach(scn)
        fn.__pagecheck_scenario__ = scn  # type: ignore[attr-defined]
        return fn

    return decorator


def get_scenario(fn: Any) -> Scenario | None:
    """Return the scenario registered for a predicate, if any."""
    return getattr(fn, "__pagecheck_scenario__", None)


__all__ = [
    "CheckFn",
    "Requirement",
    "Scenario",
    "clear_registry",
    "get_requirement_registry",
    "get_scenario",
    "get_scenario_registry",
    "registry_generation",
    "requirement",
    "scenario",
]
