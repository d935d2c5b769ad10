"""Scenario registry, discovery and the sequential runner."""

from .context import CheckContext, current_context, expect
from .discovery import collect
from .runner import Runner, ScenarioOutcome
from .scenario import (
    Requirement,
    Scenario,
    clear_registry,
    get_requirement_registry,
    get_scenario_registry,
    requirement,
    scenario,
)
from .selection import KeywordExpression, select_scenarios
from .tags import tag


__all__ = [
    "CheckContext",
    "KeywordExpression",
    "Requirement",
    "Runner",
    "Scenario",
    "ScenarioOutcome",
    "clear_registry",
    "collect",
    "current_context",
    "expect",
    "get_requirement_registry",
    "get_scenario_registry",
    "requirement",
    "scenario",
    "select_scenarios",
    "tag",
]
