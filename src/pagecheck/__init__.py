"""Pagecheck - scripted UI checklists for live web pages."""

from .browser import BrowserSession, dom
from .results import ResultRecord, RunReport
from .scenarios import (
    CheckContext,
    Runner,
    collect,
    current_context,
    expect,
    requirement,
    scenario,
    tag,
)
from .types import VIEWPORTS, Viewport
from .version import __version__


__all__ = [
    # Declaring checks
    "scenario",
    "requirement",
    "tag",
    "expect",
    "current_context",
    "CheckContext",
    # Running
    "Runner",
    "collect",
    "BrowserSession",
    "dom",
    "Viewport",
    "VIEWPORTS",
    # Results
    "ResultRecord",
    "RunReport",
]
