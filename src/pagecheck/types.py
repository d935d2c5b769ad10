"""Shared types for pagecheck."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pagecheck.errors import ConfigError, ViewportError


class BrowserName(Enum):
    """Browser engines Playwright can launch."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


@dataclass(frozen=True, slots=True)
class Viewport:
    """Named page size the runner resizes to before each pass."""

    name: str
    width: int
    height: int

    @property
    def size(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}

    @property
    def label(self) -> str:
        return f"{self.name} ({self.width}x{self.height})"


VIEWPORTS: dict[str, Viewport] = {
    v.name: v
    for v in (
        Viewport("mobile-small", 320, 568),  # iPhone SE
        Viewport("mobile", 375, 667),  # iPhone 8
        Viewport("mobile-large", 414, 896),  # iPhone 11
        Viewport("tablet", 768, 1024),  # iPad
        Viewport("tablet-large", 1024, 1366),  # iPad Pro
        Viewport("desktop", 1200, 800),
        Viewport("desktop-large", 1920, 1080),
    )
}

DEFAULT_VIEWPORT = VIEWPORTS["desktop"]

_SIZE_RE = re.compile(r"^(\d+)x(\d+)$")


def resolve_viewport(spec: str) -> Viewport:
    """Resolve a preset name or a ``WIDTHxHEIGHT`` string."""
    spec = spec.strip().lower()
    if spec in VIEWPORTS:
        return VIEWPORTS[spec]

    match = _SIZE_RE.match(spec)
    if match:
        width, height = int(match.group(1)), int(match.group(2))
        if width > 0 and height > 0:
            return Viewport(spec, width, height)

    available = ", ".join(VIEWPORTS)
    msg = f"Unknown viewport: {spec!r}. Use WIDTHxHEIGHT or one of: {available}"
    raise ViewportError(msg)


def resolve_browser(name: str) -> BrowserName:
    try:
        return BrowserName(name.strip().lower())
    except ValueError:
        available = ", ".join(b.value for b in BrowserName)
        msg = f"Unknown browser: {name!r}. Available: {available}"
        raise ConfigError(msg) from None
