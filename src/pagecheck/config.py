"""Project configuration loaded from ``[tool.pagecheck]`` in pyproject.toml.

Environment variables (optionally from a ``.env`` file) override the file:

- ``PAGECHECK_BASE_URL``
- ``PAGECHECK_HEADLESS`` (``0``/``false`` to show the browser, empty means unset)
- ``PAGECHECK_OUTPUT_DIR``
"""

from __future__ import annotations

import logging
import os
import shlex
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from pagecheck.errors import ConfigError


logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"
REPORT_FORMATS = ("json", "markdown", "html")


@dataclass
class PagecheckConfig:
    """Resolved settings for a pagecheck run."""

    base_url: str = "http://localhost:3000"
    check_paths: list[str] = field(default_factory=lambda: ["."])
    browsers: list[str] = field(default_factory=lambda: ["chromium"])
    viewports: list[str] = field(default_factory=lambda: ["desktop"])
    headless: bool = True
    timeout_ms: int = 10_000
    settle_ms: int = 1_000
    output_dir: str = "test-results"
    report_name: str = "pagecheck-report"
    report_title: str = "Page Check Report"
    report_formats: list[str] = field(default_factory=lambda: ["json"])
    screenshots: bool = False
    capture_console: bool = False
    include_tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    keyword: str | None = None
    verbosity: int = 0
    addopts: list[str] = field(default_factory=list)
    reporters: list[str] = field(default_factory=list)
    reporter_options: dict[str, dict[str, Any]] = field(default_factory=dict)


DEFAULT_CONFIG = PagecheckConfig()

_LIST_FIELDS = {
    "check_paths",
    "browsers",
    "viewports",
    "report_formats",
    "include_tags",
    "exclude_tags",
    "reporters",
}


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` looking for a pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / PYPROJECT
        if candidate.is_file():
            return candidate
    return None


def _read_tool_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    table = data.get("tool", {}).get("pagecheck", {})
    if not isinstance(table, dict):
        msg = f"[tool.pagecheck] in {path} must be a table"
        raise ConfigError(msg)
    return table


def _coerce(name: str, value: Any) -> Any:
    if name == "addopts" and isinstance(value, str):
        return shlex.split(value)
    if name in _LIST_FIELDS and isinstance(value, str):
        return [value]
    if name == "report_formats":
        unknown = [v for v in value if v not in REPORT_FORMATS]
        if unknown:
            msg = f"Unknown report format(s): {', '.join(unknown)}"
            raise ConfigError(msg)
    return value


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in {"0", "false", "no", "off"}


def _apply_env(config: PagecheckConfig) -> PagecheckConfig:
    updates: dict[str, Any] = {}
    if base_url := os.environ.get("PAGECHECK_BASE_URL"):
        updates["base_url"] = base_url
    # an empty value counts as unset
    if (headless := os.environ.get("PAGECHECK_HEADLESS", "")).strip():
        updates["headless"] = _env_flag(headless)
    if output_dir := os.environ.get("PAGECHECK_OUTPUT_DIR"):
        updates["output_dir"] = output_dir
    return replace(config, **updates) if updates else config


def load_config(start: Path | None = None) -> PagecheckConfig:
    """Load configuration from pyproject.toml and the environment."""
    load_dotenv(find_dotenv(usecwd=True))
    pyproject = find_pyproject(start)
    if pyproject is None:
        return _apply_env(PagecheckConfig())

    table = _read_tool_table(pyproject)
    known = {f.name for f in fields(PagecheckConfig)}
    values: dict[str, Any] = {}
    for key, value in table.items():
        name = key.replace("-", "_")
        if name not in known:
            logger.warning("Ignoring unknown [tool.pagecheck] key: %s", key)
            continue
        values[name] = _coerce(name, value)

    logger.debug("Loaded pagecheck config from %s", pyproject)
    return _apply_env(PagecheckConfig(**values))


__all__ = ["DEFAULT_CONFIG", "REPORT_FORMATS", "PagecheckConfig", "find_pyproject", "load_config"]
