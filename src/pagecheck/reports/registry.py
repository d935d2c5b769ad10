"""Reporter lookup by registered name, report format or import path.

Built-in reporters are registered once by :mod:`pagecheck.reports` and survive
:func:`clear_reporter_registry`. File reporters are additionally reachable by
their format name, so ``--reporter html`` and ``--format html`` build the same
reporter.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from pagecheck.reports.files import DEFAULT_OUTPUT_DIR, DEFAULT_REPORT_NAME, FileReporter


if TYPE_CHECKING:
    from pagecheck.reports.base import Reporter
    from pagecheck.results.models import RunReport


T = TypeVar("T", bound="Reporter")

_user: dict[str, type[Reporter]] = {}
_builtin: dict[str, type[Reporter]] = {}
_by_format: dict[str, type[FileReporter]] = {}


def reporter(
    cls: type[T] | None = None,
    *,
    enabled: bool = True,
    name: str | None = None,
) -> type[T] | Any:
    """Make a reporter class available to ``--reporter`` under ``name``.

        @reporter(name="slack")
        class SlackReporter: ...

    Without ``name`` the class name is used. ``enabled=False`` leaves the
    class unregistered.
    """

    def register(cls: type[T]) -> type[T]:
        if enabled:
            _user[name or cls.__name__] = cls
        return cls

    return register(cls) if cls is not None else register


def register_builtin(cls: type[T]) -> type[T]:
    """Register a shipped reporter. File reporters also get their format name."""
    _builtin[cls.__name__] = cls
    fmt = getattr(cls, "format", "")
    if fmt and isinstance(cls, type) and issubclass(cls, FileReporter):
        _builtin[fmt] = cls
        _by_format[fmt] = cls
    return cls


def get_reporter_registry() -> dict[str, type[Reporter]]:
    """Every name ``--reporter`` accepts, user registrations winning."""
    return {**_builtin, **_user}


def clear_reporter_registry() -> None:
    """Forget user registrations; built-ins stay."""
    _user.clear()


def report_formats() -> list[str]:
    return list(_by_format)


def lookup_reporter(name: str) -> type[Reporter]:
    """Find the class for ``name``: a registered name, a format, or an import path.

    Import paths are ``package.module:ClassName`` or ``package.module.ClassName``.

    Raises:
        ValueError: nothing by that name can be found.
        TypeError: the import path names something that is not a reporter.
    """
    registry = get_reporter_registry()
    if name in registry:
        return registry[name]
    if ":" not in name and "." not in name:
        available = ", ".join(sorted(registry))
        msg = f"Unknown reporter: {name}. Available: {available}"
        raise ValueError(msg)
    return _import_reporter_class(name)


def _import_reporter_class(import_path: str) -> type[Reporter]:
    sep = ":" if ":" in import_path else "."
    module_path, _, class_name = import_path.rpartition(sep)
    try:
        cls = getattr(importlib.import_module(module_path), class_name)
    except (ImportError, AttributeError) as exc:
        msg = f"Unknown reporter: {import_path}"
        raise ValueError(msg) from exc

    from pagecheck.reports.base import Reporter

    if not isinstance(cls, type) or not issubclass(cls, Reporter):
        msg = f"{import_path} is not a Reporter subclass"
        raise TypeError(msg)
    return cls


def resolve_reporter(name: str, **kwargs: Any) -> Reporter:
    """Instantiate the reporter ``name`` refers to with ``kwargs``."""
    return lookup_reporter(name)(**kwargs)


def resolve_reporters(
    names: Iterable[str],
    options: dict[str, dict[str, Any]] | None = None,
    file_defaults: dict[str, Any] | None = None,
) -> list[Reporter]:
    """Instantiate several reporters.

    ``options`` holds constructor kwargs per name. ``file_defaults`` is applied
    first to every file reporter, so the configured output directory and report
    name hold unless a reporter's own options override them.
    """
    options = options or {}
    reporters = []
    for name in names:
        cls = lookup_reporter(name)
        kwargs = dict(file_defaults or {}) if issubclass(cls, FileReporter) else {}
        kwargs.update(options.get(name, {}))
        reporters.append(cls(**kwargs))
    return reporters


def file_reporters_for(
    formats: Sequence[str],
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    report_name: str = DEFAULT_REPORT_NAME,
) -> list[FileReporter]:
    """One file reporter per distinct format name."""
    reporters = []
    for fmt in dict.fromkeys(formats):
        if fmt not in _by_format:
            msg = f"Unknown report format: {fmt}. Available: {', '.join(_by_format)}"
            raise ValueError(msg)
        reporters.append(_by_format[fmt](output_dir=output_dir, report_name=report_name))
    return reporters


def write_reports(
    report: RunReport,
    formats: Sequence[str],
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    report_name: str = DEFAULT_REPORT_NAME,
) -> list[Path]:
    return [r.write(report) for r in file_reporters_for(formats, output_dir, report_name)]


__all__ = [
    "clear_reporter_registry",
    "file_reporters_for",
    "get_reporter_registry",
    "lookup_reporter",
    "register_builtin",
    "report_formats",
    "reporter",
    "resolve_reporter",
    "resolve_reporters",
    "write_reports",
]
