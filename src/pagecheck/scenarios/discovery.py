"""Discovery of ``check_*.py`` modules and the scenarios they register.

Check files are imported under a dotted name built from their path, relative to
the working directory when they live below it and to the collection root
otherwise. ``site_a/check_home.py`` and ``site_b/check_home.py`` therefore load
as separate modules (``site_a.check_home`` and ``site_b.check_home``) and their
scenarios get distinct ids.
"""

from __future__ import annotations

import importlib.util
import logging
import re
import sys
from pathlib import Path
from types import ModuleType

from pagecheck.scenarios.scenario import Scenario, get_scenario, registry_generation


logger = logging.getLogger(__name__)

CHECK_FILE_PREFIX = "check_"
_SKIP_DIRS = {"node_modules", "__pycache__", "site-packages"}
_NOT_IDENTIFIER = re.compile(r"\W")
_GENERATION_ATTR = "__pagecheck_generation__"


def _module_name(path: Path, root: Path) -> str:
    try:
        relative = path.relative_to(Path.cwd().resolve())
    except ValueError:
        relative = path.relative_to(root)
    return ".".join(_NOT_IDENTIFIER.sub("_", part) for part in relative.with_suffix("").parts)


def _load_module(path: Path, root: Path) -> ModuleType:
    """Import a check file by path.

    An already-imported copy is reused unless the scenario registry was cleared
    since it ran; then the file is executed again so its ``@scenario`` and
    ``requirement()`` calls register afresh.
    """
    module_name = _module_name(path, root)
    existing = sys.modules.get(module_name)
    existing_file = getattr(existing, "__file__", None)
    if (
        existing is not None
        and existing_file
        and Path(existing_file).resolve() == path
        and getattr(existing, _GENERATION_ATTR, None) == registry_generation()
    ):
        return existing

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot import check module from {path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    setattr(module, _GENERATION_ATTR, registry_generation())
    logger.debug("Imported check module %s as %s", path, module_name)
    return module


def _collect_from_module(module: ModuleType) -> list[Scenario]:
    """Return scenarios defined in the module, in definition order."""
    return [
        scn
        for obj in list(vars(module).values())
        if (scn := get_scenario(obj)) is not None and scn.module == module.__name__
    ]


def _is_check_file(path: Path) -> bool:
    return path.name.startswith(CHECK_FILE_PREFIX) and path.suffix == ".py"


def _iter_check_files(root: Path) -> list[Path]:
    files = []
    for file_path in sorted(root.rglob(f"{CHECK_FILE_PREFIX}*.py")):
        relative = file_path.relative_to(root).parts[:-1]
        if any(part.startswith(".") or part in _SKIP_DIRS for part in relative):
            continue
        files.append(file_path)
    return files


def collect(path: Path | str | None = None) -> list[Scenario]:
    """Discover all scenarios registered by ``check_*.py`` files.

    Args:
        path: File or directory to search. Defaults to current directory.

    Returns:
        Scenarios in file order, then definition order.
    """
    if path is None:
        path = Path.cwd()
    elif isinstance(path, str):
        path = Path(path)

    path = path.resolve()
    scenarios: list[Scenario] = []

    if path.is_file():
        if _is_check_file(path):
            scenarios.extend(_collect_from_module(_load_module(path, path.parent)))
    elif path.is_dir():
        for file_path in _iter_check_files(path):
            scenarios.extend(_collect_from_module(_load_module(file_path, path)))
    else:
        logger.warning("Check path does not exist: %s", path)

    return scenarios


__all__ = ["collect"]
