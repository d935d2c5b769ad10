"""Tagging utilities for check predicates."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TagData:
    """Tag metadata attached to predicates."""

    tags: set[str] = field(default_factory=set)
    skip_reason: str | None = None


def _ensure_tag_data(target: Any) -> TagData:
    data: TagData | None = getattr(target, "__pagecheck_tag_data__", None)
    if data is None:
        data = TagData()
        target.__pagecheck_tag_data__ = data
    return data


def get_tag_data(target: Any) -> TagData:
    """Return a copy of tag metadata for the target."""
    data: TagData | None = getattr(target, "__pagecheck_tag_data__", None)
    if data is None:
        return TagData()
    return TagData(tags=set(data.tags), skip_reason=data.skip_reason)


class TagDecorator:
    """Primary entry-point for tagging checks."""

    def __call__(self, *names: str) -> Callable[[Any], Any]:
        def decorator(target: Any) -> Any:
            data = _ensure_tag_data(target)
            for name in names:
                if not name:
                    continue
                data.tags.add(str(name))
            return target

        return decorator

    def skip(self, *, reason: str | None = None) -> Callable[[Any], Any]:
        def decorator(target: Any) -> Any:
            data = _ensure_tag_data(target)
            data.skip_reason = reason or "skipped via tag"
            data.tags.add("skip")
            return target

        return decorator


tag = TagDecorator()

__all__ = ["TagData", "get_tag_data", "tag"]
