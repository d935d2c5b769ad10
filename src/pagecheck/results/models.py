"""Result record and report models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


class ResultRecord(BaseModel):
    """Outcome of a single check.

    Attributes:
    ----------
    name : str
        Display name of the check (viewport-prefixed when several viewports run)
    passed : bool
        Whether the check passed
    details : str
        Free-text detail, the error message for failures
    timestamp : str
        ISO-8601 UTC time the record was created
    """

    name: str
    passed: bool
    details: str = ""
    timestamp: str = Field(default_factory=utc_timestamp)

    scenario: str | None = None
    requirement_id: str | None = None
    category: str = "General"
    viewport: str | None = None
    browser: str | None = None
    duration_ms: float = 0.0


class CategoryResult(BaseModel):
    """Records grouped under one category; counts derive from ``details``."""

    details: list[ResultRecord] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def passed(self) -> int:
        return sum(1 for r in self.details if r.passed)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return sum(1 for r in self.details if not r.passed)

    @property
    def total(self) -> int:
        return len(self.details)


class Summary(BaseModel):
    """Run-wide counts."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return self.passed + self.failed

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return round(self.passed / self.total * 100, 1)


class RequirementCoverage(BaseModel):
    """Pass/fail status of one requirement across the checks covering it."""

    id: str
    title: str
    description: str = ""
    category: str = "General"
    check_names: list[str] = Field(default_factory=list)
    failed_checks: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def check_count(self) -> int:
        return len(self.check_names)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> Literal["PASS", "FAIL"]:
        return "PASS" if self.check_names and self.failed_checks == 0 else "FAIL"


class RunEnvironment(BaseModel):
    browsers: list[str] = Field(default_factory=list)
    viewports: list[str] = Field(default_factory=list)


class RunReport(BaseModel):
    """Everything a renderer needs to write a report."""

    title: str = "Page Check Report"
    timestamp: str = Field(default_factory=utc_timestamp)
    base_url: str = ""
    summary: Summary = Field(default_factory=Summary)
    categories: dict[str, CategoryResult] = Field(default_factory=dict)
    requirements: list[RequirementCoverage] = Field(default_factory=list)
    environment: RunEnvironment = Field(default_factory=RunEnvironment)
    duration_ms: float = 0.0

    @property
    def records(self) -> list[ResultRecord]:
        return [r for category in self.categories.values() for r in category.details]

    @property
    def failed_records(self) -> list[ResultRecord]:
        return [r for r in self.records if not r.passed]

    @property
    def ok(self) -> bool:
        return self.summary.failed == 0
