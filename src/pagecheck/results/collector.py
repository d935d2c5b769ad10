"""In-memory accumulation of result records for a single run."""

from __future__ import annotations

from collections.abc import Iterable

from pagecheck.results.models import (
    CategoryResult,
    RequirementCoverage,
    ResultRecord,
    RunEnvironment,
    RunReport,
    Summary,
)


class ResultCollector:
    """Collects records by category and builds the final ``RunReport``."""

    def __init__(self) -> None:
        self._categories: dict[str, CategoryResult] = {}
        self._skipped = 0

    def add(self, record: ResultRecord) -> None:
        self._categories.setdefault(record.category, CategoryResult()).details.append(record)

    def extend(self, records: Iterable[ResultRecord]) -> None:
        for record in records:
            self.add(record)

    def mark_skipped(self, count: int = 1) -> None:
        self._skipped += count

    @property
    def records(self) -> list[ResultRecord]:
        return [r for c in self._categories.values() for r in c.details]

    def summary(self) -> Summary:
        records = self.records
        passed = sum(1 for r in records if r.passed)
        return Summary(passed=passed, failed=len(records) - passed, skipped=self._skipped)

    def coverage(self, requirements: Iterable[RequirementCoverage]) -> list[RequirementCoverage]:
        """Fill check names and failure counts into the given requirement entries."""
        by_id = {req.id: req.model_copy(deep=True) for req in requirements}
        for record in self.records:
            if record.requirement_id is None:
                continue
            req = by_id.get(record.requirement_id)
            if req is None:
                req = RequirementCoverage(
                    id=record.requirement_id,
                    title=record.scenario or record.name,
                    category=record.category,
                )
                by_id[req.id] = req
            req.check_names.append(record.name)
            if not record.passed:
                req.failed_checks += 1
        return list(by_id.values())

    def build_report(
        self,
        *,
        title: str,
        base_url: str,
        requirements: Iterable[RequirementCoverage] = (),
        browsers: Iterable[str] = (),
        viewports: Iterable[str] = (),
        duration_ms: float = 0.0,
    ) -> RunReport:
        return RunReport(
            title=title,
            base_url=base_url,
            summary=self.summary(),
            categories={name: c.model_copy(deep=True) for name, c in self._categories.items()},
            requirements=self.coverage(requirements),
            environment=RunEnvironment(browsers=list(browsers), viewports=list(viewports)),
            duration_ms=duration_ms,
        )
