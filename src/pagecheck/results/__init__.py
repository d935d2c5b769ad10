"""Result records, aggregation and run reports."""

from .collector import ResultCollector
from .models import (
    CategoryResult,
    RequirementCoverage,
    ResultRecord,
    RunEnvironment,
    RunReport,
    Summary,
)

__all__ = [
    "CategoryResult",
    "RequirementCoverage",
    "ResultCollector",
    "ResultRecord",
    "RunEnvironment",
    "RunReport",
    "Summary",
]
