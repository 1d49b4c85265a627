"""Hygiene check contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum

from pydantic import BaseModel, Field

from trainpilot.contracts.item import WorkItem


# Check name used for findings produced when an aggregate could not be inspected at all.
ERROR_CHECK = "Hygiene Check Error"


class Severity(IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2
    CRITICAL = 3


class HygieneFinding(BaseModel):
    check: str
    passed: bool
    severity: Severity = Severity.INFO
    details: str
    item_id: int
    item_title: str
    recommendation: str | None = None

    model_config = {"frozen": True}


class HygieneContext(BaseModel):
    """An aggregate together with the member items linked to it."""

    aggregate: WorkItem
    members: list[WorkItem] = Field(default_factory=list)


class HygieneCheck(ABC):
    name: str
    description: str

    @abstractmethod
    def check(self, context: HygieneContext) -> list[HygieneFinding]: ...

    def _passed(self, context: HygieneContext, details: str) -> HygieneFinding:
        return HygieneFinding(
            check=self.name,
            passed=True,
            details=details,
            item_id=context.aggregate.id,
            item_title=context.aggregate.title,
        )

    def _failed(
        self,
        context: HygieneContext,
        details: str,
        *,
        severity: Severity = Severity.WARNING,
        recommendation: str | None = None,
    ) -> HygieneFinding:
        return HygieneFinding(
            check=self.name,
            passed=False,
            severity=severity,
            details=details,
            item_id=context.aggregate.id,
            item_title=context.aggregate.title,
            recommendation=recommendation,
        )


class HygieneSummary(BaseModel):
    aggregates: int = 0
    skipped: int = 0
    findings: list[HygieneFinding] = Field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for finding in self.findings if finding.passed)

    @property
    def failed(self) -> int:
        return len(self.findings) - self.passed

    def count(self, severity: Severity) -> int:
        return sum(1 for finding in self.findings if not finding.passed and finding.severity is severity)

    @property
    def health_score(self) -> float:
        """Percentage of checks that passed, 100.0 when nothing was checked."""
        if not self.findings:
            return 100.0
        return round(100.0 * self.passed / len(self.findings), 1)

    @property
    def errored(self) -> int:
        return sum(1 for finding in self.findings if finding.check == ERROR_CHECK)

    @property
    def has_errors(self) -> bool:
        return any(not f.passed and f.severity >= Severity.ERROR for f in self.findings)
