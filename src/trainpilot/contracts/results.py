"""Pass result contracts and the append-only operation log."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class OperationKind(StrEnum):
    CREATED = "Created"
    UPDATED = "Updated"


class Operation(BaseModel):
    kind: OperationKind
    aggregate_id: int
    title: str
    total_members: int
    new_relations: int
    replaced_id: int | None = None

    model_config = {"frozen": True}


class Failure(BaseModel):
    """A unit of work (group or aggregate) that could not be processed."""

    subject: str
    item_id: int | None = None
    message: str

    model_config = {"frozen": True}


class OperationLog:
    """Append-only record of what a pass did.

    Nothing is ever removed or rewritten; readers get tuples.
    """

    def __init__(self) -> None:
        self._operations: list[Operation] = []
        self._warnings: list[str] = []
        self._failures: list[Failure] = []

    @property
    def operations(self) -> tuple[Operation, ...]:
        return tuple(self._operations)

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(self._warnings)

    @property
    def failures(self) -> tuple[Failure, ...]:
        return tuple(self._failures)

    def record(self, operation: Operation) -> None:
        self._operations.append(operation)

    def warn(self, message: str) -> None:
        self._warnings.append(message)

    def fail(self, failure: Failure) -> None:
        self._failures.append(failure)


class GroupingResult(BaseModel):
    groups: int = 0
    operations: list[Operation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    failures: list[Failure] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def created(self) -> list[Operation]:
        return [op for op in self.operations if op.kind is OperationKind.CREATED]

    @property
    def updated(self) -> list[Operation]:
        return [op for op in self.operations if op.kind is OperationKind.UPDATED]

    @property
    def new_relations(self) -> int:
        return sum(op.new_relations for op in self.operations)


class EstimateOutcome(BaseModel):
    aggregate_id: int
    title: str
    total: float
    current: float | None = None
    members: int = 0
    members_without_estimate: int = 0
    system_authored: bool = False
    updated: bool = False
    warning: str | None = None

    model_config = {"frozen": True}


class EstimateResult(BaseModel):
    outcomes: list[EstimateOutcome] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    failures: list[Failure] = Field(default_factory=list)
    dry_run: bool = False

    @property
    def updated(self) -> list[EstimateOutcome]:
        return [outcome for outcome in self.outcomes if outcome.updated]

    @property
    def mismatched(self) -> list[EstimateOutcome]:
        return [outcome for outcome in self.outcomes if outcome.warning is not None]
