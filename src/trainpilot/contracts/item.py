"""Provider-agnostic work item contracts."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from pydantic import BaseModel, Field


class RelationType(StrEnum):
    RELATED = "RELATED"
    CHILD = "CHILD"
    PARENT = "PARENT"
    OTHER = "OTHER"


# Link kinds that count as "already linked" when diffing an aggregate.
LINK_TYPES: frozenset[RelationType] = frozenset({RelationType.RELATED, RelationType.CHILD, RelationType.PARENT})


class Relation(BaseModel):
    type: RelationType
    target_id: int
    comment: str | None = None

    model_config = {"frozen": True}


class WorkItem(BaseModel):
    """Snapshot of an upstream work item."""

    id: int
    title: str
    item_type: str
    state: str = ""
    description: str = ""
    notes: str = ""
    iteration_path: str | None = None
    tags: list[str] = Field(default_factory=list)
    estimate: float | None = None
    stack_rank: float | None = None
    relations: list[Relation] = Field(default_factory=list)

    def has_tag(self, tag: str) -> bool:
        wanted = tag.strip().casefold()
        return any(existing.strip().casefold() == wanted for existing in self.tags)

    def linked_ids(self, types: Iterable[RelationType] = LINK_TYPES) -> list[int]:
        """Distinct relation targets of the given kinds, in relation order."""
        accepted = frozenset(types)
        seen: set[int] = set()
        ordered: list[int] = []
        for relation in self.relations:
            if relation.type not in accepted or relation.target_id in seen:
                continue
            seen.add(relation.target_id)
            ordered.append(relation.target_id)
        return ordered


class ItemQuery(BaseModel):
    area_path: str
    item_types: list[str]
    excluded_states: list[str] = Field(default_factory=lambda: ["Removed", "Closed"])
    limit: int = Field(default=100, ge=1)


class CreateAggregateInput(BaseModel):
    title: str
    item_type: str
    area_path: str
    tags: list[str] = Field(default_factory=list)
