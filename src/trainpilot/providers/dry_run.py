"""Dry-run provider: reads pass through, writes are recorded instead of sent."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

from trainpilot.contracts.exceptions import ItemNotFoundError
from trainpilot.contracts.item import CreateAggregateInput, ItemQuery, Relation, RelationType, WorkItem
from trainpilot.contracts.provider import Provider


@dataclass(frozen=True)
class DryRunOperation:
    """Deterministic dry-run operation log entry."""

    sequence: int
    name: str
    item_id: int
    payload: dict[str, str]


class DryRunProvider(Provider):
    """Overlay recorded writes on top of an optional read-only inner provider.

    Created aggregates receive negative placeholder ids (-1, -2, ...) and can be
    read back, so a dry run walks the same path a real run would.
    """

    def __init__(self, inner: Provider | None = None) -> None:
        self._inner = inner
        self._next_placeholder = 0
        self._created: dict[int, WorkItem] = {}
        self._titles: dict[int, str] = {}
        self._notes: dict[int, str] = {}
        self._relations: dict[int, list[Relation]] = {}
        self._operations: list[DryRunOperation] = []

    @property
    def operations(self) -> tuple[DryRunOperation, ...]:
        return tuple(self._operations)

    def _record(self, name: str, item_id: int, payload: dict[str, str] | None = None) -> None:
        self._operations.append(
            DryRunOperation(sequence=len(self._operations) + 1, name=name, item_id=item_id, payload=payload or {})
        )

    async def __aenter__(self) -> DryRunProvider:
        if self._inner is not None:
            await self._inner.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._inner is not None:
            await self._inner.__aexit__(exc_type, exc_val, exc_tb)

    async def query_items(self, query: ItemQuery) -> list[WorkItem]:
        if self._inner is None:
            return []
        return [self._overlay(item) for item in await self._inner.query_items(query)]

    async def get_item(self, item_id: int) -> WorkItem:
        item = await self._read(item_id, with_relations=False)
        return self._overlay(item).model_copy(update={"relations": []})

    async def get_item_with_relations(self, item_id: int) -> WorkItem:
        return self._overlay(await self._read(item_id, with_relations=True))

    async def create_aggregate(self, input: CreateAggregateInput) -> int:
        self._next_placeholder -= 1
        item_id = self._next_placeholder
        self._created[item_id] = WorkItem(id=item_id, title=input.title, item_type=input.item_type, tags=input.tags)
        self._record(
            "create_aggregate",
            item_id,
            {"title": input.title, "item_type": input.item_type, "area_path": input.area_path},
        )
        return item_id

    async def create_relation(self, source_id: int, target_id: int, comment: str) -> None:
        self._relations.setdefault(source_id, []).append(
            Relation(type=RelationType.RELATED, target_id=target_id, comment=comment)
        )
        self._record("create_relation", source_id, {"target_id": str(target_id), "comment": comment})

    async def update_title(self, item_id: int, title: str) -> None:
        self._titles[item_id] = title
        self._record("update_title", item_id, {"title": title})

    async def update_notes(self, item_id: int, notes: str) -> None:
        self._notes[item_id] = notes
        self._record("update_notes", item_id, {"notes": notes})

    async def _read(self, item_id: int, *, with_relations: bool) -> WorkItem:
        created = self._created.get(item_id)
        if created is not None:
            return created
        if self._inner is None:
            raise ItemNotFoundError(f"Work item {item_id} not found", item_id=item_id)
        if with_relations:
            return await self._inner.get_item_with_relations(item_id)
        return await self._inner.get_item(item_id)

    def _overlay(self, item: WorkItem) -> WorkItem:
        update: dict[str, object] = {}
        if item.id in self._titles:
            update["title"] = self._titles[item.id]
        if item.id in self._notes:
            update["notes"] = self._notes[item.id]
        if item.id in self._relations:
            update["relations"] = [*item.relations, *self._relations[item.id]]
        return item.model_copy(update=update) if update else item
