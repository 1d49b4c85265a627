"""Provider adapter contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from trainpilot.contracts.item import CreateAggregateInput, ItemQuery, WorkItem


class Provider(ABC):
    """Upstream tracking service as seen by the engine.

    ``get_item`` and ``get_item_with_relations`` raise
    :class:`~trainpilot.contracts.exceptions.ItemNotFoundError` for ids the
    service does not know; every other failure surfaces as ``ProviderError``.
    """

    @abstractmethod
    async def __aenter__(self) -> Provider: ...

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    @abstractmethod
    async def query_items(self, query: ItemQuery) -> list[WorkItem]: ...

    @abstractmethod
    async def get_item(self, item_id: int) -> WorkItem: ...

    @abstractmethod
    async def get_item_with_relations(self, item_id: int) -> WorkItem: ...

    @abstractmethod
    async def create_aggregate(self, input: CreateAggregateInput) -> int: ...

    @abstractmethod
    async def create_relation(self, source_id: int, target_id: int, comment: str) -> None: ...

    @abstractmethod
    async def update_title(self, item_id: int, title: str) -> None: ...

    @abstractmethod
    async def update_notes(self, item_id: int, notes: str) -> None: ...
