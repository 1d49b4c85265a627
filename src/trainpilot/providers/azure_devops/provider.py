"""Azure DevOps provider adapter."""

from __future__ import annotations

import logging
from types import TracebackType
from urllib.parse import quote

import httpx

from trainpilot.contracts.config import FieldConfig
from trainpilot.contracts.exceptions import ProviderError
from trainpilot.contracts.item import CreateAggregateInput, ItemQuery, WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.providers.azure_devops import mapper
from trainpilot.providers.azure_devops.client import AzureDevOpsClient

_LOG = logging.getLogger(__name__)

# Upper bound on ids per batched work item read.
_BATCH_SIZE = 200


class AzureDevOpsProvider(Provider):
    def __init__(
        self,
        *,
        organization: str,
        project: str,
        token: str,
        base_url: str | None = None,
        fields: FieldConfig | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._fields = fields or FieldConfig()
        self._client = AzureDevOpsClient(
            base_url=base_url or f"https://dev.azure.com/{organization}",
            project=project,
            token=token,
            timeout=timeout,
            max_retries=max_retries,
            transport=transport,
        )

    async def __aenter__(self) -> AzureDevOpsProvider:
        await self._client.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self._client.aclose()

    async def query_items(self, query: ItemQuery) -> list[WorkItem]:
        payload = await self._client.post(
            "wit/wiql", {"query": mapper.build_wiql(query)}, params={"$top": str(query.limit)}
        )
        refs = (payload or {}).get("workItems") or []
        ids = [ref["id"] for ref in refs if isinstance(ref, dict) and isinstance(ref.get("id"), int)][: query.limit]
        _LOG.debug("WIQL matched %d item(s)", len(ids))

        fields = ",".join(mapper.field_names(self._fields))
        items: list[WorkItem] = []
        for start in range(0, len(ids), _BATCH_SIZE):
            batch = ids[start : start + _BATCH_SIZE]
            data = await self._client.get("wit/workitems", params={"ids": ",".join(map(str, batch)), "fields": fields})
            fetched = {
                item.id: item
                for item in (mapper.work_item_from_payload(raw, self._fields) for raw in (data or {}).get("value", []))
            }
            items.extend(fetched[item_id] for item_id in batch if item_id in fetched)
        return items

    async def get_item(self, item_id: int) -> WorkItem:
        data = await self._client.get(f"wit/workitems/{item_id}", item_id=item_id)
        return self._to_item(data)

    async def get_item_with_relations(self, item_id: int) -> WorkItem:
        data = await self._client.get(f"wit/workitems/{item_id}", params={"$expand": "relations"}, item_id=item_id)
        return self._to_item(data)

    async def create_aggregate(self, input: CreateAggregateInput) -> int:
        operations = [
            mapper.add_field(mapper.TITLE, input.title),
            mapper.add_field(mapper.AREA_PATH, input.area_path),
        ]
        if input.tags:
            operations.append(mapper.add_field(mapper.TAGS, mapper.join_tags(input.tags)))
        data = await self._client.post_patch(f"wit/workitems/${quote(input.item_type, safe='')}", operations)
        created_id = (data or {}).get("id")
        if not isinstance(created_id, int):
            raise ProviderError(f"Azure DevOps did not return an id for new {input.item_type!r}")
        return created_id

    async def create_relation(self, source_id: int, target_id: int, comment: str) -> None:
        operation = mapper.add_relation(self._client.work_item_url(target_id), comment)
        await self._client.patch(f"wit/workitems/{source_id}", [operation], item_id=source_id)

    async def update_title(self, item_id: int, title: str) -> None:
        await self._client.patch(f"wit/workitems/{item_id}", [mapper.add_field(mapper.TITLE, title)], item_id=item_id)

    async def update_notes(self, item_id: int, notes: str) -> None:
        operations = [mapper.add_field(self._fields.notes, notes)]
        await self._client.patch(f"wit/workitems/{item_id}", operations, item_id=item_id)

    def _to_item(self, data: object) -> WorkItem:
        if not isinstance(data, dict):
            raise ProviderError("Azure DevOps returned an empty work item payload")
        return mapper.work_item_from_payload(data, self._fields)
