"""Resolve the member items linked to an aggregate."""

from __future__ import annotations

from trainpilot.contracts.exceptions import ItemNotFoundError
from trainpilot.contracts.item import WorkItem
from trainpilot.contracts.provider import Provider


async def load_members(provider: Provider, aggregate: WorkItem, member_type: str) -> tuple[list[WorkItem], list[int]]:
    """Fetch linked items of *member_type*; also return linked ids that no longer exist."""
    wanted = member_type.casefold()
    members: list[WorkItem] = []
    missing: list[int] = []
    for item_id in aggregate.linked_ids():
        try:
            item = await provider.get_item(item_id)
        except ItemNotFoundError:
            missing.append(item_id)
            continue
        if item.item_type.casefold() == wanted:
            members.append(item)
    return members, missing
