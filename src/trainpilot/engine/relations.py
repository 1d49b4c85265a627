"""Diff-and-link relation synchronization for aggregates."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from trainpilot.contracts.exceptions import ProviderError
from trainpilot.contracts.item import WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.contracts.results import OperationLog

_LOG = logging.getLogger(__name__)


class RelationSynchronizer:
    """Adds the links an aggregate is missing. Existing links are never removed."""

    def __init__(self, provider: Provider, log: OperationLog, *, comment: str) -> None:
        self._provider = provider
        self._log = log
        self._comment = comment

    async def synchronize(self, aggregate: WorkItem, desired_member_ids: Sequence[int]) -> int:
        """Link every desired member not already linked; return how many were attempted."""
        existing = frozenset(aggregate.linked_ids())
        to_add = [member_id for member_id in dict.fromkeys(desired_member_ids) if member_id not in existing]
        _LOG.debug(
            "Aggregate %d has %d existing link(s); %d to add",
            aggregate.id,
            len(existing),
            len(to_add),
        )
        await self.link_all(aggregate.id, to_add)
        return len(to_add)

    async def link_all(self, aggregate_id: int, member_ids: Sequence[int]) -> int:
        """Create one relation per member id; return how many succeeded."""
        linked = 0
        for member_id in member_ids:
            try:
                await self._provider.create_relation(aggregate_id, member_id, self._comment)
            except ProviderError as exc:
                message = f"Failed to link {member_id} to aggregate {aggregate_id}: {exc}"
                _LOG.warning(message)
                self._log.warn(message)
                continue
            linked += 1
        return linked
