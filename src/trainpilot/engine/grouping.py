"""Grouping pass: scan titles, then create or repair one aggregate per group."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from trainpilot.contracts.config import EngineConfig
from trainpilot.contracts.exceptions import ItemNotFoundError, ProviderError
from trainpilot.contracts.item import CreateAggregateInput, WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.contracts.results import Failure, GroupingResult, Operation, OperationKind, OperationLog
from trainpilot.engine.markers import format_open_marker
from trainpilot.engine.progress import NullRunProgress, RunProgress
from trainpilot.engine.relations import RelationSynchronizer
from trainpilot.engine.scanner import Group, scan_groups

_LOG = logging.getLogger(__name__)

PHASE = "Grouping"


@dataclass(frozen=True)
class Found:
    item: WorkItem


@dataclass(frozen=True)
class Missing:
    aggregate_id: int


@dataclass(frozen=True)
class FetchFailed:
    error: ProviderError


FetchOutcome = Found | Missing | FetchFailed


class GroupingEngine:
    def __init__(
        self,
        provider: Provider,
        config: EngineConfig,
        *,
        area_path: str,
        group_delay: float = 0.1,
        progress: RunProgress | None = None,
        dry_run: bool = False,
    ) -> None:
        self._provider = provider
        self._config = config
        self._area_path = area_path
        self._group_delay = group_delay
        self._progress: RunProgress = progress or NullRunProgress()
        self._dry_run = dry_run

    async def run(self, items: Sequence[WorkItem]) -> GroupingResult:
        log = OperationLog()
        relations = RelationSynchronizer(self._provider, log, comment=self._config.aggregate.provenance_comment)
        groups = self._without_aggregates(scan_groups(items, self._config.markers), items)
        _LOG.debug("Found %d group(s) in %d item(s)", len(groups), len(items))

        self._progress.phase_start(PHASE, total=len(groups))
        try:
            for group in groups:
                await self._process(group, relations, log)
                self._progress.item_done(PHASE)
                await asyncio.sleep(self._group_delay)
            self._progress.phase_done(PHASE)
        except BaseException as exc:
            self._progress.phase_error(PHASE, exc)
            raise

        return GroupingResult(
            groups=len(groups),
            operations=list(log.operations),
            warnings=list(log.warnings),
            failures=list(log.failures),
            dry_run=self._dry_run,
        )

    def _without_aggregates(self, groups: list[Group], items: Sequence[WorkItem]) -> list[Group]:
        """Drop aggregate items (and a group's own aggregate) from member lists, then empty groups."""
        aggregate_type = self._config.aggregate.item_type.casefold()
        aggregate_ids = {item.id for item in items if item.item_type.casefold() == aggregate_type}
        kept: list[Group] = []
        for group in groups:
            members = tuple(
                member_id
                for member_id in group.member_ids
                if member_id not in aggregate_ids and member_id != group.existing_id
            )
            if len(members) != len(group.member_ids):
                _LOG.debug("Group %r: ignoring %d aggregate item(s)", group.name, len(group.member_ids) - len(members))
            if members:
                kept.append(replace(group, member_ids=members))
        return kept

    async def _process(self, group: Group, relations: RelationSynchronizer, log: OperationLog) -> None:
        try:
            if group.existing_id is None:
                await self._create(group, relations, log)
                return

            match await self._fetch(group.existing_id):
                case Found(item=aggregate):
                    await self._update(group, aggregate, relations, log)
                case Missing(aggregate_id=missing_id):
                    message = f"Aggregate {missing_id} referenced by group {group.name!r} no longer exists; recreating"
                    _LOG.warning(message)
                    log.warn(message)
                    await self._create(group, relations, log, replaced_id=missing_id)
                case FetchFailed(error=error):
                    self._fail(group, error, log)
        except ProviderError as exc:
            self._fail(group, exc, log)

    async def _fetch(self, aggregate_id: int) -> FetchOutcome:
        try:
            item = await self._provider.get_item_with_relations(aggregate_id)
        except ItemNotFoundError:
            return Missing(aggregate_id)
        except ProviderError as exc:
            return FetchFailed(exc)
        return Found(item)

    async def _update(
        self,
        group: Group,
        aggregate: WorkItem,
        relations: RelationSynchronizer,
        log: OperationLog,
    ) -> None:
        existing = aggregate.linked_ids()
        _LOG.debug("Aggregate %d already linked to %s", aggregate.id, existing)
        attempted = await relations.synchronize(aggregate, group.member_ids)

        threshold = self._config.aggregate.relation_warning_threshold
        member_count = len(group.member_ids)
        if existing and member_count <= threshold and len(existing) > member_count:
            message = (
                f"Aggregate {aggregate.id} ({group.name!r}) has {len(existing)} link(s) "
                f"but its group lists only {member_count} member(s); links were left untouched"
            )
            _LOG.warning(message)
            log.warn(message)

        log.record(
            Operation(
                kind=OperationKind.UPDATED,
                aggregate_id=aggregate.id,
                title=group.name,
                total_members=member_count,
                new_relations=attempted,
            )
        )

    async def _create(
        self,
        group: Group,
        relations: RelationSynchronizer,
        log: OperationLog,
        *,
        replaced_id: int | None = None,
    ) -> None:
        aggregate_config = self._config.aggregate
        tags = [aggregate_config.system_tag] if aggregate_config.system_tag else []
        aggregate_id = await self._provider.create_aggregate(
            CreateAggregateInput(
                title=group.name,
                item_type=aggregate_config.item_type,
                area_path=self._area_path,
                tags=tags,
            )
        )
        _LOG.info("Created aggregate %d for group %r", aggregate_id, group.name)

        await relations.link_all(aggregate_id, group.member_ids)
        if aggregate_id > 0:
            await self._rewrite_anchor(group, aggregate_id, log)
        else:
            _LOG.debug("Skipping anchor rewrite for placeholder aggregate %d", aggregate_id)

        log.record(
            Operation(
                kind=OperationKind.CREATED,
                aggregate_id=aggregate_id,
                title=group.name,
                total_members=len(group.member_ids),
                new_relations=len(group.member_ids),
                replaced_id=replaced_id,
            )
        )

    async def _rewrite_anchor(self, group: Group, aggregate_id: int, log: OperationLog) -> None:
        title = format_open_marker(group.name, aggregate_id, self._config.markers)
        try:
            await self._provider.update_title(group.anchor_id, title)
        except ProviderError as exc:
            message = f"Could not rewrite marker {group.anchor_id} to reference aggregate {aggregate_id}: {exc}"
            _LOG.warning(message)
            log.warn(message)

    @staticmethod
    def _fail(group: Group, error: ProviderError, log: OperationLog) -> None:
        _LOG.error("Group %r (marker %d) failed: %s", group.name, group.anchor_id, error)
        log.fail(Failure(subject=group.name, item_id=group.anchor_id, message=str(error)))
