"""Estimate prefix codec and the estimate reconciliation pass.

An aggregate's notes field may begin with ``[ESTIMATE: <n>]``. The reconciler
keeps that value equal to the sum of the linked members' estimates for
system-authored aggregates and only reports drift on manually authored ones.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from decimal import Decimal

from trainpilot.contracts.config import EngineConfig, EstimateConfig
from trainpilot.contracts.exceptions import ProviderError
from trainpilot.contracts.item import WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.contracts.results import EstimateOutcome, EstimateResult, Failure
from trainpilot.engine.members import load_members
from trainpilot.engine.progress import NullRunProgress, RunProgress

_LOG = logging.getLogger(__name__)

PHASE = "Estimates"


def format_estimate(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        # Fixed-point form of the shortest repr keeps every significant digit.
        text = format(Decimal(text), "f")
    return text


class EstimateCodec:
    def __init__(self, config: EstimateConfig | None = None) -> None:
        self._config = config or EstimateConfig()
        self._pattern = re.compile(
            rf"^\[{re.escape(self._config.label)}:\s*(?P<value>-?\d+(?:\.\d+)?)\s*\]",
            re.IGNORECASE,
        )

    def decode(self, notes: str) -> float | None:
        match = self._pattern.match(notes.lstrip())
        if match is None:
            return None
        return float(match.group("value"))

    def strip(self, notes: str) -> str:
        """Remove every leading estimate prefix and the whitespace after it."""
        text = notes.lstrip()
        while (match := self._pattern.match(text)) is not None:
            text = text[match.end() :].lstrip()
        return text

    def encode(self, value: float, notes: str) -> str:
        remainder = self.strip(notes)
        if not remainder.strip():
            remainder = self._config.empty_notes_text
        return f"[{self._config.label}: {format_estimate(value)}] {remainder}"


_DEFAULT_CODEC = EstimateCodec()


def decode_estimate(notes: str) -> float | None:
    return _DEFAULT_CODEC.decode(notes)


def strip_estimate(notes: str) -> str:
    return _DEFAULT_CODEC.strip(notes)


def encode_estimate(value: float, notes: str) -> str:
    return _DEFAULT_CODEC.encode(value, notes)


class EstimateReconciler:
    def __init__(self, provider: Provider, config: EngineConfig) -> None:
        self._provider = provider
        self._system_tag = config.aggregate.system_tag
        self._codec = EstimateCodec(config.estimates)

    async def reconcile(
        self,
        aggregate: WorkItem,
        members: Sequence[WorkItem],
        *,
        reconcile_all: bool = False,
    ) -> EstimateOutcome:
        without_estimate = sum(1 for member in members if member.estimate is None)
        total = math.fsum(member.estimate for member in members if member.estimate is not None)
        if without_estimate:
            _LOG.warning(
                "%d of %d member(s) of aggregate %d have no estimate; counted as 0",
                without_estimate,
                len(members),
                aggregate.id,
            )

        current = self._codec.decode(aggregate.notes)
        system_authored = aggregate.has_tag(self._system_tag)
        updated = False
        warning: str | None = None

        if system_authored or reconcile_all:
            if current != total:
                await self._provider.update_notes(aggregate.id, self._codec.encode(total, aggregate.notes))
                updated = True
                _LOG.info(
                    "Aggregate %d estimate %s -> %s",
                    aggregate.id,
                    "none" if current is None else format_estimate(current),
                    format_estimate(total),
                )
        elif current != total:
            warning = (
                f"Aggregate {aggregate.id} ({aggregate.title!r}) stores estimate "
                f"{'none' if current is None else format_estimate(current)} "
                f"but its members sum to {format_estimate(total)}; not authored by trainpilot, left unchanged"
            )
            _LOG.warning(warning)

        return EstimateOutcome(
            aggregate_id=aggregate.id,
            title=aggregate.title,
            total=total,
            current=current,
            members=len(members),
            members_without_estimate=without_estimate,
            system_authored=system_authored,
            updated=updated,
            warning=warning,
        )


class EstimatePass:
    """Reconcile estimates over a list of aggregates, one at a time."""

    def __init__(
        self,
        provider: Provider,
        config: EngineConfig,
        *,
        progress: RunProgress | None = None,
        dry_run: bool = False,
    ) -> None:
        self._provider = provider
        self._member_type = config.aggregate.member_type
        self._reconciler = EstimateReconciler(provider, config)
        self._progress: RunProgress = progress or NullRunProgress()
        self._dry_run = dry_run

    async def run(self, aggregates: Sequence[WorkItem], *, reconcile_all: bool = False) -> EstimateResult:
        result = EstimateResult(dry_run=self._dry_run)
        self._progress.phase_start(PHASE, total=len(aggregates))
        try:
            for aggregate in aggregates:
                try:
                    await self._run_one(aggregate, result, reconcile_all=reconcile_all)
                except ProviderError as exc:
                    _LOG.error("Estimate reconciliation failed for aggregate %d: %s", aggregate.id, exc)
                    result.failures.append(Failure(subject=aggregate.title, item_id=aggregate.id, message=str(exc)))
                self._progress.item_done(PHASE)
            self._progress.phase_done(PHASE)
        except BaseException as exc:
            self._progress.phase_error(PHASE, exc)
            raise
        return result

    async def _run_one(self, aggregate: WorkItem, result: EstimateResult, *, reconcile_all: bool) -> None:
        full = await self._provider.get_item_with_relations(aggregate.id)
        linked = full.linked_ids()
        if not linked:
            self._skip(full, "has no linked items", result)
            return

        members = await self._load_members(full, result)
        if not members:
            self._skip(full, f"has no linked {self._member_type} items", result)
            return

        outcome = await self._reconciler.reconcile(full, members, reconcile_all=reconcile_all)
        result.outcomes.append(outcome)
        if outcome.members_without_estimate:
            result.warnings.append(
                f"Aggregate {full.id} ({full.title!r}): {outcome.members_without_estimate} of "
                f"{outcome.members} member(s) have no estimate"
            )
        if outcome.warning is not None:
            result.warnings.append(outcome.warning)
        if outcome.updated and not outcome.system_authored:
            message = f"Aggregate {full.id} ({full.title!r}) is manually authored but was updated"
            _LOG.warning(message)
            result.warnings.append(message)

    async def _load_members(self, aggregate: WorkItem, result: EstimateResult) -> list[WorkItem]:
        members, missing = await load_members(self._provider, aggregate, self._member_type)
        for item_id in missing:
            message = f"Aggregate {aggregate.id} links to missing item {item_id}; skipped"
            _LOG.warning(message)
            result.warnings.append(message)
        return members

    @staticmethod
    def _skip(aggregate: WorkItem, reason: str, result: EstimateResult) -> None:
        message = f"Aggregate {aggregate.id} ({aggregate.title!r}) {reason}; skipped"
        _LOG.warning(message)
        result.skipped.append(message)
