"""Hygiene pass over aggregates."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from trainpilot.contracts.config import EngineConfig
from trainpilot.contracts.exceptions import ProviderError
from trainpilot.contracts.item import WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.engine.markers import is_separator
from trainpilot.engine.members import load_members
from trainpilot.engine.progress import NullRunProgress, RunProgress
from trainpilot.hygiene.base import (
    ERROR_CHECK,
    HygieneCheck,
    HygieneContext,
    HygieneFinding,
    HygieneSummary,
    Severity,
)
from trainpilot.hygiene.checks import DEFAULT_CHECKS

_LOG = logging.getLogger(__name__)

PHASE = "Hygiene"


class HygieneService:
    def __init__(
        self,
        provider: Provider,
        config: EngineConfig,
        *,
        checks: Sequence[HygieneCheck] | None = None,
        progress: RunProgress | None = None,
    ) -> None:
        self._provider = provider
        self._config = config
        self._checks = list(checks) if checks is not None else [check() for check in DEFAULT_CHECKS]
        self._progress: RunProgress = progress or NullRunProgress()

    async def run(self, aggregates: Sequence[WorkItem]) -> HygieneSummary:
        candidates = [item for item in aggregates if not is_separator(item.title, self._config.markers)]
        skipped = len(aggregates) - len(candidates)
        if skipped:
            _LOG.info("Excluding %d separator aggregate(s) from hygiene checks", skipped)

        summary = HygieneSummary(aggregates=len(candidates), skipped=skipped)
        self._progress.phase_start(PHASE, total=len(candidates))
        try:
            for aggregate in candidates:
                summary.findings.extend(await self._check_one(aggregate))
                self._progress.item_done(PHASE)
            self._progress.phase_done(PHASE)
        except BaseException as exc:
            self._progress.phase_error(PHASE, exc)
            raise

        _LOG.info("Hygiene: %d/%d checks passed", summary.passed, len(summary.findings))
        return summary

    async def _check_one(self, aggregate: WorkItem) -> list[HygieneFinding]:
        try:
            context = await self._load_context(aggregate)
        except ProviderError as exc:
            _LOG.error("Hygiene checks failed for aggregate %d: %s", aggregate.id, exc)
            return [
                HygieneFinding(
                    check=ERROR_CHECK,
                    passed=False,
                    severity=Severity.ERROR,
                    details=str(exc),
                    item_id=aggregate.id,
                    item_title=aggregate.title,
                    recommendation="Review work item permissions and data integrity",
                )
            ]

        findings: list[HygieneFinding] = []
        for check in self._checks:
            findings.extend(check.check(context))
        return findings

    async def _load_context(self, aggregate: WorkItem) -> HygieneContext:
        full = await self._provider.get_item_with_relations(aggregate.id)
        members, missing = await load_members(self._provider, full, self._config.aggregate.member_type)
        for item_id in missing:
            _LOG.warning("Aggregate %d links to missing item %d", full.id, item_id)
        return HygieneContext(aggregate=full, members=members)
