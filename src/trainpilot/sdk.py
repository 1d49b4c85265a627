"""SDK composition root for TrainPilot."""

from __future__ import annotations

from pydantic import BaseModel

from trainpilot.auth import create_token_resolver
from trainpilot.contracts.config import TrainPilotConfig
from trainpilot.contracts.exceptions import ConfigError
from trainpilot.contracts.item import ItemQuery, WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.contracts.results import EstimateResult, GroupingResult
from trainpilot.engine import EstimatePass, GroupingEngine
from trainpilot.engine.markers import is_separator
from trainpilot.engine.progress import NullRunProgress, RunProgress
from trainpilot.hygiene import HygieneService, HygieneSummary
from trainpilot.providers.dry_run import DryRunProvider
from trainpilot.providers.factory import create_provider

QUERY_PHASE = "Query"


class RunReport(BaseModel):
    grouping: GroupingResult | None = None
    estimates: EstimateResult | None = None
    hygiene: HygieneSummary | None = None
    dry_run: bool = False

    @property
    def has_failures(self) -> bool:
        """True when any group or aggregate could not be processed."""
        if self.grouping is not None and self.grouping.failures:
            return True
        if self.estimates is not None and self.estimates.failures:
            return True
        return self.hygiene is not None and self.hygiene.errored > 0


class TrainPilot:
    """TrainPilot SDK public API."""

    def __init__(
        self,
        *,
        config: TrainPilotConfig,
        provider: Provider | None = None,
        progress: RunProgress | None = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config
        self._provider = provider
        self._progress: RunProgress = progress or NullRunProgress()
        self._dry_run = dry_run

    @classmethod
    async def from_config(
        cls,
        config: TrainPilotConfig,
        *,
        progress: RunProgress | None = None,
        dry_run: bool = False,
    ) -> TrainPilot:
        return cls(config=config, progress=progress, dry_run=dry_run)

    @property
    def config(self) -> TrainPilotConfig:
        return self._config

    async def run(
        self,
        *,
        grouping: bool = False,
        estimates: bool = False,
        reconcile_all: bool = False,
        hygiene: bool = False,
    ) -> RunReport:
        """Run the selected passes against one provider session, grouping first."""
        if not (grouping or estimates or hygiene):
            raise ConfigError("no pass selected: choose grouping, estimates and/or hygiene")

        report = RunReport(dry_run=self._dry_run)
        provider = await self._resolve_provider()
        async with provider:
            if grouping:
                report.grouping = await self._group(provider)
            if estimates or hygiene:
                aggregates = await self._query(provider, [self._config.engine.aggregate.item_type])
                if estimates:
                    report.estimates = await self._reconcile(provider, aggregates, reconcile_all=reconcile_all)
                if hygiene:
                    report.hygiene = await HygieneService(
                        provider, self._config.engine, progress=self._progress
                    ).run(aggregates)
        return report

    async def group(self) -> GroupingResult:
        report = await self.run(grouping=True)
        assert report.grouping is not None
        return report.grouping

    async def reconcile_estimates(self, *, reconcile_all: bool = False) -> EstimateResult:
        report = await self.run(estimates=True, reconcile_all=reconcile_all)
        assert report.estimates is not None
        return report.estimates

    async def check_hygiene(self) -> HygieneSummary:
        report = await self.run(hygiene=True)
        assert report.hygiene is not None
        return report.hygiene

    async def _group(self, provider: Provider) -> GroupingResult:
        aggregate = self._config.engine.aggregate
        items = await self._query(provider, [aggregate.member_type])
        engine = GroupingEngine(
            provider,
            self._config.engine,
            area_path=self._config.aggregate_area_path,
            group_delay=self._config.group_delay_seconds,
            progress=self._progress,
            dry_run=self._dry_run,
        )
        return await engine.run(items)

    async def _reconcile(
        self, provider: Provider, aggregates: list[WorkItem], *, reconcile_all: bool
    ) -> EstimateResult:
        markers = self._config.engine.markers
        candidates = [item for item in aggregates if not is_separator(item.title, markers)]
        estimate_pass = EstimatePass(provider, self._config.engine, progress=self._progress, dry_run=self._dry_run)
        return await estimate_pass.run(candidates, reconcile_all=reconcile_all)

    async def _query(self, provider: Provider, item_types: list[str]) -> list[WorkItem]:
        query = ItemQuery(area_path=self._config.area_path, item_types=item_types, limit=self._config.limit)
        self._progress.phase_start(QUERY_PHASE)
        try:
            items = await provider.query_items(query)
        except BaseException as exc:
            self._progress.phase_error(QUERY_PHASE, exc)
            raise
        self._progress.phase_done(QUERY_PHASE)
        return items

    async def _resolve_provider(self) -> Provider:
        if self._provider is None:
            token = await create_token_resolver(self._config).resolve()
            self._provider = create_provider(self._config, token=token)
            if self._dry_run:
                self._provider = DryRunProvider(self._provider)
        return self._provider
