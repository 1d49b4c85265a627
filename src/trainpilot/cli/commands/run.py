"""Run command: execute the selected passes and print a summary."""

from __future__ import annotations

import argparse

from trainpilot.cli.commands.estimates import format_estimate_summary
from trainpilot.cli.commands.grouping import format_grouping_summary
from trainpilot.cli.commands.hygiene import format_hygiene_summary
from trainpilot.cli.parser import selected_passes
from trainpilot.cli.progress.rich import RichRunProgress
from trainpilot.contracts.config import TrainPilotConfig
from trainpilot.sdk import RunReport


def format_run_summary(report: RunReport, config: TrainPilotConfig) -> str:
    mode = "dry-run" if report.dry_run else "apply"
    lines = [
        "",
        f"trainpilot - run complete ({mode})",
        "",
        f"  Project:   {config.organization}/{config.project}",
        f"  Area:      {config.area_path}",
        "",
    ]
    if report.grouping is not None:
        lines.extend(format_grouping_summary(report.grouping))
        lines.append("")
    if report.estimates is not None:
        lines.extend(format_estimate_summary(report.estimates))
        lines.append("")
    if report.hygiene is not None:
        lines.extend(format_hygiene_summary(report.hygiene))
        lines.append("")

    if report.has_failures:
        lines.append("  Status:    completed with failures")
    if report.dry_run:
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_passes(args: argparse.Namespace) -> RunReport:
    import trainpilot.cli as cli

    config = cli.apply_overrides(cli.load_config(args.config), area_path=args.area_path, limit=args.limit)
    passes = selected_passes(args)

    if not args.verbose and not args.quiet:
        with RichRunProgress() as progress:
            pilot = await cli.TrainPilot.from_config(config, progress=progress, dry_run=args.dry_run)
            report = await pilot.run(**passes)
    else:
        pilot = await cli.TrainPilot.from_config(config, dry_run=args.dry_run)
        report = await pilot.run(**passes)

    print(cli._format_summary(report, config))
    return report


__all__ = ["format_run_summary", "run_passes"]
