"""Hygiene pass formatting."""

from __future__ import annotations

from trainpilot.cli.common import plural
from trainpilot.hygiene import HygieneFinding, HygieneSummary, Severity


def _format_finding(finding: HygieneFinding) -> str:
    line = f"{finding.item_id} {finding.item_title!r} [{finding.check}] {finding.details}"
    if finding.recommendation:
        line += f" -> {finding.recommendation}"
    return line


def format_hygiene_summary(summary: HygieneSummary) -> list[str]:
    lines = [
        "  Hygiene:   {} checked, {} separator(s) skipped, {}/{} checks passed, health {:.1f}%".format(
            plural(summary.aggregates, "aggregate"),
            summary.skipped,
            summary.passed,
            len(summary.findings),
            summary.health_score,
        )
    ]
    for severity in sorted(Severity, reverse=True):
        failed = [f for f in summary.findings if not f.passed and f.severity is severity]
        if not failed:
            continue
        lines.append(f"  {severity.name.title()} ({len(failed)}):")
        lines.extend(f"    - {_format_finding(finding)}" for finding in failed)
    return lines


__all__ = ["format_hygiene_summary"]
