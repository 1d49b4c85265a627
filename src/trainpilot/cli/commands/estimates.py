"""Estimate pass formatting."""

from __future__ import annotations

from trainpilot.cli.common import bullet_section, format_failure, plural
from trainpilot.contracts.results import EstimateOutcome, EstimateResult
from trainpilot.engine.estimates import format_estimate


def _format_outcome(outcome: EstimateOutcome) -> str:
    current = "none" if outcome.current is None else format_estimate(outcome.current)
    total = format_estimate(outcome.total)
    if outcome.updated:
        return f"~ {outcome.aggregate_id} {outcome.title!r}: {current} -> {total}"
    if outcome.warning is not None:
        return f"? {outcome.aggregate_id} {outcome.title!r}: stored {current}, members sum to {total}"
    return f"= {outcome.aggregate_id} {outcome.title!r}: {total}"


def format_estimate_summary(result: EstimateResult) -> list[str]:
    lines = [
        "  Estimates: {}, {} updated, {} mismatched, {} skipped".format(
            plural(len(result.outcomes), "aggregate"),
            len(result.updated),
            len(result.mismatched),
            len(result.skipped),
        )
    ]
    lines.extend(f"    {_format_outcome(outcome)}" for outcome in result.outcomes)
    lines.extend(bullet_section("Skipped", list(result.skipped)))
    lines.extend(bullet_section("Warnings", list(result.warnings)))
    lines.extend(bullet_section("Failures", [format_failure(f) for f in result.failures], marker="!"))
    return lines


__all__ = ["format_estimate_summary"]
