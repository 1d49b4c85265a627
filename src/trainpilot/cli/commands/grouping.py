"""Grouping pass formatting."""

from __future__ import annotations

from trainpilot.cli.common import bullet_section, format_failure, plural
from trainpilot.contracts.results import GroupingResult, Operation, OperationKind


def _format_operation(operation: Operation) -> str:
    members = plural(operation.total_members, "member")
    if operation.kind is OperationKind.CREATED:
        line = f"+ created {operation.aggregate_id} {operation.title!r} ({members})"
        if operation.replaced_id is not None:
            line += f", replaces missing {operation.replaced_id}"
        return line
    return f"~ updated {operation.aggregate_id} {operation.title!r} ({members}, {operation.new_relations} new)"


def format_grouping_summary(result: GroupingResult) -> list[str]:
    lines = [
        "  Grouping:  {}, {} created, {} updated, {}".format(
            plural(result.groups, "group"),
            len(result.created),
            len(result.updated),
            plural(result.new_relations, "new relation"),
        )
    ]
    lines.extend(f"    {_format_operation(operation)}" for operation in result.operations)
    if not result.groups:
        lines.append("    no grouping markers found")
    lines.extend(bullet_section("Warnings", list(result.warnings)))
    lines.extend(bullet_section("Failures", [format_failure(f) for f in result.failures], marker="!"))
    return lines


__all__ = ["format_grouping_summary"]
