"""Shared CLI formatting helpers."""

from __future__ import annotations

from trainpilot.contracts.results import Failure


def plural(count: int, noun: str, suffix: str = "s") -> str:
    return f"{count} {noun}{suffix if count != 1 else ''}"


def format_failure(failure: Failure) -> str:
    where = f" (item {failure.item_id})" if failure.item_id is not None else ""
    return f"{failure.subject}{where}: {failure.message}"


def bullet_section(title: str, entries: list[str], *, marker: str = "-") -> list[str]:
    if not entries:
        return []
    return [f"  {title}:", *(f"    {marker} {entry}" for entry in entries)]
