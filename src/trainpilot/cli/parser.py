"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

_MAX_LIMIT = 10000


def _package_version() -> str:
    try:
        return version("trainpilot")
    except PackageNotFoundError:
        return "0.0.0"


def _limit(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid limit: {value!r}") from exc
    if not 1 <= parsed <= _MAX_LIMIT:
        raise argparse.ArgumentTypeError(f"limit must be between 1 and {_MAX_LIMIT}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trainpilot")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run grouping, estimate and/or hygiene passes")
    run_parser.add_argument("--config", default="./trainpilot.json", help="Path to trainpilot.json")

    passes = run_parser.add_argument_group("passes (at least one is required)")
    passes.add_argument("--grouping", action="store_true", help="Create and update aggregates from title markers")
    passes.add_argument(
        "--estimates",
        action="store_true",
        help="Reconcile estimates on trainpilot-authored aggregates; only report drift on the others",
    )
    passes.add_argument(
        "--estimates-all",
        action="store_true",
        help="Reconcile estimates on every aggregate, including manually authored ones",
    )
    passes.add_argument("--hygiene", action="store_true", help="Run hygiene checks on aggregates")

    run_parser.add_argument("--area-path", default=None, help="Override the configured area path")
    run_parser.add_argument("--limit", type=_limit, default=None, help=f"Maximum items to query (1-{_MAX_LIMIT})")
    run_parser.add_argument("--dry-run", action="store_true", help="Record writes instead of sending them")

    volume = run_parser.add_mutually_exclusive_group()
    volume.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    volume.add_argument("--quiet", "-q", action="store_true", help="Only log errors")

    return parser


def selected_passes(args: argparse.Namespace) -> dict[str, bool]:
    return {
        "grouping": args.grouping,
        "estimates": args.estimates or args.estimates_all,
        "reconcile_all": args.estimates_all,
        "hygiene": args.hygiene,
    }


__all__ = ["build_parser", "selected_passes"]
