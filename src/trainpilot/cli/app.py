"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from trainpilot import AuthenticationError, ConfigError, ProviderError


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    import trainpilot.cli as cli

    if verbose:
        level = cli.logging.DEBUG
    elif quiet:
        level = cli.logging.ERROR
    else:
        level = cli.logging.WARNING
    cli.logging.basicConfig(level=level, format="%(name)s %(message)s", stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    import trainpilot.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)
    if not any(cli.selected_passes(args).values()):
        parser.error("select at least one pass: --grouping, --estimates, --estimates-all, --hygiene")

    _configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        report = cli.asyncio.run(cli._run_passes(args))
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (AuthenticationError, ProviderError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except Exception as exc:  # pragma: no cover
        print(f"error: {exc}", file=sys.stderr)
        return 1

    return 5 if report.has_failures else 0


__all__ = ["main"]
