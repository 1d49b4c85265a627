"""Provider implementations and factory."""

from trainpilot.providers.dry_run import DryRunOperation, DryRunProvider
from trainpilot.providers.factory import create_provider, register

__all__ = ["DryRunOperation", "DryRunProvider", "create_provider", "register"]
