"""Config loading exports."""

from trainpilot.config.loader import apply_overrides, load_config

__all__ = ["apply_overrides", "load_config"]
