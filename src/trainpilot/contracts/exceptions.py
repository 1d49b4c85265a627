"""Exception hierarchy for TrainPilot."""

from __future__ import annotations


class TrainPilotError(Exception):
    """Base exception for all TrainPilot errors."""


class ConfigError(TrainPilotError):
    """Configuration loading or validation failure."""


class ProviderError(TrainPilotError):
    """Base provider operation failure."""


class AuthenticationError(ProviderError):
    """Authentication/authorization failure."""


class ItemNotFoundError(ProviderError):
    """The upstream service reported that a work item does not exist."""

    def __init__(self, message: str, *, item_id: int) -> None:
        super().__init__(message)
        self.item_id = item_id
