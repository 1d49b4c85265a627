"""Factory for creating provider instances.

Decouples provider selection from provider implementation. The SDK uses this
factory to instantiate providers by name, without importing concrete providers.
"""

from __future__ import annotations

from typing import Any

from trainpilot.contracts.config import TrainPilotConfig
from trainpilot.contracts.exceptions import ConfigError
from trainpilot.contracts.provider import Provider
from trainpilot.providers.azure_devops import AzureDevOpsProvider

# Registry mapping provider names to their classes
_REGISTRY: dict[str, type[Provider]] = {
    "azure-devops": AzureDevOpsProvider,
}


def register(name: str, provider_cls: type[Provider]) -> None:
    """Register a provider class by name."""
    _REGISTRY[name] = provider_cls


def create_provider(config: TrainPilotConfig, *, token: str, **kwargs: Any) -> Provider:
    """Create a provider instance for *config*.

    The returned provider is an async context manager::

        async with create_provider(config, token=token) as provider:
            items = await provider.query_items(query)

    Raises:
        ConfigError: If ``config.provider`` is not registered.
    """
    provider_cls = _REGISTRY.get(config.provider)
    if provider_cls is None:
        available = ", ".join(sorted(_REGISTRY)) or "(none registered)"
        raise ConfigError(f"Unknown provider: {config.provider!r}. Available: {available}")

    return provider_cls(  # type: ignore[call-arg]
        organization=config.organization,
        project=config.project,
        token=token,
        base_url=config.resolved_base_url,
        fields=config.fields,
        timeout=config.timeout_seconds,
        max_retries=config.max_retries,
        **kwargs,
    )
