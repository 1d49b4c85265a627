"""Token resolver factory."""

from __future__ import annotations

from trainpilot.auth.base import TokenResolver
from trainpilot.auth.resolvers.env import EnvTokenResolver
from trainpilot.auth.resolvers.static import StaticTokenResolver
from trainpilot.contracts.config import TrainPilotConfig
from trainpilot.contracts.exceptions import ConfigError

RESOLVERS: dict[str, type[TokenResolver]] = {
    "env": EnvTokenResolver,
    "token": StaticTokenResolver,
}


def create_token_resolver(config: TrainPilotConfig) -> TokenResolver:
    auth_mode = config.auth
    if auth_mode not in RESOLVERS:
        raise ConfigError(f"Unknown auth mode: {auth_mode}")

    if auth_mode == "env":
        return EnvTokenResolver()
    return StaticTokenResolver(token=config.token or "")
