"""Token resolver implementations."""

from trainpilot.auth.resolvers.env import EnvTokenResolver
from trainpilot.auth.resolvers.static import StaticTokenResolver

__all__ = ["EnvTokenResolver", "StaticTokenResolver"]
