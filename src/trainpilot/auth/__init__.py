"""Authentication token resolution."""

from trainpilot.auth.base import TokenResolver
from trainpilot.auth.factory import create_token_resolver
from trainpilot.auth.resolvers import EnvTokenResolver, StaticTokenResolver

__all__ = ["EnvTokenResolver", "StaticTokenResolver", "TokenResolver", "create_token_resolver"]
