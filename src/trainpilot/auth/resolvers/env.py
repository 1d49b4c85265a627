"""Environment token resolver."""

from __future__ import annotations

import os
from collections.abc import Sequence

from trainpilot.auth.base import TokenResolver
from trainpilot.contracts.exceptions import AuthenticationError

TOKEN_VARIABLES = ("AZURE_DEVOPS_PAT", "AZURE_DEVOPS_EXT_PAT")


class EnvTokenResolver(TokenResolver):
    def __init__(self, variables: Sequence[str] = TOKEN_VARIABLES) -> None:
        self._variables = tuple(variables)

    async def resolve(self) -> str:
        for name in self._variables:
            token = (os.getenv(name) or "").strip()
            if token:
                return token
        raise AuthenticationError(f"None of {', '.join(self._variables)} is set or non-empty")
