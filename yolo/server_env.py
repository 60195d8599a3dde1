"""The deployment environment the server runs in."""

from __future__ import annotations

from enum import Enum


class ServerEnv(Enum):
    """Names the environment-specific configuration file to load."""

    LOCAL = "local"
    PRODUCTION = "production"

    @classmethod
    def parse(cls, value: str) -> ServerEnv:
        """Parse an environment name, ignoring case.

        Raises ValueError for names that are not supported.
        """
        lowered = value.lower()
        for env in cls:
            if env.value == lowered:
                return env
        raise ValueError(f"{lowered} is not supported environment value")

    def __str__(self) -> str:
        return self.value