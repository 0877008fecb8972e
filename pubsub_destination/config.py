"""
Adapter configuration.

Process-level settings read from the environment. Per-destination settings
(credentials, project, topic map) arrive with the destination configuration.
"""

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass
class AdapterConfig:
    """Environment configuration for the Pub/Sub destination."""

    emulator_host: str | None = None
    publish_timeout: float | None = None

    @classmethod
    def from_env(cls) -> "AdapterConfig":
        """Load configuration from environment variables."""
        timeout = os.getenv("PUBSUB_PUBLISH_TIMEOUT")
        return cls(
            emulator_host=os.getenv("PUBSUB_EMULATOR_HOST") or None,
            publish_timeout=float(timeout) if timeout else None,
        )

    @property
    def using_emulator(self) -> bool:
        """Check if using the Pub/Sub emulator."""
        return bool(self.emulator_host)


@lru_cache()
def get_adapter_config() -> AdapterConfig:
    """Get adapter configuration singleton."""
    return AdapterConfig.from_env()
