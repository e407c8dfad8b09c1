"""The object handed to every provisioning operation."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .core.config import BuildConfig
from .runner import Runner


@dataclass(frozen=True)
class BuildContext:
    config: BuildConfig
    runner: Runner
    # Snapshot of the Dockerfile environment (PHP_VERSION, CONFIGURE_PHP_FPM).
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))

    def env_flag(self, name: str) -> bool:
        return env_flag(self.environ.get(name))


def env_flag(value: str | None) -> bool:
    """Interpret an environment variable as a boolean switch."""
    return (value or "").strip().lower() in ("1", "true", "yes", "on")
