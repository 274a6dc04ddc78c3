"""Runtime settings for realuser, read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from realuser.errors import ConfigurationError

# Linux PID_MAX_LIMIT. No valid ancestry chain is longer.
DEFAULT_MAX_HOPS = 4194304
BACKENDS = ("auto", "procfs", "psutil")


@dataclass(slots=True, frozen=True)
class Settings:
    """Immutable resolver settings."""

    proc_root: str = "/proc"
    backend: str = "auto"  # 'auto', 'procfs' or 'psutil'
    max_hops: int = DEFAULT_MAX_HOPS
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"unknown backend {self.backend!r}, expected one of {', '.join(BACKENDS)}"
            )
        # Minimum of one hop
        object.__setattr__(self, "max_hops", max(1, self.max_hops))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from ``REALUSER_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigurationError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ

        raw_hops = env.get("REALUSER_MAX_HOPS", str(DEFAULT_MAX_HOPS))
        try:
            max_hops = int(raw_hops)
        except ValueError:
            raise ConfigurationError(f"REALUSER_MAX_HOPS must be an integer, got {raw_hops!r}") from None

        return cls(
            proc_root=env.get("REALUSER_PROC_ROOT", "/proc"),
            backend=env.get("REALUSER_BACKEND", "auto").lower(),
            max_hops=max_hops,
            log_level=env.get("REALUSER_LOG_LEVEL", "WARNING").upper(),
        )
