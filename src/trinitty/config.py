"""Runtime configuration.

There is no configuration file. Defaults live here and a couple of
environment variables can override them for debugging.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from trinitty.errors import ConfigError

DEFAULT_TICK_RATE = 0.1  # seconds

ENV_TICK_RATE = "TRINITTY_TICK_RATE"
ENV_LOG_FILE = "TRINITTY_LOG_FILE"


def _default_version() -> str:
    from trinitty import __version__
    return __version__


@dataclass(frozen=True)
class RuntimeConfig:
    """Immutable settings for one run of the application.

    Attributes:
        tick_rate: Seconds between Tick events
        version: Version string shown in the title bar
        log_file: Where to write the debug log (None disables logging)
    """
    tick_rate: float = DEFAULT_TICK_RATE
    version: str = field(default_factory=_default_version)
    log_file: Optional[Path] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.tick_rate) or not self.tick_rate > 0:
            raise ConfigError(f"tick rate must be a positive number, got {self.tick_rate!r}")
        if self.tick_rate_ns < 1:
            raise ConfigError(f"tick rate is below one nanosecond: {self.tick_rate!r}")

    @property
    def tick_rate_ns(self) -> int:
        return round(self.tick_rate * 1_000_000_000)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> RuntimeConfig:
        """Build a config from defaults plus TRINITTY_* environment overrides."""
        env = os.environ if environ is None else environ

        tick_rate = DEFAULT_TICK_RATE
        if raw := env.get(ENV_TICK_RATE):
            try:
                tick_rate = float(raw)
            except ValueError:
                raise ConfigError(f"{ENV_TICK_RATE} is not a number: {raw!r}") from None

        log_file = None
        if raw := env.get(ENV_LOG_FILE):
            log_file = Path(raw).expanduser()

        return cls(tick_rate=tick_rate, log_file=log_file)
