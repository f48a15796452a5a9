"""
Dashboard configuration.

All tunables live in a single frozen DashboardConfig. Defaults match the
layout the renderer was designed around; a handful of them can be
overridden from SYSDASH_* environment variables. The tick interval is
fixed and deliberately not read from the environment.
"""

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigError

DEFAULT_HISTORY_DEPTH = 30
DEFAULT_BAR_WIDTH = 20
DEFAULT_CHART_HEIGHT = 5
TICK_INTERVAL = 1.0

# 100 MiB/s for both channels; see DESIGN.md for the disk ceiling choice
DEFAULT_DISK_REFERENCE_MAX = 100.0 * 1024 * 1024
DEFAULT_NETWORK_REFERENCE_MAX = 100.0 * 1024 * 1024

ENV_PREFIX = "SYSDASH_"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardConfig:
    """Immutable dashboard settings."""

    history_depth: int = DEFAULT_HISTORY_DEPTH
    bar_width: int = DEFAULT_BAR_WIDTH
    chart_height: int = DEFAULT_CHART_HEIGHT
    tick_interval: float = TICK_INTERVAL
    disk_reference_max: float = DEFAULT_DISK_REFERENCE_MAX
    network_reference_max: float = DEFAULT_NETWORK_REFERENCE_MAX
    log_level: str = "WARNING"

    def __post_init__(self):
        for name in ("history_depth", "bar_width", "chart_height"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        for name in ("disk_reference_max", "network_reference_max", "tick_interval"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive number, got {value!r}")

        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ConfigError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "DashboardConfig":
        """
        Build a config from SYSDASH_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            DashboardConfig with any overrides applied

        Raises:
            ConfigError: If a variable cannot be parsed or is out of range
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        for field_name, parser in (
            ("history_depth", int),
            ("bar_width", int),
            ("chart_height", int),
            ("disk_reference_max", float),
            ("network_reference_max", float),
            ("log_level", str),
        ):
            raw = env.get(ENV_PREFIX + field_name.upper())
            if raw is None or not raw.strip():
                continue
            try:
                overrides[field_name] = parser(raw.strip())
            except ValueError as exc:
                raise ConfigError(
                    f"Invalid value for {ENV_PREFIX}{field_name.upper()}: {raw!r}"
                ) from exc

        if overrides:
            logger.debug("Config overrides from environment: %s", overrides)
        return cls(**overrides)
