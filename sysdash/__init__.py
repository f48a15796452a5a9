"""Sysdash - live terminal dashboard for system resource counters."""

from .config import DashboardConfig
from .exceptions import (
    ConfigError,
    DashboardError,
    SourceUnavailableError,
    SurfaceInitializationError,
)

__version__ = "0.1.0"

__all__ = [
    "DashboardConfig",
    "DashboardError",
    "ConfigError",
    "SourceUnavailableError",
    "SurfaceInitializationError",
]
