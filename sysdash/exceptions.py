"""
Custom exceptions for the dashboard.
"""


class DashboardError(Exception):
    """Base exception for dashboard errors."""
    pass


class ConfigError(DashboardError):
    """Raised when a configuration value is invalid."""
    pass


class SourceUnavailableError(DashboardError):
    """Raised when a raw counter cannot be read for the current tick."""

    def __init__(self, counter: str, reason: str):
        self.counter = counter
        self.reason = reason
        super().__init__(f"{counter} unavailable: {reason}")


class SurfaceInitializationError(DashboardError):
    """Raised when the terminal surface cannot be started."""
    pass
