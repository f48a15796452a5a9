"""Sysdash CLI - main entry point.

Builds the sample source, pipeline state, renderer and terminal surface,
then hands control to the refresh loop until the user quits.
"""

import argparse
import logging
import signal
import sys

from rich.console import Console

from sysdash import __version__
from sysdash.config import DashboardConfig
from sysdash.exceptions import ConfigError, SurfaceInitializationError
from sysdash.monitor.pipeline import DashboardContext
from sysdash.monitor.scheduler import CancellationToken, RefreshScheduler
from sysdash.monitor.sources import PsutilSampleSource
from sysdash.ui.renderer import BG_COLOR, DashboardRenderer
from sysdash.ui.surface import TerminalSurface

logger = logging.getLogger(__name__)

console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysdash",
        description="Live terminal dashboard for CPU, memory, disk and network activity",
        epilog="Press q to quit.",
    )
    parser.add_argument("--version", "-V", action="version", version=f"sysdash {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write log messages to PATH instead of stderr",
    )
    return parser


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure root logging; the dashboard owns the screen, so prefer a file."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        filename=log_file,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def install_signal_handlers(token: CancellationToken) -> None:
    """Turn SIGINT/SIGTERM into a cooperative stop request."""

    def _handle(signum, _frame):
        logger.info("Received signal %s, stopping", signum)
        token.cancel()

    signal.signal(signal.SIGINT, _handle)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _handle)


def run_dashboard(config: DashboardConfig) -> int:
    """Run the dashboard until quit; returns a process exit code."""
    source = PsutilSampleSource()
    context = DashboardContext.create(config, source.page_size(), source.total_memory())
    renderer = DashboardRenderer(config)
    surface = TerminalSurface(background=BG_COLOR)
    scheduler = RefreshScheduler(source, context, renderer, surface, interval=config.tick_interval)

    token = CancellationToken()
    install_signal_handlers(token)

    try:
        ticks = scheduler.run(token)
    except SurfaceInitializationError as e:
        console.print(f"Error: {e}", style="red")
        return 1

    logger.info("Dashboard stopped after %d ticks", ticks)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the sysdash CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = DashboardConfig.from_env()
    except ConfigError as e:
        console.print(f"Error: {e}", style="red")
        return 1

    setup_logging("DEBUG" if args.verbose else config.log_level, args.log_file)

    try:
        return run_dashboard(config)
    except KeyboardInterrupt:
        console.print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main() or 0)
