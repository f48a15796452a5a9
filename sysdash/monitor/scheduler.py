"""
Refresh loop: sample, compute, render, poll for quit, wait for the next tick.
"""

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from sysdash.config import TICK_INTERVAL

from .pipeline import DashboardContext, DashboardFrame, process_tick
from .sources import RawSampleSource

if TYPE_CHECKING:
    from sysdash.ui.renderer import DashboardRenderer
    from sysdash.ui.surface import RenderSurface

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Refresh loop states"""

    IDLE = "idle"
    SAMPLING = "sampling"
    COMPUTING = "computing"
    RENDERING = "rendering"
    WAITING_FOR_TICK = "waiting_for_tick"
    STOPPED = "stopped"


class CancellationToken:
    """Cooperative stop request, checked once per cycle."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to `timeout` seconds, returning early if cancelled."""
        return self._event.wait(timeout)


class RefreshScheduler:
    """
    Drives the dashboard tick loop.

    Cycles run strictly one after another. The interval is measured from
    the start of one cycle to the start of the next; a cycle that overruns
    is followed immediately by the next one.

    Attributes:
        state (SchedulerState): Current loop state
        ticks (int): Number of completed cycles
    """

    def __init__(
        self,
        source: RawSampleSource,
        context: DashboardContext,
        renderer: "DashboardRenderer",
        surface: "RenderSurface",
        interval: float = TICK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], object] | None = None,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            source: Raw sample source queried once per tick
            context: Counter and history state owned by this loop
            renderer: Draws a frame onto the surface
            surface: Terminal surface, started and stopped by run()
            interval: Seconds between cycle starts
            clock: Monotonic clock used to measure cycles
            sleep: Sleep function; defaults to the cancellation token's wait
        """
        self.source = source
        self.context = context
        self.renderer = renderer
        self.surface = surface
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self.state = SchedulerState.IDLE
        self.ticks = 0

    def run_once(self) -> DashboardFrame:
        """Run a single sample/compute/render cycle."""
        self.state = SchedulerState.SAMPLING
        raw = self.source.sample()

        self.state = SchedulerState.COMPUTING
        frame = process_tick(self.context, raw)

        self.state = SchedulerState.RENDERING
        self.surface.clear()
        self.renderer.render(self.surface, frame)
        self.surface.refresh()

        self.ticks += 1
        return frame

    def run(self, token: CancellationToken | None = None, max_ticks: int | None = None) -> int:
        """
        Run the loop until cancelled.

        Args:
            token: Cancellation token; a fresh one is used if omitted
            max_ticks: Stop after this many cycles (None runs until cancelled)

        Returns:
            Number of completed cycles

        Raises:
            SurfaceInitializationError: If the surface cannot be started
        """
        token = token or CancellationToken()
        sleep = self._sleep or token.wait

        try:
            self.surface.start()
        except Exception:
            self.state = SchedulerState.STOPPED
            raise

        try:
            while not token.cancelled:
                cycle_start = self._clock()
                self.run_once()

                self.state = SchedulerState.WAITING_FOR_TICK
                if self.surface.poll_quit():
                    logger.info("Quit requested from terminal")
                    token.cancel()
                    break
                if max_ticks is not None and self.ticks >= max_ticks:
                    break

                elapsed = self._clock() - cycle_start
                remaining = self.interval - elapsed
                if remaining > 0:
                    sleep(remaining)
                else:
                    logger.debug("Cycle overran interval by %.3fs", -remaining)
        except KeyboardInterrupt:
            logger.info("Dashboard interrupted by user")
            token.cancel()
        except Exception as exc:
            logger.error("Refresh loop error: %s", exc)
            raise
        finally:
            self.state = SchedulerState.STOPPED
            self.surface.stop()

        return self.ticks
