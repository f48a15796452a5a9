"""
Rate computation for cumulative OS counters.
"""

import logging
import math

from .models import CounterState

logger = logging.getLogger(__name__)


class RateComputer:
    """
    Converts cumulative byte counters into bytes/second.

    Holds one CounterState per counter id. A decreasing reading (counter
    reset, wraparound, restarted interface) yields a zero delta for that
    tick and the new value becomes the baseline.
    """

    def __init__(self) -> None:
        self._counters: dict[str, CounterState] = {}

    def compute_rate(self, counter_id: str, value: int, now: float) -> float:
        """
        Compute the rate for a counter since its previous reading.

        Args:
            counter_id: Identifier of the cumulative counter
            value: Current cumulative value
            now: Monotonic timestamp of the reading in seconds

        Returns:
            Finite, non-negative rate in units per second (0.0 on first call)
        """
        state = self._counters.get(counter_id)
        if state is None:
            self._counters[counter_id] = CounterState(last_value=value, last_timestamp=now)
            return 0.0

        elapsed = now - state.last_timestamp
        if not elapsed > 0:
            logger.debug("Non-positive elapsed time for %s (%.6fs)", counter_id, elapsed)
            return state.last_rate

        delta = value - state.last_value
        if delta < 0:
            logger.debug(
                "Counter %s went backwards (%d -> %d), treating as reset",
                counter_id,
                state.last_value,
                value,
            )
            delta = 0

        rate = delta / elapsed
        if not math.isfinite(rate):
            rate = 0.0

        state.last_value = value
        state.last_timestamp = now
        state.last_rate = rate
        return rate

    def state(self, counter_id: str) -> CounterState | None:
        """Return the tracked state for a counter, if any."""
        return self._counters.get(counter_id)
