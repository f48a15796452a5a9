"""
Fixed-depth rolling history per tracked metric.
"""

from collections.abc import Iterable


class HistoryBuffer:
    """
    Array-backed ring of exactly `depth` values, pre-filled with zeros.

    `push` overwrites the oldest slot; `snapshot` reads newest-first.
    """

    def __init__(self, depth: int):
        if depth < 1:
            raise ValueError(f"History depth must be >= 1, got {depth}")
        self._values = [0.0] * depth
        self._head = depth - 1  # index of the newest value

    def __len__(self) -> int:
        return len(self._values)

    @property
    def depth(self) -> int:
        return len(self._values)

    def push(self, value: float) -> None:
        self._head = (self._head + 1) % len(self._values)
        self._values[self._head] = float(value)

    def snapshot(self) -> tuple[float, ...]:
        """Return all values, newest first."""
        n = len(self._values)
        return tuple(self._values[(self._head - i) % n] for i in range(n))


class HistoryStore:
    """
    Owns one HistoryBuffer per tracked metric.

    The metric set is fixed at construction; pushing to or reading an
    unknown metric raises KeyError.
    """

    def __init__(self, metric_ids: Iterable[str], depth: int):
        self._metric_ids = tuple(metric_ids)
        self._buffers: dict[str, HistoryBuffer] = {}
        self.initialize(depth)

    def initialize(self, depth: int) -> None:
        """(Re)create every buffer with `depth` zeros."""
        self.depth = depth
        self._buffers = {metric_id: HistoryBuffer(depth) for metric_id in self._metric_ids}

    @property
    def metric_ids(self) -> tuple[str, ...]:
        return self._metric_ids

    def _buffer(self, metric_id: str) -> HistoryBuffer:
        try:
            return self._buffers[metric_id]
        except KeyError:
            raise KeyError(f"Unknown metric: {metric_id!r}") from None

    def push(self, metric_id: str, value: float) -> None:
        self._buffer(metric_id).push(value)

    def snapshot(self, metric_id: str) -> tuple[float, ...]:
        return self._buffer(metric_id).snapshot()
