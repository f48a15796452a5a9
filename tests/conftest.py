"""Pytest configuration for the `tests/` suite.

Makes the repository root importable when the package is not installed, and
provides a deterministic sample source and clock so the pipeline can be
driven without touching the real OS counters.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    if not path.exists() or not path.is_dir():
        return

    path_str = str(path.resolve())
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_REPO_ROOT = Path(__file__).resolve().parents[1]

_prepend_sys_path(_REPO_ROOT)

from sysdash.monitor.models import MemoryPages, RawSample  # noqa: E402


class FakeClock:
    """Monotonic clock advanced by hand (or by the fake sleep)."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSampleSource:
    """Replays scripted RawSamples; repeats the last one when exhausted."""

    def __init__(
        self,
        samples: Iterable[RawSample] = (),
        page_size: int = 4096,
        total_memory: int = 16 * 1024**3,
    ):
        self._samples = list(samples)
        self._page_size = page_size
        self._total_memory = total_memory
        self.calls = 0

    def page_size(self) -> int:
        return self._page_size

    def total_memory(self) -> int:
        return self._total_memory

    def sample(self) -> RawSample:
        self.calls += 1
        if not self._samples:
            return RawSample(
                timestamp=float(self.calls),
                page_size=self._page_size,
                total_memory=self._total_memory,
            )
        if len(self._samples) > 1:
            return self._samples.pop(0)
        return self._samples[0]


def make_raw(
    timestamp: float,
    cpu: float | None = 0.0,
    pages: MemoryPages | None = None,
    disk: float | None = 0.0,
    net_in: int | None = 0,
    net_out: int | None = 0,
    page_size: int = 4096,
    total_memory: int = 16 * 1024**3,
) -> RawSample:
    return RawSample(
        timestamp=timestamp,
        cpu_load_percent=cpu,
        memory_pages=pages or MemoryPages(),
        disk_throughput=disk,
        network_in=net_in,
        network_out=net_out,
        page_size=page_size,
        total_memory=total_memory,
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_source():
    return FakeSampleSource()
