"""
Raw sample sources.

A sample source supplies one RawSample per tick. The psutil-backed source
is the default; tests plug in a deterministic fake that implements the
same protocol.
"""

import logging
import mmap
import re
import time
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

import psutil

from sysdash.exceptions import SourceUnavailableError

from .models import MemoryPages, RawSample
from .rates import RateComputer

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOOPBACK = re.compile(r"^lo\d*$|loopback", re.IGNORECASE)

# psutil.virtual_memory() field -> MemoryPages field; absent fields read as 0
_MEMORY_FIELDS = {
    "free": "free",
    "active": "active",
    "inactive": "inactive",
    "wired": "wired",
    "cached": "file_backed",
}


class RawSampleSource(Protocol):
    """Capability consumed by the refresh loop."""

    def page_size(self) -> int: ...

    def total_memory(self) -> int: ...

    def sample(self) -> RawSample: ...


def is_loopback(interface: str) -> bool:
    return bool(_LOOPBACK.search(interface))


class PsutilSampleSource:
    """Collects raw counters through psutil."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._disk_rates = RateComputer()
        self._page_size: int | None = None
        self._total_memory: int | None = None
        # Prime cpu_percent so the first real reading covers a full tick
        self._guarded("cpu", lambda: psutil.cpu_percent(interval=None))

    def page_size(self) -> int:
        """Memory page size in bytes, queried once."""
        if self._page_size is None:
            self._page_size = mmap.PAGESIZE
        return self._page_size

    def total_memory(self) -> int:
        """Total physical memory in bytes, queried once."""
        if self._total_memory is None:
            total = self._guarded("total_memory", lambda: psutil.virtual_memory().total)
            self._total_memory = int(total) if total else 0
        return self._total_memory

    def _guarded(self, counter: str, read: Callable[[], T]) -> T | None:
        """Run one counter read; failures are logged and reported as None."""
        try:
            return read()
        except SourceUnavailableError as exc:
            logger.warning("%s", exc)
        except (psutil.Error, OSError, RuntimeError, ValueError) as exc:
            logger.warning("%s unavailable: %s", counter, exc)
        return None

    def _read_memory_pages(self) -> MemoryPages:
        vm: Any = psutil.virtual_memory()
        page_size = self.page_size()
        pages = {
            target: int(getattr(vm, source_name, 0) or 0) // page_size
            for source_name, target in _MEMORY_FIELDS.items()
        }
        return MemoryPages(**pages)

    def _read_disk_throughput(self, now: float) -> float:
        counters = psutil.disk_io_counters()
        if counters is None:
            raise SourceUnavailableError("disk", "no disk counters reported")
        total = counters.read_bytes + counters.write_bytes
        return self._disk_rates.compute_rate("disk", total, now)

    def _read_network_totals(self) -> tuple[int, int]:
        per_nic = psutil.net_io_counters(pernic=True)
        if not per_nic:
            raise SourceUnavailableError("network", "no interfaces reported")
        total_in = 0
        total_out = 0
        for name, counters in per_nic.items():
            if is_loopback(name):
                continue
            total_in += counters.bytes_recv
            total_out += counters.bytes_sent
        return total_in, total_out

    def sample(self) -> RawSample:
        """Collect one snapshot; unreadable counters come back as None."""
        now = self._clock()

        cpu = self._guarded("cpu", lambda: float(psutil.cpu_percent(interval=None)))
        memory = self._guarded("memory", self._read_memory_pages)
        disk = self._guarded("disk", lambda: self._read_disk_throughput(now))
        network = self._guarded("network", self._read_network_totals)

        return RawSample(
            timestamp=now,
            cpu_load_percent=cpu,
            memory_pages=memory if memory is not None else MemoryPages(),
            disk_throughput=disk,
            network_in=network[0] if network is not None else None,
            network_out=network[1] if network is not None else None,
            page_size=self.page_size(),
            total_memory=self.total_memory(),
        )
