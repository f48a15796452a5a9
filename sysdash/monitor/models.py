"""
Data containers shared by the sampling pipeline and the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum


class MetricKind(Enum):
    """Unit class of a raw observation"""

    PERCENTAGE = "percentage"
    BYTE_RATE = "byte_rate"
    PAGE_COUNT = "page_count"


class Channel(Enum):
    """Reference-maximum class a metric is scaled against"""

    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    NETWORK = "network"


@dataclass(frozen=True)
class MetricSample:
    """One raw observation for one tracked metric on one tick"""

    name: str
    kind: MetricKind
    value: float
    timestamp: float


@dataclass
class CounterState:
    """Last reading of a cumulative counter"""

    last_value: int
    last_timestamp: float
    last_rate: float = 0.0


@dataclass(frozen=True)
class MemoryPages:
    """Memory page counts by category; categories the OS does not report are 0"""

    free: int = 0
    active: int = 0
    inactive: int = 0
    wired: int = 0
    compressed: int = 0
    file_backed: int = 0
    anonymous: int = 0


@dataclass(frozen=True)
class RawSample:
    """
    Snapshot returned by a sample source once per tick.

    None marks a counter that could not be read this tick.
    """

    timestamp: float
    cpu_load_percent: float | None = None
    memory_pages: MemoryPages = field(default_factory=MemoryPages)
    disk_throughput: float | None = None
    network_in: int | None = None
    network_out: int | None = None
    page_size: int = 4096
    total_memory: int = 0


@dataclass(frozen=True)
class MetricSpec:
    """Static description of a tracked metric"""

    name: str
    label: str
    kind: MetricKind
    channel: Channel


CPU = "cpu"
MEMORY = "memory"
DISK_IO = "disk_io"
NET_IN = "net_in"
NET_OUT = "net_out"

TRACKED_METRICS: tuple[MetricSpec, ...] = (
    MetricSpec(CPU, "cpu", MetricKind.PERCENTAGE, Channel.CPU),
    MetricSpec(MEMORY, "mem", MetricKind.PAGE_COUNT, Channel.MEMORY),
    MetricSpec(DISK_IO, "i/o", MetricKind.BYTE_RATE, Channel.DISK),
    MetricSpec(NET_IN, "net in", MetricKind.BYTE_RATE, Channel.NETWORK),
    MetricSpec(NET_OUT, "net out", MetricKind.BYTE_RATE, Channel.NETWORK),
)


@dataclass(frozen=True)
class DisplayMetric:
    """Rendering-facing view of one metric, rebuilt every tick"""

    name: str
    label: str
    current_value: float
    percentage: float
    history: tuple[float, ...]
