"""
Per-tick computation: raw snapshot -> samples -> percentages -> history.
"""

import logging
import math
from dataclasses import dataclass

from sysdash.config import DashboardConfig

from .history import HistoryStore
from .models import (
    CPU,
    DISK_IO,
    MEMORY,
    NET_IN,
    NET_OUT,
    TRACKED_METRICS,
    Channel,
    DisplayMetric,
    MemoryPages,
    MetricKind,
    MetricSample,
    MetricSpec,
    RawSample,
)
from .normalizer import MetricNormalizer
from .rates import RateComputer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryBreakdown:
    """Physical memory figures in bytes"""

    total: int
    used_and_cached: int
    used: int
    wired: int
    cached_files: int
    compressed: int
    free: int

    @classmethod
    def from_pages(cls, pages: MemoryPages, page_size: int, total: int) -> "MemoryBreakdown":
        return cls(
            total=total,
            used_and_cached=used_pages(pages) * page_size,
            used=(pages.active + pages.anonymous) * page_size,
            wired=pages.wired * page_size,
            cached_files=pages.file_backed * page_size,
            compressed=pages.compressed * page_size,
            free=pages.free * page_size,
        )


@dataclass(frozen=True)
class DashboardFrame:
    """Everything the renderer needs for one tick"""

    metrics: dict[str, DisplayMetric]
    memory: MemoryBreakdown


def used_pages(pages: MemoryPages) -> int:
    return pages.active + pages.inactive + pages.wired + pages.compressed


@dataclass
class DashboardContext:
    """
    State owned by the refresh loop.

    Counter baselines and history buffers live here and are only touched
    from the loop that owns the context.
    """

    rates: RateComputer
    history: HistoryStore
    normalizer: MetricNormalizer
    page_size: int = 4096
    total_memory: int = 0
    specs: tuple[MetricSpec, ...] = TRACKED_METRICS

    @classmethod
    def create(
        cls, config: DashboardConfig, page_size: int, total_memory: int
    ) -> "DashboardContext":
        """
        Build a context for a source with the given memory geometry.

        Args:
            config: Dashboard settings
            page_size: Memory page size in bytes
            total_memory: Total physical memory in bytes

        Returns:
            Fresh context with zero-filled histories
        """
        total_pages = total_memory / page_size if page_size > 0 else 0.0
        normalizer = MetricNormalizer(
            {
                Channel.MEMORY: total_pages,
                Channel.DISK: config.disk_reference_max,
                Channel.NETWORK: config.network_reference_max,
            }
        )
        history = HistoryStore((spec.name for spec in TRACKED_METRICS), config.history_depth)
        return cls(
            rates=RateComputer(),
            history=history,
            normalizer=normalizer,
            page_size=page_size,
            total_memory=total_memory,
        )


def build_samples(context: DashboardContext, raw: RawSample) -> tuple[MetricSample, ...]:
    """
    Turn a raw snapshot into one MetricSample per tracked metric.

    Network counters are differenced into rates here. Unavailable values
    become 0.0.
    """
    now = raw.timestamp

    if raw.network_in is not None:
        net_in = context.rates.compute_rate(NET_IN, raw.network_in, now)
    else:
        net_in = 0.0
    if raw.network_out is not None:
        net_out = context.rates.compute_rate(NET_OUT, raw.network_out, now)
    else:
        net_out = 0.0

    values = {
        CPU: raw.cpu_load_percent,
        MEMORY: float(used_pages(raw.memory_pages)),
        DISK_IO: raw.disk_throughput,
        NET_IN: net_in,
        NET_OUT: net_out,
    }

    samples = []
    for spec in context.specs:
        value = values.get(spec.name)
        if value is None or math.isnan(value):
            logger.debug("%s unavailable this tick", spec.name)
            value = 0.0
        samples.append(MetricSample(spec.name, spec.kind, float(value), now))
    return tuple(samples)


def memory_usage_percent(context: DashboardContext, pages: MemoryPages) -> float:
    return context.normalizer.normalize(MetricKind.PAGE_COUNT, used_pages(pages), Channel.MEMORY)


def process_tick(context: DashboardContext, raw: RawSample) -> DashboardFrame:
    """
    Run one tick of the pipeline.

    Every tracked metric gets exactly one history push per call.
    """
    samples = build_samples(context, raw)
    specs = {spec.name: spec for spec in context.specs}

    metrics: dict[str, DisplayMetric] = {}
    for sample in samples:
        spec = specs[sample.name]
        percentage = context.normalizer.normalize(sample.kind, sample.value, spec.channel)
        context.history.push(sample.name, percentage)

        # byte rates keep bytes/sec for the numeric readout
        current = sample.value if sample.kind is MetricKind.BYTE_RATE else percentage

        metrics[sample.name] = DisplayMetric(
            name=sample.name,
            label=spec.label,
            current_value=current,
            percentage=percentage,
            history=context.history.snapshot(sample.name),
        )

    memory = MemoryBreakdown.from_pages(raw.memory_pages, raw.page_size, raw.total_memory)
    return DashboardFrame(metrics=metrics, memory=memory)
