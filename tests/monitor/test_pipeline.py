"""
Tests for the per-tick pipeline.
"""

import pytest
from conftest import make_raw

from sysdash.config import DashboardConfig
from sysdash.monitor.models import (
    CPU,
    DISK_IO,
    MEMORY,
    NET_IN,
    NET_OUT,
    TRACKED_METRICS,
    Channel,
    MemoryPages,
    MetricKind,
)
from sysdash.monitor.pipeline import (
    DashboardContext,
    MemoryBreakdown,
    build_samples,
    memory_usage_percent,
    process_tick,
)

PAGE = 4096
TOTAL = 1000 * PAGE


@pytest.fixture
def context():
    config = DashboardConfig(history_depth=5)
    return DashboardContext.create(config, page_size=PAGE, total_memory=TOTAL)


def raw(timestamp, **kwargs):
    kwargs.setdefault("page_size", PAGE)
    kwargs.setdefault("total_memory", TOTAL)
    return make_raw(timestamp, **kwargs)


def test_one_sample_per_tracked_metric(context):
    samples = build_samples(context, raw(0.0, cpu=12.0))

    assert [s.name for s in samples] == [spec.name for spec in TRACKED_METRICS]
    assert all(s.timestamp == 0.0 for s in samples)
    kinds = {s.name: s.kind for s in samples}
    assert kinds[CPU] is MetricKind.PERCENTAGE
    assert kinds[MEMORY] is MetricKind.PAGE_COUNT
    assert kinds[NET_IN] is MetricKind.BYTE_RATE


def test_every_metric_pushed_each_tick(context):
    process_tick(context, raw(0.0, cpu=10.0))
    frame = process_tick(context, raw(1.0, cpu=20.0))

    for spec in TRACKED_METRICS:
        assert len(frame.metrics[spec.name].history) == 5
    assert frame.metrics[CPU].history[:3] == (20.0, 10.0, 0.0)


def test_nan_cpu_normalizes_to_zero(context):
    frame = process_tick(context, raw(0.0, cpu=float("nan")))

    cpu = frame.metrics[CPU]
    assert cpu.percentage == 0.0
    assert cpu.current_value == 0.0
    assert cpu.history[0] == 0.0


def test_unavailable_values_become_zero(context):
    frame = process_tick(context, raw(0.0, cpu=None, disk=None, net_in=None, net_out=None))

    for name in (CPU, DISK_IO, NET_IN, NET_OUT):
        assert frame.metrics[name].percentage == 0.0
        assert frame.metrics[name].current_value == 0.0


def test_unavailable_network_keeps_baseline(context):
    process_tick(context, raw(0.0, net_in=1000))
    process_tick(context, raw(1.0, net_in=None))
    frame = process_tick(context, raw(2.0, net_in=3000))

    # 2000 bytes over the two seconds since the last readable value
    assert frame.metrics[NET_IN].current_value == pytest.approx(1000.0)


def test_network_rate_scenario(context):
    process_tick(context, raw(0.0, net_in=1000))
    frame = process_tick(context, raw(1.0, net_in=2048576))

    net_in = frame.metrics[NET_IN]
    assert net_in.current_value == pytest.approx(2047576.0)
    assert 1.0 < net_in.percentage < 10.0


def test_flat_network_counter(context):
    process_tick(context, raw(0.0, net_in=1000, net_out=1000))
    frame = process_tick(context, raw(1.0, net_in=1000, net_out=1000))

    assert frame.metrics[NET_IN].current_value == 0.0
    assert frame.metrics[NET_OUT].current_value == 0.0


def test_counter_reset_scenario(context):
    process_tick(context, raw(0.0, net_out=5000))
    frame = process_tick(context, raw(1.0, net_out=10))

    assert frame.metrics[NET_OUT].current_value == 0.0
    assert frame.metrics[NET_OUT].percentage == 0.0


def test_memory_usage_from_pages(context):
    pages = MemoryPages(active=100, inactive=50, wired=75, compressed=25, free=700)
    assert memory_usage_percent(context, pages) == pytest.approx(25.0)

    frame = process_tick(context, raw(0.0, pages=pages))
    assert frame.metrics[MEMORY].percentage == pytest.approx(25.0)
    assert frame.metrics[MEMORY].current_value == pytest.approx(25.0)


def test_memory_with_unknown_total_is_zero():
    context = DashboardContext.create(DashboardConfig(), page_size=PAGE, total_memory=0)
    pages = MemoryPages(active=100)
    assert memory_usage_percent(context, pages) == 0.0


def test_disk_throughput_against_reference(context):
    frame = process_tick(context, raw(0.0, disk=50 * 1024 * 1024))
    assert frame.metrics[DISK_IO].percentage == pytest.approx(50.0)
    assert frame.metrics[DISK_IO].current_value == pytest.approx(50 * 1024 * 1024)


def test_memory_breakdown():
    pages = MemoryPages(
        free=10, active=20, inactive=30, wired=40, compressed=50, file_backed=60, anonymous=5
    )
    breakdown = MemoryBreakdown.from_pages(pages, page_size=2, total=1000)

    assert breakdown.total == 1000
    assert breakdown.used_and_cached == (20 + 30 + 40 + 50) * 2
    assert breakdown.used == (20 + 5) * 2
    assert breakdown.wired == 80
    assert breakdown.cached_files == 120
    assert breakdown.compressed == 100
    assert breakdown.free == 20


def test_context_uses_configured_reference():
    config = DashboardConfig(network_reference_max=1000.0)
    context = DashboardContext.create(config, page_size=PAGE, total_memory=TOTAL)

    process_tick(context, raw(0.0, net_in=0))
    frame = process_tick(context, raw(1.0, net_in=500))
    assert frame.metrics[NET_IN].percentage == pytest.approx(50.0)


def test_context_keeps_memory_geometry(context):
    assert context.page_size == PAGE
    assert context.total_memory == TOTAL
    assert context.normalizer.reference_max(Channel.MEMORY) == 1000
