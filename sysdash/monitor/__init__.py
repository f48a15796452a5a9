from .history import HistoryBuffer, HistoryStore
from .models import (
    Channel,
    CounterState,
    DisplayMetric,
    MemoryPages,
    MetricKind,
    MetricSample,
    RawSample,
)
from .normalizer import MetricNormalizer
from .pipeline import DashboardContext, DashboardFrame, MemoryBreakdown, process_tick
from .rates import RateComputer
from .scheduler import CancellationToken, RefreshScheduler, SchedulerState
from .sources import PsutilSampleSource, RawSampleSource

__all__ = [
    "Channel",
    "CounterState",
    "DisplayMetric",
    "MemoryPages",
    "MetricKind",
    "MetricSample",
    "RawSample",
    "RateComputer",
    "MetricNormalizer",
    "HistoryBuffer",
    "HistoryStore",
    "DashboardContext",
    "DashboardFrame",
    "MemoryBreakdown",
    "process_tick",
    "PsutilSampleSource",
    "RawSampleSource",
    "CancellationToken",
    "RefreshScheduler",
    "SchedulerState",
]
