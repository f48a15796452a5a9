"""
Dashboard layout: title bar, labeled bars, history charts and a
statistics block, drawn onto any RenderSurface.
"""

import math

from sysdash.config import DashboardConfig
from sysdash.monitor.models import CPU, DISK_IO, MEMORY, NET_IN, NET_OUT, DisplayMetric
from sysdash.monitor.normalizer import clamp_percent
from sysdash.monitor.pipeline import DashboardFrame, MemoryBreakdown

from .surface import RenderSurface

# Color scheme
BG_COLOR = "rgb(10,10,10)"
TEXT_COLOR = "rgb(180,180,180)"
BORDER_COLOR = "rgb(70,120,140)"
TITLE_COLOR = "rgb(120,200,220)"
BAR_LOW = "rgb(50,120,50)"
BAR_MED = "rgb(200,180,50)"
BAR_HIGH = "rgb(180,50,50)"

FILLED = "█"
EMPTY = "░"

TITLE = "system monitor"
TITLE_WIDTH = 111
LABEL_WIDTH = 11

BAR_X = 2
BAR_ROWS = ((CPU, 3), (MEMORY, 5), (DISK_IO, 7), (NET_IN, 9), (NET_OUT, 11))

# (metric, chart title, x, y)
CHARTS = (
    (CPU, "cpu history", 40, 4),
    (MEMORY, "memory history", 40, 12),
    (DISK_IO, "disk i/o history", 80, 4),
    (NET_IN, "network history", 80, 12),
)

STATS_X = 2
STATS_Y = 14

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def band_color(ratio: float) -> str:
    """Three fixed bands: below 0.5 low, below 0.8 mid, otherwise high."""
    if ratio < 0.5:
        return BAR_LOW
    if ratio < 0.8:
        return BAR_MED
    return BAR_HIGH


def bar_fill(percentage: float, length: int) -> int:
    """Filled cells for a horizontal bar: floor(percentage * length / 100)."""
    return int(math.floor(clamp_percent(percentage) * length / 100.0))


def chart_fill(percentage: float, height: int) -> int:
    """Filled rows for one chart column, rounded half up."""
    return int(math.floor(clamp_percent(percentage) / 100.0 * height + 0.5))


def format_size(size_bytes: float) -> str:
    """
    Format a byte count with binary units.

    Example:
        >>> format_size(1536)
        '1.5 KB'
    """
    if not math.isfinite(size_bytes) or size_bytes < 0:
        size_bytes = 0
    size = float(size_bytes)
    unit_index = 0
    while size > 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1
    number = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{number} {SIZE_UNITS[unit_index]}"


class DashboardRenderer:
    """Draws a DashboardFrame; every write is clipped by the surface."""

    def __init__(self, config: DashboardConfig | None = None):
        config = config or DashboardConfig()
        self.bar_width = config.bar_width
        self.chart_height = config.chart_height

    def render(self, surface: RenderSurface, frame: DashboardFrame) -> None:
        self.draw_title(surface, TITLE)
        for name, row in BAR_ROWS:
            metric = frame.metrics.get(name)
            if metric is not None:
                self.draw_labeled_bar(surface, BAR_X, row, f"{metric.label}:", metric.percentage)
        self.draw_system_stats(surface, frame)
        for name, title, x, y in CHARTS:
            metric = frame.metrics.get(name)
            if metric is not None:
                self.draw_history_chart(surface, x, y, title, metric)

    def draw_title(self, surface: RenderSurface, title: str) -> None:
        text = f" {title} "
        surface.put_string((TITLE_WIDTH - len(text)) // 2, 0, text, TITLE_COLOR)
        surface.put_string(0, 1, "─" * TITLE_WIDTH, BORDER_COLOR)

    def draw_labeled_bar(
        self, surface: RenderSurface, x: int, y: int, label: str, percentage: float
    ) -> None:
        label = label.ljust(LABEL_WIDTH)
        surface.put_string(x, y, label, TEXT_COLOR)
        self.draw_bar(surface, x + len(label) + 1, y, percentage)

    def draw_bar(self, surface: RenderSurface, x: int, y: int, percentage: float) -> None:
        length = self.bar_width
        filled = bar_fill(percentage, length)
        for i in range(length):
            if i < filled:
                surface.put_string(x + i, y, FILLED, band_color(i / length))
            else:
                surface.put_string(x + i, y, EMPTY, TEXT_COLOR)

    def draw_history_chart(
        self, surface: RenderSurface, x: int, y: int, title: str, metric: DisplayMetric
    ) -> None:
        """
        Draw a boxed multi-row chart of a metric's history.

        Column 0 holds the newest value. Each column fills
        round(percentage / 100 * height) rows from the bottom, colored by
        the row's position in the chart.
        """
        height = self.chart_height
        width = len(metric.history)

        surface.put_string(x, y - 1, title, TITLE_COLOR)

        surface.put_string(x, y - 2, "─" * width, BORDER_COLOR)
        surface.put_string(x, y + height, "─" * width, BORDER_COLOR)
        surface.put_string(x - 1, y - 2, "┌", BORDER_COLOR)
        surface.put_string(x + width, y - 2, "┐", BORDER_COLOR)
        surface.put_string(x - 1, y + height, "└", BORDER_COLOR)
        surface.put_string(x + width, y + height, "┘", BORDER_COLOR)
        for h in range(height):
            surface.put_string(x - 1, y + h, "│", BORDER_COLOR)

        for i, value in enumerate(metric.history):
            filled = chart_fill(value, height)
            for line in range(height):
                row = y + (height - line - 1)
                if line < filled:
                    surface.put_string(x + i, row, FILLED, band_color(line / height))
                else:
                    surface.put_string(x + i, row, " ", TEXT_COLOR)

    def draw_system_stats(self, surface: RenderSurface, frame: DashboardFrame) -> None:
        metrics = frame.metrics

        def current(name: str) -> float:
            metric = metrics.get(name)
            return metric.current_value if metric is not None else 0.0

        surface.put_string(STATS_X, STATS_Y, "system statistics:", TITLE_COLOR)
        lines = [
            f"cpu usage:    {clamp_percent(current(CPU)):5.1f}%",
            f"memory usage: {clamp_percent(current(MEMORY)):5.1f}%",
            f"i/o:           {format_size(current(DISK_IO))}/s",
            f"network in:    {format_size(current(NET_IN))}/s",
            f"network out:   {format_size(current(NET_OUT))}/s",
        ]
        for offset, line in enumerate(lines, 1):
            surface.put_string(STATS_X, STATS_Y + offset, line, TEXT_COLOR)

        self.draw_memory_stats(surface, STATS_X, STATS_Y + 7, frame.memory)

    def draw_memory_stats(
        self, surface: RenderSurface, x: int, y: int, memory: MemoryBreakdown
    ) -> None:
        surface.put_string(x, y, "physical memory:", TITLE_COLOR)
        rows = (
            ("total:", memory.total),
            ("memory used + cached:", memory.used_and_cached),
            ("memory used:", memory.used),
            ("wired memory:", memory.wired),
            ("cached files:", memory.cached_files),
            ("compressed:", memory.compressed),
            ("free:", memory.free),
        )
        for offset, (label, value) in enumerate(rows, 1):
            surface.put_string(x, y + offset, f"{label:<24}{format_size(value)}", TEXT_COLOR)
