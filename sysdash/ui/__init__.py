from .renderer import DashboardRenderer, band_color, format_size
from .surface import CellGrid, RenderSurface, TerminalSurface

__all__ = [
    "DashboardRenderer",
    "band_color",
    "format_size",
    "CellGrid",
    "RenderSurface",
    "TerminalSurface",
]
