"""
Maps raw metric values onto the 0-100 display scale.
"""

import math
from collections.abc import Mapping

from .models import Channel, MetricKind


def clamp_percent(value: float) -> float:
    """Clamp to [0, 100]; NaN and -inf become 0, +inf becomes 100."""
    if math.isnan(value):
        return 0.0
    return max(0.0, min(100.0, value))


class MetricNormalizer:
    """
    Scales raw values against a per-channel reference maximum.

    PERCENTAGE values are only clamped. BYTE_RATE and PAGE_COUNT values are
    divided by the reference maximum registered for their channel. A missing
    or non-positive reference yields 0.
    """

    def __init__(self, reference_maxima: Mapping[Channel, float]):
        self._reference = dict(reference_maxima)

    def reference_max(self, channel: Channel) -> float:
        return self._reference.get(channel, 0.0)

    def normalize(
        self, kind: MetricKind, raw_value: float | None, channel: Channel | None = None
    ) -> float:
        """
        Normalize a raw value to a percentage.

        Args:
            kind: Unit class of the value
            raw_value: Raw value; None means unavailable
            channel: Channel whose reference maximum applies (ignored for PERCENTAGE)

        Returns:
            Percentage in [0, 100]
        """
        if raw_value is None:
            return 0.0
        try:
            value = float(raw_value)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(value):
            return 0.0

        if kind is MetricKind.PERCENTAGE:
            return clamp_percent(value)

        reference = self.reference_max(channel) if channel is not None else 0.0
        if not (math.isfinite(reference) and reference > 0):
            return 0.0
        return clamp_percent(value / reference * 100.0)
