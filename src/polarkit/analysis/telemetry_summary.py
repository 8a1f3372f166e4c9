"""
Summary statistics for a set of telemetry samples.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import numpy as np

from polarkit.core.constants import DEFAULT_HISTOGRAM_BINS
from polarkit.core.models import TelemetryPoint

SUMMARY_FIELDS = ("tws", "twa", "bsp")


@dataclass
class FieldStats:
    min: float
    max: float
    avg: float


@dataclass
class HistogramBin:
    """One equal-width histogram bin covering ``[bin, bin_end)``."""

    bin: float
    bin_end: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.bin:.1f}-{self.bin_end:.1f}"


@dataclass
class TelemetrySummary:
    total_points: int
    stats: Dict[str, FieldStats] = field(default_factory=dict)
    histograms: Dict[str, List[HistogramBin]] = field(default_factory=dict)
    start: Optional[datetime] = None
    end: Optional[datetime] = None


def histogram(values: Iterable[float], bins: int = DEFAULT_HISTOGRAM_BINS) -> List[HistogramBin]:
    """
    Equal-width histogram between the minimum and maximum value.

    The maximum value is counted in the last bin. When every value is the
    same, all of them land in the first bin.
    """
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return []

    lo, hi = float(data.min()), float(data.max())
    width = (hi - lo) / bins
    if width == 0:
        indices = np.zeros(data.size, dtype=int)
    else:
        indices = np.minimum(((data - lo) / width).astype(int), bins - 1)
    counts = np.bincount(indices, minlength=bins)

    return [
        HistogramBin(bin=lo + i * width, bin_end=lo + (i + 1) * width, count=int(counts[i]))
        for i in range(bins)
    ]


def summarize_telemetry(
    points: Iterable[TelemetryPoint], bins: int = DEFAULT_HISTOGRAM_BINS
) -> TelemetrySummary:
    """
    Compute count, min/max/average and histograms of TWS, TWA and BSP.

    Args:
        points: Telemetry samples
        bins: Number of histogram bins per field

    Returns:
        TelemetrySummary: Empty stats and histograms when there are no points
    """
    points = list(points)
    summary = TelemetrySummary(total_points=len(points))
    if not points:
        return summary

    for name in SUMMARY_FIELDS:
        values = np.array([getattr(p, name) for p in points], dtype=float)
        summary.stats[name] = FieldStats(
            min=float(values.min()), max=float(values.max()), avg=float(values.mean())
        )
        summary.histograms[name] = histogram(values, bins)

    timestamps = [p.timestamp for p in points if p.timestamp is not None]
    if timestamps:
        summary.start = min(timestamps)
        summary.end = max(timestamps)

    return summary
