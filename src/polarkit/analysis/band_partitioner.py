"""
Partitioning of the TWS axis into one exclusive range per band.

Each boundary is the midpoint between neighbouring bands, which is exactly
where nearest-band classification switches from one band to the next. The
ranges are contiguous and together cover ``[0, inf)``.
"""

import math
from typing import Dict, Iterable

from polarkit.core.models import BandRange


def compute_ranges(bands: Iterable[float]) -> Dict[float, BandRange]:
    """
    Compute the TWS range owned by each band.

    Args:
        bands: Band wind speeds, in any order; duplicates collapse

    Returns:
        dict: Band wind speed -> BandRange, ascending by wind speed
    """
    ordered = sorted(set(bands))
    ranges = {}
    for i, band in enumerate(ordered):
        min_tws = 0.0 if i == 0 else (ordered[i - 1] + band) / 2
        max_tws = math.inf if i == len(ordered) - 1 else (band + ordered[i + 1]) / 2
        ranges[band] = BandRange(wind_speed=band, min_tws=min_tws, max_tws=max_tws)
    return ranges


def range_for(bands: Iterable[float], band: float) -> BandRange:
    """Range of ``band``, or the full ``[0, inf)`` range if it is not among ``bands``."""
    ranges = compute_ranges(bands)
    if band in ranges:
        return ranges[band]
    return BandRange(wind_speed=band, min_tws=0.0, max_tws=math.inf)
