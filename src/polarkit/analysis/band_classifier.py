"""
Assignment of telemetry samples to polar wind bands.
"""

from typing import Iterable, List, Optional, Sequence

from polarkit.core.config import DEFAULT_CONFIG, EngineConfig
from polarkit.core.models import TelemetryPoint


def classify_nearest_band(value: float, bands: Sequence[float]) -> float:
    """
    Return the band closest to ``value``.

    Ties keep the first band encountered in ``bands`` order, so the result
    for a value exactly between two bands depends on how they are listed.

    Raises:
        ValueError: If ``bands`` is empty
    """
    if not bands:
        raise ValueError("Cannot classify against an empty band list")

    nearest = bands[0]
    best = abs(value - nearest)
    for band in bands[1:]:
        distance = abs(value - band)
        if distance < best:
            nearest, best = band, distance
    return nearest


class BandClassifier:
    """Filters telemetry down to the samples that belong to polar bands."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    @property
    def tolerance(self) -> float:
        return self.config.band_tolerance

    def nearest_band(self, point: TelemetryPoint, bands: Sequence[float]) -> float:
        return classify_nearest_band(point.tws, bands)

    def filter_by_band_tolerance(
        self,
        points: Iterable[TelemetryPoint],
        bands: Sequence[float],
        tolerance: Optional[float] = None,
    ) -> List[TelemetryPoint]:
        """
        Keep the points whose TWS is within ``tolerance`` of their nearest band.

        An empty band list keeps nothing.
        """
        if tolerance is None:
            tolerance = self.tolerance
        if not bands:
            return []
        return [
            p
            for p in points
            if abs(classify_nearest_band(p.tws, bands) - p.tws) <= tolerance
        ]

    def filter_for_band(
        self,
        points: Iterable[TelemetryPoint],
        bands: Sequence[float],
        target_band: float,
        tolerance: Optional[float] = None,
    ) -> List[TelemetryPoint]:
        """
        Keep the points whose nearest band is ``target_band`` and whose TWS is
        within ``tolerance`` of it.
        """
        if tolerance is None:
            tolerance = self.tolerance
        if not bands:
            return []
        result = []
        for p in points:
            nearest = classify_nearest_band(p.tws, bands)
            if nearest == target_band and abs(nearest - p.tws) <= tolerance:
                result.append(p)
        return result
