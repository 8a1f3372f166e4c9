"""
Piecewise-linear evaluation of anchor curves.
"""

import bisect
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from polarkit.core.config import DEFAULT_CONFIG, EngineConfig
from polarkit.core.models import AnchorCurve, DensePoint, PolarModel

DENSE_GRID = range(0, 181)


@dataclass
class SlopePoint:
    """Rate of change of boat speed, located at the midpoint angle of its pair."""

    angle: float
    value: float


class Interpolator:
    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def evaluate(self, curve: AnchorCurve, angle: float) -> float:
        """
        Boat speed of ``curve`` at ``angle``.

        Angles outside the anchored range are clamped to the nearest end
        anchor; there is no extrapolation.
        """
        points = sorted(curve.anchor_points, key=lambda p: p.angle)
        if not points:
            return 0.0
        if len(points) == 1:
            return points[0].boat_speed

        angles = [p.angle for p in points]
        index = bisect.bisect_left(angles, angle)
        if index < len(points) and angles[index] == angle:
            return points[index].boat_speed
        if index == 0:
            return points[0].boat_speed
        if index == len(points):
            return points[-1].boat_speed

        lower, upper = points[index - 1], points[index]
        ratio = (angle - lower.angle) / (upper.angle - lower.angle)
        return lower.boat_speed + ratio * (upper.boat_speed - lower.boat_speed)

    def densify(self, curve: AnchorCurve) -> List[DensePoint]:
        """
        Dense display curve: every anchor verbatim plus every whole degree
        0-180 that no anchor already covers.

        The result mixes fractional anchor angles with the integer grid, so
        consumers must not assume a uniform 1 degree step.
        """
        if not curve.anchor_points:
            return []

        dense = [
            DensePoint(angle=p.angle, boat_speed=p.boat_speed, is_anchor=True)
            for p in curve.anchor_points
        ]
        anchor_angles = np.array([p.angle for p in curve.anchor_points], dtype=float)
        tolerance = self.config.dense_merge_tolerance

        for angle in DENSE_GRID:
            if np.min(np.abs(anchor_angles - angle)) < tolerance:
                continue
            dense.append(
                DensePoint(
                    angle=float(angle),
                    boat_speed=self.evaluate(curve, angle),
                    is_anchor=False,
                )
            )

        dense.sort(key=lambda p: p.angle)
        return dense

    def dense_frame(self, curve: AnchorCurve) -> pd.DataFrame:
        """Densified curve as a DataFrame with angle, boat_speed and is_anchor columns."""
        return pd.DataFrame(
            [(p.angle, p.boat_speed, p.is_anchor) for p in self.densify(curve)],
            columns=["angle", "boat_speed", "is_anchor"],
        )

    def derivatives(
        self, curve: AnchorCurve
    ) -> Tuple[List[SlopePoint], List[SlopePoint]]:
        """
        First and second derivative of boat speed with respect to angle.

        Both are finite differences between neighbouring anchors (then
        neighbouring first-derivative points), placed at the midpoint angle.
        A zero angle step yields a zero derivative.

        Returns:
            tuple: First derivative points, second derivative points
        """
        first = _differentiate(
            [(p.angle, p.boat_speed) for p in curve.anchor_points]
        )
        second = _differentiate([(p.angle, p.value) for p in first])
        return first, second


def _differentiate(samples: List[Tuple[float, float]]) -> List[SlopePoint]:
    result = []
    for (a0, v0), (a1, v1) in zip(samples, samples[1:]):
        delta_angle = a1 - a0
        slope = (v1 - v0) / delta_angle if delta_angle != 0 else 0.0
        result.append(SlopePoint(angle=(a0 + a1) / 2, value=slope))
    return result


def polar_table(
    model: PolarModel,
    angles: Iterable[float] = DENSE_GRID,
    interpolator: Optional[Interpolator] = None,
) -> pd.DataFrame:
    """
    Evaluate every band of ``model`` on a common angle grid.

    Returns:
        pd.DataFrame: Rows indexed by angle, one column per wind speed
    """
    interpolator = interpolator or model.interpolator
    angle_list = [float(a) for a in angles]
    table = pd.DataFrame(index=pd.Index(angle_list, name="twa"))
    for curve in model:
        table[curve.wind_speed] = [
            interpolator.evaluate(curve, a) for a in angle_list
        ]
    return table


def export_csv(
    model: PolarModel, file_path: str, angles: Iterable[float] = DENSE_GRID
) -> None:
    """
    Export the evaluated polar grid to a CSV file.

    The header row holds ``twa/tws`` followed by the wind speeds; each
    following row holds an angle and its boat speed for every band.
    """
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    table = polar_table(model, angles)
    table.index.name = "twa/tws"
    table.to_csv(file_path)
