"""
Core data models for the polarkit package.

A polar model is a set of wind bands. Each band is an :class:`AnchorCurve`:
a sparse, angle-sorted list of user-authored :class:`AnchorPoint` values from
which the dense boat-speed curve is interpolated.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from polarkit.core.config import DEFAULT_CONFIG, EngineConfig
from polarkit.core.constants import BOUNDARY_ANGLES, MAX_TWA_DEGREES, MIN_TWA_DEGREES

logger = logging.getLogger(__name__)


class ProtectedAngleError(ValueError):
    """Raised when deleting a boundary angle (0 or 180 degrees) of a curve."""


@dataclass
class AnchorPoint:
    """One control point of a band's boat-speed curve."""

    angle: float  # True wind angle (degrees)
    boat_speed: float  # Boat speed (knots)

    def is_valid(self) -> bool:
        """Return True if the angle is within 0-180 and the speed is a finite, non-negative number."""
        return (
            math.isfinite(self.angle)
            and math.isfinite(self.boat_speed)
            and MIN_TWA_DEGREES <= self.angle <= MAX_TWA_DEGREES
            and self.boat_speed >= 0
        )


@dataclass
class DensePoint:
    """A point of the densified display curve."""

    angle: float
    boat_speed: float
    is_anchor: bool


@dataclass(frozen=True)
class BandRange:
    """The exclusive TWS interval ``[min_tws, max_tws)`` owned by one band."""

    wind_speed: float
    min_tws: float
    max_tws: float  # may be math.inf

    def __post_init__(self):
        """Validate the interval bounds."""
        if self.min_tws < 0:
            raise ValueError("min_tws must be non-negative")
        if self.max_tws < self.min_tws:
            raise ValueError("max_tws must not be below min_tws")

    def contains(self, tws: float) -> bool:
        """Return True if ``tws`` falls inside this half-open range."""
        return self.min_tws <= tws < self.max_tws


@dataclass(frozen=True)
class TelemetryPoint:
    """A recorded sample consumed read-only by the engine."""

    tws: float  # True wind speed (knots)
    twa: float  # Absolute true wind angle, 0-180 (degrees)
    bsp: float  # Boat speed (knots)
    timestamp: Optional[datetime] = None


@dataclass
class AnchorCurve:
    """
    Sparse control points of one wind band.

    Angles are unique and kept sorted ascending after every mutation.
    """

    wind_speed: float
    anchor_points: List[AnchorPoint] = field(default_factory=list)

    def __post_init__(self):
        """
        Sort the anchor points.

        Raises:
            ValueError: If two anchor points share the same angle
        """
        angles = [p.angle for p in self.anchor_points]
        if len(set(angles)) != len(angles):
            raise ValueError(f"Duplicate angle in band {self.wind_speed}")
        self._sort()

    @classmethod
    def flat(
        cls, wind_speed: float, angles: Iterable[float], boat_speed: float = 0.0
    ) -> "AnchorCurve":
        """Create a curve with the same boat speed at every angle."""
        return cls(
            wind_speed=wind_speed,
            anchor_points=[AnchorPoint(float(a), boat_speed) for a in angles],
        )

    def __len__(self) -> int:
        return len(self.anchor_points)

    def __iter__(self) -> Iterator[AnchorPoint]:
        return iter(self.anchor_points)

    @property
    def angles(self) -> List[float]:
        return [p.angle for p in self.anchor_points]

    def has_angle(self, angle: float) -> bool:
        """Return True if an anchor point sits exactly at ``angle``."""
        return any(p.angle == angle for p in self.anchor_points)

    def find(self, angle: float) -> Optional[AnchorPoint]:
        """Return the anchor point at exactly ``angle``, or None."""
        for point in self.anchor_points:
            if point.angle == angle:
                return point
        return None

    def set_boat_speed(self, angle: float, new_speed: float) -> None:
        """
        Set the boat speed at ``angle``, inserting an anchor if none exists.

        The speed is not range-checked.
        """
        point = self.find(angle)
        if point is not None:
            point.boat_speed = new_speed
        else:
            self.anchor_points.append(AnchorPoint(angle, new_speed))
        self._sort()

    def add_angle(self, angle: float, boat_speed: float) -> bool:
        """
        Insert a new anchor point.

        Returns:
            bool: False if ``angle`` was already present (nothing changes)
        """
        if self.has_angle(angle):
            logger.debug(
                "Band %s already has an anchor at %s, ignoring", self.wind_speed, angle
            )
            return False
        self.anchor_points.append(AnchorPoint(angle, boat_speed))
        self._sort()
        return True

    def delete_angle(self, angle: float, protect_boundaries: bool = True) -> bool:
        """
        Remove the anchor point at ``angle``.

        Args:
            angle (float): Exact angle of the point to remove
            protect_boundaries (bool): Refuse to delete the 0 and 180 degree anchors

        Returns:
            bool: True if a point was removed, False if none matched or it
                  was the last one left

        Raises:
            ProtectedAngleError: If ``angle`` is a boundary angle and
                                 ``protect_boundaries`` is True
        """
        if protect_boundaries and angle in BOUNDARY_ANGLES:
            raise ProtectedAngleError(
                f"Cannot delete boundary angle {angle} from band {self.wind_speed}"
            )
        remaining = [p for p in self.anchor_points if p.angle != angle]
        if len(remaining) == len(self.anchor_points):
            return False
        if not remaining:
            logger.debug(
                "Refusing to delete angle %s: last anchor of band %s", angle, self.wind_speed
            )
            return False
        self.anchor_points = remaining
        return True

    def rename_anchor(
        self,
        old_angle: float,
        new_angle: float,
        new_speed: float,
        tolerance: float = DEFAULT_CONFIG.rename_tolerance,
    ) -> bool:
        """
        Move an anchor point, e.g. at the end of a drag.

        The point is matched with a tolerance because dragged and displayed
        angles are rounded.

        Returns:
            bool: True if a point within ``tolerance`` of ``old_angle`` was replaced;
                  False if none matched or another point already sits at
                  ``new_angle``
        """
        for index, point in enumerate(self.anchor_points):
            if abs(point.angle - old_angle) < tolerance:
                if any(
                    other.angle == new_angle
                    for i, other in enumerate(self.anchor_points)
                    if i != index
                ):
                    logger.debug(
                        "Band %s already has an anchor at %s, ignoring rename",
                        self.wind_speed,
                        new_angle,
                    )
                    return False
                self.anchor_points[index] = AnchorPoint(new_angle, new_speed)
                self._sort()
                return True
        return False

    def copy(self) -> "AnchorCurve":
        return AnchorCurve(
            wind_speed=self.wind_speed,
            anchor_points=[AnchorPoint(p.angle, p.boat_speed) for p in self.anchor_points],
        )

    def _sort(self) -> None:
        self.anchor_points.sort(key=lambda p: p.angle)


class PolarModel:
    """
    Collection of wind bands keyed by wind speed.

    Bands are always kept in ascending wind speed order. A model with no
    bands is valid but empty.
    """

    def __init__(
        self,
        curves: Optional[Iterable[AnchorCurve]] = None,
        config: Optional[EngineConfig] = None,
    ):
        """
        Initialize the model.

        Raises:
            ValueError: If two curves share the same wind speed
        """
        # Lazy import to avoid circular imports
        from polarkit.polar.interpolator import Interpolator

        self.config = config or DEFAULT_CONFIG
        self.interpolator = Interpolator(self.config)
        self._curves: Dict[float, AnchorCurve] = {}
        for curve in curves or []:
            if curve.wind_speed in self._curves:
                raise ValueError(f"Duplicate wind speed {curve.wind_speed}")
            self._curves[curve.wind_speed] = curve
        self._sort()

    def __len__(self) -> int:
        return len(self._curves)

    def __iter__(self) -> Iterator[AnchorCurve]:
        return iter(list(self._curves.values()))

    def __contains__(self, wind_speed: float) -> bool:
        return wind_speed in self._curves

    def __getitem__(self, wind_speed: float) -> AnchorCurve:
        return self._curves[wind_speed]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PolarModel):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"PolarModel(wind_speeds={list(self.wind_speeds())})"

    def get(self, wind_speed: float) -> Optional[AnchorCurve]:
        return self._curves.get(wind_speed)

    def wind_speeds(self) -> Tuple[float, ...]:
        """Snapshot of the band identifiers, ascending."""
        return tuple(self._curves)

    def is_empty(self) -> bool:
        return not self._curves

    def add_band(self, wind_speed: float) -> bool:
        """
        Add a band seeded with the default flat curve.

        Returns:
            bool: False if the band already exists (nothing changes)
        """
        if wind_speed in self._curves:
            logger.debug("Band %s already exists, ignoring", wind_speed)
            return False
        self._curves[wind_speed] = AnchorCurve.flat(
            wind_speed, self.config.default_band_angles, self.config.default_band_speed
        )
        self._sort()
        return True

    def delete_band(self, wind_speed: float) -> bool:
        """
        Remove a band. The last remaining band is never removed.

        Returns:
            bool: True if the band was removed
        """
        if len(self._curves) <= 1:
            logger.debug("Refusing to delete band %s: last band", wind_speed)
            return False
        if wind_speed not in self._curves:
            return False
        del self._curves[wind_speed]
        return True

    def add_angle_across_model(
        self, editing_wind_speed: float, angle: float, boat_speed: float
    ) -> List[float]:
        """
        Add ``angle`` to every band that lacks it.

        The band being edited receives ``boat_speed``; every other band gets
        its own interpolated speed at ``angle``, so its shape is preserved.

        Returns:
            List[float]: Wind speeds of the bands that gained a point
        """
        changed = []
        for curve in self:
            if curve.has_angle(angle):
                continue
            if curve.wind_speed == editing_wind_speed:
                speed = boat_speed
            else:
                speed = self.interpolator.evaluate(curve, angle)
            curve.add_angle(angle, speed)
            changed.append(curve.wind_speed)
        return changed

    def delete_angle(self, wind_speed: float, angle: float) -> bool:
        """Remove ``angle`` from one band, applying the boundary policy."""
        curve = self._curves.get(wind_speed)
        if curve is None:
            return False
        return curve.delete_angle(angle, self.config.protect_boundary_angles)

    def rename_anchor(
        self, wind_speed: float, old_angle: float, new_angle: float, new_speed: float
    ) -> bool:
        curve = self._curves.get(wind_speed)
        if curve is None:
            return False
        return curve.rename_anchor(
            old_angle, new_angle, new_speed, self.config.rename_tolerance
        )

    def set_boat_speed(self, wind_speed: float, angle: float, new_speed: float) -> bool:
        curve = self._curves.get(wind_speed)
        if curve is None:
            return False
        curve.set_boat_speed(angle, new_speed)
        return True

    def copy(self) -> "PolarModel":
        return PolarModel([c.copy() for c in self], config=self.config)

    def _sort(self) -> None:
        self._curves = dict(sorted(self._curves.items()))
