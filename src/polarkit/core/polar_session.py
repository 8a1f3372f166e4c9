"""
Editing session over a polar model.
"""

import logging
from typing import List, Optional

from polarkit.analysis.band_partitioner import range_for
from polarkit.core.config import EngineConfig
from polarkit.core.models import BandRange, DensePoint, PolarModel
from polarkit.parser.polar_file import PolarFileCodec

logger = logging.getLogger(__name__)


class PolarSession:
    """
    A polar model plus the bands a user has selected for display and the
    band currently being edited.

    Band deletion keeps the selection usable: a deleted band leaves the
    selection, and an emptied selection falls back to the first band.
    """

    def __init__(self, model: Optional[PolarModel] = None, config: Optional[EngineConfig] = None):
        self.model = model if model is not None else PolarModel(config=config)
        self.selected_wind_speeds: List[float] = []
        self.editing_wind_speed: Optional[float] = None
        self._select_first()

    @classmethod
    def from_file(cls, file_path: str, config: Optional[EngineConfig] = None) -> "PolarSession":
        return cls(PolarFileCodec(config).load(file_path))

    def load(self, model: PolarModel) -> None:
        """Replace the model. Empty models are ignored."""
        if model.is_empty():
            logger.debug("Ignoring empty polar model")
            return
        self.model = model
        self._select_first()

    def save(self, file_path: str, header=()) -> None:
        PolarFileCodec(self.model.config).save(self.model, file_path, header)

    def select(self, wind_speeds: List[float]) -> None:
        self.selected_wind_speeds = [ws for ws in wind_speeds if ws in self.model]

    def edit(self, wind_speed: float) -> None:
        """
        Raises:
            KeyError: If the band does not exist
        """
        if wind_speed not in self.model:
            raise KeyError(wind_speed)
        self.editing_wind_speed = wind_speed

    def add_band(self, wind_speed: float) -> bool:
        if not self.model.add_band(wind_speed):
            return False
        self.selected_wind_speeds.append(wind_speed)
        self.editing_wind_speed = wind_speed
        return True

    def delete_band(self, wind_speed: float) -> bool:
        if not self.model.delete_band(wind_speed):
            return False

        first = self.model.wind_speeds()[0]
        self.selected_wind_speeds = [
            ws for ws in self.selected_wind_speeds if ws != wind_speed
        ]
        if not self.selected_wind_speeds:
            self.selected_wind_speeds = [first]
        if self.editing_wind_speed == wind_speed:
            self.editing_wind_speed = first
        return True

    def set_boat_speed(self, angle: float, new_speed: float) -> bool:
        return self.model.set_boat_speed(self.editing_wind_speed, angle, new_speed)

    def add_angle(self, angle: float, boat_speed: float) -> List[float]:
        return self.model.add_angle_across_model(self.editing_wind_speed, angle, boat_speed)

    def delete_angle(self, angle: float) -> bool:
        return self.model.delete_angle(self.editing_wind_speed, angle)

    def rename_anchor(
        self,
        old_angle: float,
        new_angle: float,
        new_speed: float,
        wind_speed: Optional[float] = None,
    ) -> bool:
        if wind_speed is None:
            wind_speed = self.editing_wind_speed
        return self.model.rename_anchor(wind_speed, old_angle, new_angle, new_speed)

    def dense_curve(self, wind_speed: Optional[float] = None) -> List[DensePoint]:
        if wind_speed is None:
            wind_speed = self.editing_wind_speed
        curve = self.model.get(wind_speed)
        if curve is None:
            return []
        return self.model.interpolator.densify(curve)

    def editing_range(self) -> Optional[BandRange]:
        if self.editing_wind_speed is None:
            return None
        return range_for(self.model.wind_speeds(), self.editing_wind_speed)

    def _select_first(self) -> None:
        wind_speeds = self.model.wind_speeds()
        if wind_speeds:
            self.selected_wind_speeds = [wind_speeds[0]]
            self.editing_wind_speed = wind_speeds[0]
        else:
            self.selected_wind_speeds = []
            self.editing_wind_speed = None
