"""
Engine configuration.
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Tuple

from polarkit.core.constants import (
    DEFAULT_BAND_ANGLES,
    DEFAULT_BAND_SPEED,
    DEFAULT_BAND_TOLERANCE_KNOTS,
    DEFAULT_DENSE_MERGE_TOLERANCE_DEGREES,
    DEFAULT_HISTOGRAM_BINS,
    DEFAULT_RENAME_TOLERANCE_DEGREES,
    MAX_TWA_DEGREES,
    MIN_TWA_DEGREES,
)

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class EngineConfig:
    """Policy parameters for the polar engine."""

    band_tolerance: float = DEFAULT_BAND_TOLERANCE_KNOTS  # knots
    rename_tolerance: float = DEFAULT_RENAME_TOLERANCE_DEGREES  # degrees
    dense_merge_tolerance: float = DEFAULT_DENSE_MERGE_TOLERANCE_DEGREES  # degrees
    default_band_angles: Tuple[float, ...] = DEFAULT_BAND_ANGLES
    default_band_speed: float = DEFAULT_BAND_SPEED
    protect_boundary_angles: bool = True
    histogram_bins: int = DEFAULT_HISTOGRAM_BINS

    def __post_init__(self):
        """Validate configuration."""
        if self.band_tolerance < 0:
            raise ValueError("band_tolerance must be non-negative")
        if self.rename_tolerance <= 0:
            raise ValueError("rename_tolerance must be positive")
        if self.dense_merge_tolerance <= 0:
            raise ValueError("dense_merge_tolerance must be positive")
        if not self.default_band_angles:
            raise ValueError("default_band_angles must not be empty")
        if len(set(self.default_band_angles)) != len(self.default_band_angles):
            raise ValueError("default_band_angles must be unique")
        for angle in self.default_band_angles:
            if not MIN_TWA_DEGREES <= angle <= MAX_TWA_DEGREES:
                raise ValueError("default_band_angles must be between 0 and 180")
        if self.default_band_speed < 0:
            raise ValueError("default_band_speed must be non-negative")
        if self.histogram_bins < 1:
            raise ValueError("histogram_bins must be at least 1")

    @classmethod
    def from_env(
        cls, prefix: str = "POLARKIT_", environ: Optional[Mapping[str, str]] = None
    ) -> "EngineConfig":
        """
        Build a configuration from environment variables.

        Each scalar field can be overridden by ``<prefix><FIELD_NAME>``,
        e.g. ``POLARKIT_BAND_TOLERANCE=3.0``. Unset variables keep defaults.

        Raises:
            ValueError: If a variable cannot be converted to the field type
        """
        if environ is None:
            environ = os.environ

        overrides = {}
        for f in fields(cls):
            raw = environ.get(prefix + f.name.upper())
            if raw is None or f.name == "default_band_angles":
                continue
            default = f.default
            try:
                if isinstance(default, bool):
                    overrides[f.name] = _parse_bool(raw)
                elif isinstance(default, int):
                    overrides[f.name] = int(raw)
                else:
                    overrides[f.name] = float(raw)
            except ValueError:
                raise ValueError(
                    f"Invalid value for {prefix}{f.name.upper()}: {raw!r}"
                ) from None

        return cls(**overrides)


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(raw)


DEFAULT_CONFIG = EngineConfig()
