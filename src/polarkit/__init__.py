"""
polarkit - polar performance engine for sailboats
"""

from polarkit.core.config import EngineConfig
from polarkit.core.models import (
    AnchorCurve,
    AnchorPoint,
    BandRange,
    DensePoint,
    PolarModel,
    ProtectedAngleError,
    TelemetryPoint,
)
from polarkit.core.polar_session import PolarSession
from polarkit.polar.interpolator import Interpolator
from polarkit.analysis.band_classifier import BandClassifier, classify_nearest_band
from polarkit.analysis.band_partitioner import compute_ranges, range_for
from polarkit.parser.polar_file import (
    PolarFileCodec,
    PolarFileError,
    PolarFormatError,
    PolarNumericError,
)

__version__ = "0.1.0"

__all__ = [
    "AnchorCurve",
    "AnchorPoint",
    "BandClassifier",
    "BandRange",
    "DensePoint",
    "EngineConfig",
    "Interpolator",
    "PolarFileCodec",
    "PolarFileError",
    "PolarFormatError",
    "PolarModel",
    "PolarNumericError",
    "PolarSession",
    "ProtectedAngleError",
    "TelemetryPoint",
    "classify_nearest_band",
    "compute_ranges",
    "range_for",
]
