"""
Telemetry sources for cross-referencing recorded sailing data with a polar.
"""

import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

import pandas as pd

from polarkit.core.constants import FULL_CIRCLE_DEGREES, MAX_TWA_DEGREES
from polarkit.core.models import TelemetryPoint

TELEMETRY_COLUMNS = ["timestamp", "tws", "twa", "bsp"]


def normalize_twa(twa: float) -> float:
    """Fold a signed or 0-360 wind angle onto the absolute 0-180 range."""
    angle = abs(twa) % FULL_CIRCLE_DEGREES
    if angle > MAX_TWA_DEGREES:
        angle = FULL_CIRCLE_DEGREES - angle
    return angle


def telemetry_frame(points: Iterable[TelemetryPoint]) -> pd.DataFrame:
    """Convert telemetry points to a DataFrame with the standard columns."""
    return pd.DataFrame(
        [(p.timestamp, p.tws, p.twa, p.bsp) for p in points],
        columns=TELEMETRY_COLUMNS,
    )


class TelemetryProvider(ABC):
    """Source of recorded telemetry."""

    @abstractmethod
    def fetch(
        self,
        min_tws: float = 0.0,
        max_tws: float = math.inf,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TelemetryPoint]:
        """
        Fetch samples with ``min_tws <= tws < max_tws``, optionally limited
        to the ``[start, end]`` time range.
        """
        pass


class FrameTelemetryProvider(TelemetryProvider):
    """Telemetry provider backed by an in-memory DataFrame."""

    def __init__(self, df: pd.DataFrame):
        """
        Args:
            df: DataFrame with timestamp, tws, twa and bsp columns

        Raises:
            ValueError: If a required column is missing
        """
        missing = [c for c in TELEMETRY_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"Telemetry is missing columns: {', '.join(missing)}")

        df = df[TELEMETRY_COLUMNS].dropna(subset=["tws", "twa", "bsp"]).copy()
        df["timestamp"] = pd.to_datetime(df["timestamp"])
        df["twa"] = df["twa"].map(normalize_twa)
        self.df = df.sort_values("timestamp").reset_index(drop=True)

    @classmethod
    def from_csv(cls, file_path: str) -> "FrameTelemetryProvider":
        return cls(pd.read_csv(file_path))

    def fetch(
        self,
        min_tws: float = 0.0,
        max_tws: float = math.inf,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TelemetryPoint]:
        df = self.df
        mask = (df["tws"] >= min_tws) & (df["tws"] < max_tws)
        if start is not None:
            mask &= df["timestamp"] >= pd.Timestamp(start)
        if end is not None:
            mask &= df["timestamp"] <= pd.Timestamp(end)

        return [
            TelemetryPoint(
                tws=float(row.tws),
                twa=float(row.twa),
                bsp=float(row.bsp),
                timestamp=row.timestamp.to_pydatetime(),
            )
            for row in df[mask].itertuples(index=False)
        ]
