"""
Polar text file codec.

This module reads and writes the plain-text polar format used by ``.pol``
and ``.txt`` files:

- Lines starting with ``!`` are comments
- Every other line is one wind band: the wind speed followed by
  alternating angle and boat speed columns

Example::

    ! Sample polar
    10	0	0	90	6	180	3

Columns are separated by any whitespace on read and by tabs on write.
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from polarkit.core.config import DEFAULT_CONFIG, EngineConfig
from polarkit.core.constants import COMMENT_PREFIX, POLAR_FILE_EXTENSIONS
from polarkit.core.models import AnchorCurve, AnchorPoint, PolarModel

logger = logging.getLogger(__name__)


@dataclass
class PolarFileError(Exception):
    """Base class for polar file errors."""

    message: str

    def __str__(self):
        return self.message


@dataclass
class PolarFormatError(PolarFileError):
    """Raised when a line has the wrong shape."""

    line_number: int = 0
    line: str = ""


@dataclass
class PolarNumericError(PolarFileError):
    """Raised when a value is not a finite number."""

    line_number: int = 0
    token: str = ""


class PolarFileCodec:
    """Parser and serializer for polar text files."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def parse(self, content: str) -> PolarModel:
        """
        Parse polar file content.

        Args:
            content (str): Full text of a polar file

        Returns:
            PolarModel: Bands sorted by wind speed, anchors sorted by angle

        Raises:
            PolarFormatError: If a line has an even or too small token count,
                              or repeats a wind speed or an angle
            PolarNumericError: If a token is not a finite number
        """
        curves = {}
        for line_number, line in enumerate(content.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue

            curve = self.parse_line(stripped, line_number)
            if curve.wind_speed in curves:
                raise PolarFormatError(
                    message=f"Line {line_number}: duplicate wind speed {curve.wind_speed}",
                    line_number=line_number,
                    line=line,
                )
            curves[curve.wind_speed] = curve

        model = PolarModel(curves.values(), config=self.config)
        logger.info("Parsed polar with %d bands", len(model))
        return model

    def parse_line(self, line: str, line_number: int = 1) -> AnchorCurve:
        """Parse a single band line."""
        tokens = line.split()
        if len(tokens) < 3 or len(tokens) % 2 == 0:
            raise PolarFormatError(
                message=(
                    f"Line {line_number}: expected a wind speed followed by "
                    f"angle/boat speed pairs, got {len(tokens)} values"
                ),
                line_number=line_number,
                line=line,
            )

        values = [_parse_number(token, line_number) for token in tokens]
        wind_speed = values[0]
        points = []
        seen = set()
        for angle, boat_speed in zip(values[1::2], values[2::2]):
            if angle in seen:
                raise PolarFormatError(
                    message=f"Line {line_number}: duplicate angle {angle}",
                    line_number=line_number,
                    line=line,
                )
            seen.add(angle)
            points.append(AnchorPoint(angle=angle, boat_speed=boat_speed))

        return AnchorCurve(wind_speed=wind_speed, anchor_points=points)

    def serialize(self, model: PolarModel, header: Iterable[str] = ()) -> str:
        """
        Render ``model`` in polar text format.

        Args:
            model: Model to write
            header: Comment lines written first, each prefixed with ``!``

        Returns:
            str: File content, newline terminated
        """
        lines = [f"{COMMENT_PREFIX} {text}".rstrip() for text in header]
        for curve in model:
            columns = [_format_number(curve.wind_speed)]
            for point in sorted(curve.anchor_points, key=lambda p: p.angle):
                columns.append(_format_number(point.angle))
                columns.append(_format_number(point.boat_speed))
            lines.append("\t".join(columns))
        return "\n".join(lines) + "\n"

    def load(self, file_path: str) -> PolarModel:
        """Parse the polar file at ``file_path``."""
        with open(file_path, "r") as f:
            return self.parse(f.read())

    def save(self, model: PolarModel, file_path: str, header: Iterable[str] = ()) -> None:
        """Write ``model`` to ``file_path``, creating the directory if needed."""
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(file_path, "w") as f:
            f.write(self.serialize(model, header))


def list_polar_files(directory: str) -> List[str]:
    """
    List polar file names in ``directory``.

    The directory is created if it does not exist.

    Returns:
        List[str]: Sorted names of ``.pol`` and ``.txt`` files
    """
    os.makedirs(directory, exist_ok=True)
    return sorted(
        name
        for name in os.listdir(directory)
        if name.endswith(POLAR_FILE_EXTENSIONS)
        and os.path.isfile(os.path.join(directory, name))
    )


def load_polar_file(file_path: str, config: Optional[EngineConfig] = None) -> PolarModel:
    return PolarFileCodec(config).load(file_path)


def save_polar_file(
    model: PolarModel, file_path: str, header: Iterable[str] = ()
) -> None:
    PolarFileCodec(model.config).save(model, file_path, header)


def _parse_number(token: str, line_number: int) -> float:
    # float() also accepts digit separators such as "1_0"
    try:
        value = math.nan if "_" in token else float(token)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise PolarNumericError(
            message=f"Line {line_number}: invalid numeric value {token!r}",
            line_number=line_number,
            token=token,
        )
    return value


def _format_number(value: float) -> str:
    # Shortest repr that parses back to the same float; whole numbers lose the ".0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
