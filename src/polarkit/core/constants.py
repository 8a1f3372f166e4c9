"""
Constants for the polarkit engine.

Angles are in degrees, speeds in knots.
"""

# =============================================================================
# ANGLE DOMAIN
# =============================================================================

MIN_TWA_DEGREES = 0.0
MAX_TWA_DEGREES = 180.0
FULL_CIRCLE_DEGREES = 360.0

# Angles that must survive every deletion
BOUNDARY_ANGLES = (MIN_TWA_DEGREES, MAX_TWA_DEGREES)

# =============================================================================
# BAND DEFAULTS
# =============================================================================

# Seed curve for a freshly added wind band
DEFAULT_BAND_ANGLES = (0.0, 45.0, 90.0, 135.0, 180.0)
DEFAULT_BAND_SPEED = 0.0

# =============================================================================
# TOLERANCES
# =============================================================================

DEFAULT_BAND_TOLERANCE_KNOTS = 2.5
DEFAULT_RENAME_TOLERANCE_DEGREES = 0.1
DEFAULT_DENSE_MERGE_TOLERANCE_DEGREES = 0.001

# =============================================================================
# TELEMETRY SUMMARY
# =============================================================================

DEFAULT_HISTOGRAM_BINS = 10

# =============================================================================
# FILE FORMAT
# =============================================================================

COMMENT_PREFIX = "!"
POLAR_FILE_EXTENSIONS = (".pol", ".txt")
