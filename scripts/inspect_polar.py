#!/usr/bin/env python3
"""
Inspect a polar file: bands, their TWS ranges and dense curve extremes.
"""
import os
import sys

# Add the src directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from polarkit.analysis.band_partitioner import compute_ranges
from polarkit.parser.polar_file import PolarFileCodec, PolarFileError

def inspect_file(filepath):
    """Print a summary of a polar file."""
    print(f"\nInspecting {filepath}...")

    model = PolarFileCodec().load(filepath)
    print(f"Bands: {len(model)}")

    ranges = compute_ranges(model.wind_speeds())
    interpolator = model.interpolator
    for curve in model:
        band_range = ranges[curve.wind_speed]
        print(f"\nTWS {curve.wind_speed} kn "
              f"(range {band_range.min_tws:g} to {band_range.max_tws:g} kn)")
        print(f"Anchors: {len(curve)} at {', '.join(f'{a:g}' for a in curve.angles)}")

        dense = interpolator.densify(curve)
        if dense:
            fastest = max(dense, key=lambda p: p.boat_speed)
            print(f"Top speed: {fastest.boat_speed:.2f} kn at {fastest.angle:g} deg")

        first, _ = interpolator.derivatives(curve)
        if first:
            steepest = max(first, key=lambda p: abs(p.value))
            print(f"Steepest slope: {steepest.value:.3f} kn/deg near {steepest.angle:g} deg")

if __name__ == '__main__':
    if len(sys.argv) != 2:
        print("Usage: inspect_polar.py <polar_file>")
        sys.exit(1)

    filepath = sys.argv[1]
    if not os.path.exists(filepath):
        print(f"Error: File not found: {filepath}")
        sys.exit(1)

    try:
        inspect_file(filepath)
    except PolarFileError as e:
        print(f"Error: {e}")
        sys.exit(1)
