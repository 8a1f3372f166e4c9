"""
Tests for nearest-band classification and tolerance filtering.
"""

import pytest

from polarkit.analysis.band_classifier import BandClassifier, classify_nearest_band
from polarkit.core.config import EngineConfig
from polarkit.core.models import TelemetryPoint


def points_at(*tws_values):
    return [TelemetryPoint(tws=tws, twa=90, bsp=5) for tws in tws_values]


def test_classify_nearest_band():
    bands = [5, 10, 15]
    assert classify_nearest_band(0, bands) == 5
    assert classify_nearest_band(8, bands) == 10
    assert classify_nearest_band(12.6, bands) == 15
    assert classify_nearest_band(40, bands) == 15


def test_classify_returns_member():
    bands = [5.5, 11, 19]
    for value in [0, 3.3, 8.25, 15, 30]:
        assert classify_nearest_band(value, bands) in bands


def test_classify_tie_keeps_first_listed_band():
    assert classify_nearest_band(7.5, [5, 10]) == 5
    assert classify_nearest_band(7.5, [10, 5]) == 10


def test_classify_empty_bands():
    with pytest.raises(ValueError):
        classify_nearest_band(5, [])


def test_filter_by_band_tolerance():
    classifier = BandClassifier()
    points = points_at(4, 7.4, 10, 12.5, 12.6, 20)
    kept = classifier.filter_by_band_tolerance(points, [5, 10])
    assert [p.tws for p in kept] == [4, 7.4, 10, 12.5]


def test_filter_by_band_tolerance_custom_tolerance():
    classifier = BandClassifier()
    points = points_at(4, 6, 9)
    kept = classifier.filter_by_band_tolerance(points, [5, 10], tolerance=1.0)
    assert [p.tws for p in kept] == [4, 6, 9]
    kept = classifier.filter_by_band_tolerance(points, [5, 10], tolerance=0.5)
    assert kept == []


def test_filter_uses_configured_tolerance():
    classifier = BandClassifier(EngineConfig(band_tolerance=1.0))
    kept = classifier.filter_by_band_tolerance(points_at(6.5, 10.9), [5, 10])
    assert [p.tws for p in kept] == [10.9]


def test_filter_for_band_requires_nearest_band():
    classifier = BandClassifier()
    points = points_at(6, 7, 8, 9, 11, 12.4, 13)
    kept = classifier.filter_for_band(points, [5, 10, 15], 10)
    assert [p.tws for p in kept] == [8, 9, 11, 12.4]


def test_filter_for_band_tie_follows_band_order():
    classifier = BandClassifier()
    points = points_at(7.5)
    assert classifier.filter_for_band(points, [5, 10], 5) == points
    assert classifier.filter_for_band(points, [5, 10], 10) == []
    assert classifier.filter_for_band(points, [10, 5], 10) == points


def test_filters_agree():
    classifier = BandClassifier()
    bands = [6, 12, 20]
    points = points_at(*[x / 2 for x in range(0, 60)])
    any_band = classifier.filter_by_band_tolerance(points, bands)
    per_band = []
    for band in bands:
        per_band.extend(classifier.filter_for_band(points, bands, band))
    assert sorted(p.tws for p in any_band) == sorted(p.tws for p in per_band)


def test_filter_empty_bands():
    classifier = BandClassifier()
    assert classifier.filter_by_band_tolerance(points_at(5), []) == []
    assert classifier.filter_for_band(points_at(5), [], 5) == []
