"""
Tests for anchor curves and the polar model.
"""

import pytest

from polarkit.core.config import EngineConfig
from polarkit.core.models import (
    AnchorCurve,
    AnchorPoint,
    BandRange,
    PolarModel,
    ProtectedAngleError,
)


def make_curve(wind_speed=10, points=((0, 0), (90, 6), (180, 3))):
    return AnchorCurve(
        wind_speed=wind_speed,
        anchor_points=[AnchorPoint(a, s) for a, s in points],
    )


def make_model():
    return PolarModel(
        [
            make_curve(5, ((0, 0), (90, 4), (180, 2))),
            make_curve(10, ((0, 0), (90, 6), (180, 3))),
            make_curve(15, ((0, 0), (90, 8), (180, 4))),
        ]
    )


def test_curve_sorted_on_creation():
    curve = make_curve(points=((180, 3), (0, 0), (90, 6)))
    assert curve.angles == [0, 90, 180]


def test_set_boat_speed_replaces_existing():
    curve = make_curve()
    curve.set_boat_speed(90, 7.5)
    assert len(curve) == 3
    assert curve.find(90).boat_speed == 7.5


def test_set_boat_speed_inserts_and_sorts():
    curve = make_curve()
    curve.set_boat_speed(45, 4.0)
    assert curve.angles == [0, 45, 90, 180]
    assert curve.find(45).boat_speed == 4.0


def test_set_boat_speed_does_not_range_check():
    curve = make_curve()
    curve.set_boat_speed(90, -1.0)
    assert curve.find(90).boat_speed == -1.0
    assert not curve.find(90).is_valid()


def test_add_angle_duplicate_is_noop():
    curve = make_curve()
    assert curve.add_angle(90, 99) is False
    assert curve.find(90).boat_speed == 6
    assert len(curve) == 3


def test_add_angle_inserts():
    curve = make_curve()
    assert curve.add_angle(120, 5.0) is True
    assert curve.angles == [0, 90, 120, 180]


def test_delete_angle():
    curve = make_curve()
    assert curve.delete_angle(90) is True
    assert curve.angles == [0, 180]


def test_delete_missing_angle_is_silent():
    curve = make_curve()
    assert curve.delete_angle(45) is False
    assert len(curve) == 3


@pytest.mark.parametrize("angle", [0, 180, 0.0, 180.0])
def test_delete_boundary_angle_rejected(angle):
    curve = make_curve()
    with pytest.raises(ProtectedAngleError):
        curve.delete_angle(angle)
    assert len(curve) == 3


def test_delete_boundary_angle_unprotected():
    curve = make_curve()
    assert curve.delete_angle(0, protect_boundaries=False) is True
    assert curve.angles == [90, 180]


def test_delete_last_boundary_anchor_unprotected_is_refused():
    curve = make_curve(points=((0, 0),))
    assert curve.delete_angle(0, protect_boundaries=False) is False
    assert len(curve) == 1


def test_rename_anchor_within_tolerance():
    curve = make_curve()
    assert curve.rename_anchor(90.05, 100, 6.5) is True
    assert curve.angles == [0, 100, 180]
    assert curve.find(100).boat_speed == 6.5


def test_rename_anchor_resorts():
    curve = make_curve()
    curve.rename_anchor(90, 190, 1.0)
    assert curve.angles == [0, 180, 190]


def test_rename_anchor_outside_tolerance_is_noop():
    curve = make_curve()
    assert curve.rename_anchor(90.2, 100, 6.5) is False
    assert curve.angles == [0, 90, 180]


def test_rename_anchor_onto_existing_angle_is_refused():
    curve = make_curve(points=((0, 0), (90, 4), (180, 5)))
    assert curve.rename_anchor(90, 180, 6) is False
    assert curve.angles == [0, 90, 180]
    assert curve.find(180).boat_speed == 5


def test_rename_anchor_in_place():
    curve = make_curve()
    assert curve.rename_anchor(90.05, 90, 7) is True
    assert curve.angles == [0, 90, 180]
    assert curve.find(90).boat_speed == 7


def test_curve_rejects_duplicate_angles():
    with pytest.raises(ValueError):
        make_curve(points=((0, 0), (90, 6), (90, 7), (180, 3)))


def test_delete_last_anchor_is_refused():
    curve = make_curve(points=((45, 3),))
    assert curve.delete_angle(45) is False
    assert curve.angles == [45]


def test_model_sorted_by_wind_speed():
    model = PolarModel([make_curve(15), make_curve(5), make_curve(10)])
    assert model.wind_speeds() == (5, 10, 15)
    assert [c.wind_speed for c in model] == [5, 10, 15]


def test_model_rejects_duplicate_wind_speed():
    with pytest.raises(ValueError):
        PolarModel([make_curve(10), make_curve(10)])


def test_empty_model():
    model = PolarModel()
    assert model.is_empty()
    assert len(model) == 0
    assert model.wind_speeds() == ()


def test_add_band_seeds_default_curve():
    model = make_model()
    assert model.add_band(12) is True
    assert model.wind_speeds() == (5, 10, 12, 15)
    curve = model[12]
    assert curve.angles == [0, 45, 90, 135, 180]
    assert all(p.boat_speed == 0 for p in curve)


def test_add_band_duplicate_is_noop():
    model = make_model()
    assert model.add_band(10) is False
    assert len(model) == 3
    assert model[10].find(90).boat_speed == 6


def test_add_band_uses_configured_defaults():
    config = EngineConfig(default_band_angles=(0, 90, 180), default_band_speed=1.0)
    model = PolarModel(config=config)
    model.add_band(8)
    assert model[8].angles == [0, 90, 180]
    assert all(p.boat_speed == 1.0 for p in model[8])


def test_delete_band():
    model = make_model()
    assert model.delete_band(10) is True
    assert model.wind_speeds() == (5, 15)


def test_delete_last_band_is_noop():
    model = PolarModel([make_curve(10)])
    assert model.delete_band(10) is False
    assert len(model) == 1


def test_delete_missing_band():
    model = make_model()
    assert model.delete_band(7) is False
    assert len(model) == 3


def test_add_angle_across_model_interpolates_other_bands():
    model = make_model()
    changed = model.add_angle_across_model(10, 45, 5.0)
    assert changed == [5, 10, 15]
    assert model[10].find(45).boat_speed == 5.0
    assert abs(model[5].find(45).boat_speed - 2.0) < 0.0001
    assert abs(model[15].find(45).boat_speed - 4.0) < 0.0001


def test_add_angle_across_model_skips_bands_with_angle():
    model = make_model()
    model[15].add_angle(45, 9.0)
    changed = model.add_angle_across_model(10, 45, 5.0)
    assert changed == [5, 10]
    assert model[15].find(45).boat_speed == 9.0


def test_model_delete_angle_applies_policy():
    model = make_model()
    with pytest.raises(ProtectedAngleError):
        model.delete_angle(10, 180)

    unprotected = PolarModel(
        [make_curve(10)], config=EngineConfig(protect_boundary_angles=False)
    )
    assert unprotected.delete_angle(10, 180) is True


def test_model_copy_is_independent():
    model = make_model()
    clone = model.copy()
    clone[10].set_boat_speed(90, 1.0)
    assert model[10].find(90).boat_speed == 6
    assert clone != model


def test_band_range_contains_half_open():
    band_range = BandRange(wind_speed=10, min_tws=7.5, max_tws=12.5)
    assert band_range.contains(7.5)
    assert band_range.contains(12.4)
    assert not band_range.contains(12.5)


def test_band_range_validation():
    with pytest.raises(ValueError):
        BandRange(wind_speed=5, min_tws=-1, max_tws=2)
    with pytest.raises(ValueError):
        BandRange(wind_speed=5, min_tws=3, max_tws=2)


def test_anchor_point_validity():
    assert AnchorPoint(90, 5).is_valid()
    assert not AnchorPoint(181, 5).is_valid()
    assert not AnchorPoint(90, float("nan")).is_valid()
