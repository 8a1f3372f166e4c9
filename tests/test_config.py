"""
Tests for engine configuration.
"""

import pytest

from polarkit.core.config import EngineConfig


def test_defaults():
    config = EngineConfig()
    assert config.band_tolerance == 2.5
    assert config.rename_tolerance == 0.1
    assert config.dense_merge_tolerance == 0.001
    assert config.default_band_angles == (0, 45, 90, 135, 180)
    assert config.protect_boundary_angles is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"band_tolerance": -1},
        {"rename_tolerance": 0},
        {"dense_merge_tolerance": 0},
        {"default_band_angles": ()},
        {"default_band_angles": (0, 90, 90)},
        {"default_band_angles": (0, 200)},
        {"default_band_speed": -0.5},
        {"histogram_bins": 0},
    ],
)
def test_validation(kwargs):
    with pytest.raises(ValueError):
        EngineConfig(**kwargs)


def test_from_env():
    environ = {
        "POLARKIT_BAND_TOLERANCE": "3",
        "POLARKIT_PROTECT_BOUNDARY_ANGLES": "false",
        "POLARKIT_HISTOGRAM_BINS": "20",
        "UNRELATED": "1",
    }
    config = EngineConfig.from_env(environ=environ)
    assert config.band_tolerance == 3.0
    assert config.protect_boundary_angles is False
    assert config.histogram_bins == 20
    assert config.rename_tolerance == 0.1


def test_from_env_custom_prefix():
    config = EngineConfig.from_env(prefix="APP_", environ={"APP_BAND_TOLERANCE": "1.5"})
    assert config.band_tolerance == 1.5


def test_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("POLARKIT_RENAME_TOLERANCE", "0.25")
    assert EngineConfig.from_env().rename_tolerance == 0.25


@pytest.mark.parametrize(
    "name, value",
    [
        ("POLARKIT_BAND_TOLERANCE", "wide"),
        ("POLARKIT_HISTOGRAM_BINS", "2.5"),
        ("POLARKIT_PROTECT_BOUNDARY_ANGLES", "maybe"),
    ],
)
def test_from_env_invalid(name, value):
    with pytest.raises(ValueError):
        EngineConfig.from_env(environ={name: value})
