import numpy as np
import pytest

from edgarproc.profiles import (
    FLAT,
    INDUSTRY,
    POWER_GENERATION,
    RESIDENTIAL,
    TRANSPORT,
    DiurnalProfile,
    from_yaml,
    to_yaml,
)


def test_default_is_flat():
    profile = DiurnalProfile()
    assert profile.weights.shape == (24,)
    assert profile.mean == 1.0
    assert profile == FLAT


@pytest.mark.parametrize(
    "profile", [INDUSTRY, POWER_GENERATION, RESIDENTIAL, TRANSPORT]
)
def test_sector_profiles_average_to_one(profile):
    assert profile.weights.shape == (24,)
    assert profile.mean == pytest.approx(1.0, abs=0.01)


@pytest.mark.parametrize(
    "weights",
    [
        np.ones(23),
        np.ones(25),
        -np.ones(24),
        np.full(24, np.nan),
    ],
)
def test_invalid_weights(weights):
    with pytest.raises(ValueError):
        DiurnalProfile(weights)


def test_compare_with_other_type_raises():
    with pytest.raises(TypeError):
        FLAT == np.ones(24)


def test_yaml_io(tmp_path):
    yaml_file = tmp_path / "outputs" / "diurnal_profiles.yaml"
    double = DiurnalProfile(np.full(24, 2.0), name="double")
    to_yaml([INDUSTRY, double], yaml_file)

    loaded = from_yaml(yaml_file)

    assert set(loaded) == {"industry", "double"}
    assert loaded["industry"] == INDUSTRY
    assert loaded["double"] == double
    assert loaded["double"].name == "double"


def test_yaml_without_name_raises(tmp_path):
    with pytest.raises(ValueError):
        to_yaml([DiurnalProfile()], tmp_path / "profiles.yaml")


def test_yaml_wrong_length_raises(tmp_path):
    yaml_file = tmp_path / "profiles.yaml"
    yaml_file.write_text("short: [1.0, 2.0]\n")
    with pytest.raises(ValueError):
        from_yaml(yaml_file)


def test_empty_yaml(tmp_path):
    yaml_file = tmp_path / "empty.yaml"
    yaml_file.write_text("")
    assert from_yaml(yaml_file) == {}
