import numpy as np
import pytest

from edgarproc.utils.constants import AVOGADRO
from edgarproc.utils.units import UnitMode, convert_units


def test_native_is_unchanged():
    assert convert_units(12.0, UnitMode.NATIVE, 3600.0) == 12.0


def test_rate():
    """Rate is the mass divided by the seconds in the period."""
    assert convert_units(7200.0, UnitMode.RATE, 3600.0) == pytest.approx(2.0)


@pytest.mark.parametrize(
    "substance,molar_mass_kg",
    [("NO2", 46e-3), ("CO", 28e-3), ("SO2", 64e-3)],
)
def test_flux(substance, molar_mass_kg):
    value, seconds, area = 1000.0, 86400.0, 1e14
    flux = convert_units(
        value, UnitMode.FLUX, seconds, area_cm2=area, substance=substance
    )
    expected = value * (AVOGADRO / molar_mass_kg) / (area * seconds)
    assert flux == pytest.approx(expected)


def test_flux_on_arrays():
    values = np.array([[1.0, 2.0], [0.0, 4.0]])
    areas = np.array([[1.0, 2.0], [1.0, 1.0]])
    flux = convert_units(
        values, UnitMode.FLUX, 10.0, area_cm2=areas, substance="CO"
    )
    assert flux.shape == (2, 2)
    assert flux[0, 0] == pytest.approx(flux[0, 1])
    assert flux[1, 0] == 0.0


def test_flux_requires_area_and_substance():
    with pytest.raises(ValueError):
        convert_units(1.0, UnitMode.FLUX, 10.0, substance="CO")
    with pytest.raises(ValueError):
        convert_units(1.0, UnitMode.FLUX, 10.0, area_cm2=1.0)


def test_not_a_unit_mode_raises():
    with pytest.raises(TypeError):
        convert_units(1.0, "rate", 10.0)
