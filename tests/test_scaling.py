from datetime import datetime

import numpy as np
import pytest

from edgarproc.fields import Units, get_units, make_field
from edgarproc.readers import ReadError
from edgarproc.scaling import (
    apply_interannual_scaling,
    apply_monthly_scaling,
    apply_scale_factors,
    apply_seasonal_scaling,
    clamp_interannual_year,
    get_interannual_scale,
    interannual_scale_resources,
    read_seasonal_scale,
)
from edgarproc.sectors import CO, NOX, SOX
from edgarproc.temporal import TemporalContext
from edgarproc.tests_utils.readers import DictSectorReader
from edgarproc.tests_utils.test_grids import model_grid, reference_grid


def _annual(value=10.0, grid=reference_grid):
    return make_field(np.full(grid.shape, value), grid, Units.KG_PER_YEAR)


def _factors(value, grid=reference_grid):
    return make_field(np.full(grid.shape, value), grid, Units.DIMENSIONLESS)


@pytest.mark.parametrize(
    "year,expected",
    [(1990, 1998), (1998, 1998), (2000, 2000), (2001, 2001), (2002, 2002), (2010, 2002)],
)
def test_clamp_interannual_year(year, expected):
    assert clamp_interannual_year(year) == expected


def test_no_interannual_for_base_year():
    assert interannual_scale_resources(NOX, 2000) == []
    reader = DictSectorReader()
    assert get_interannual_scale(NOX, 2000, reader, reference_grid) is None
    assert reader.calls == []


def test_interannual_inside_range():
    assert interannual_scale_resources(CO, 2001) == [
        ("CO/EDGAR.COScalar-2001-2000.geos.1x1", datetime(2000, 1, 1))
    ]


def test_interannual_after_range_is_clamped():
    assert interannual_scale_resources(SOX, 2010) == [
        ("SOx/EDGAR.SOxScalar-2002-2000.geos.1x1", datetime(2000, 1, 1))
    ]


def test_1990_uses_1998_and_its_own_correction():
    resources_1990 = interannual_scale_resources(NOX, 1990)
    resources_1998 = interannual_scale_resources(NOX, 1998)

    # Same primary lookup as 1998
    assert resources_1990[0] == resources_1998[0]
    assert len(resources_1998) == 1
    assert resources_1990[1] == (
        "NOx/EDGAR.NOxScalar-1990-1998.geos.1x1",
        datetime(1990, 1, 1),
    )


@pytest.mark.parametrize("tracer", [NOX, CO])
def test_pre_1998_correction_compounds(tracer):
    prefix = f"{tracer.directory}/EDGAR.{tracer.scale_prefix}Scalar"
    reader = DictSectorReader(
        {
            f"{prefix}-1998-2000.geos.1x1": np.full(reference_grid.shape, 2.0),
            f"{prefix}-1985-1998.geos.1x1": np.full(reference_grid.shape, 3.0),
        },
        default_scale=None,
    )
    factors = get_interannual_scale(tracer, 1985, reader, reference_grid)

    np.testing.assert_allclose(factors.values, 6.0)
    assert get_units(factors) == Units.DIMENSIONLESS
    # The scale factor tracer number is used
    assert {number for _, number, _ in reader.calls} == {tracer.scale_tracer}


def test_so2_has_no_pre_1998_correction():
    resources = interannual_scale_resources(SOX, 1985)
    assert resources == [
        ("SOx/EDGAR.SOxScalar-1998-2000.geos.1x1", datetime(2000, 1, 1))
    ]


def test_missing_interannual_factors_raise():
    reader = DictSectorReader(default_scale=None)
    with pytest.raises(ReadError) as excinfo:
        get_interannual_scale(CO, 2001, reader, reference_grid)
    assert excinfo.value.resource == "CO/EDGAR.COScalar-2001-2000.geos.1x1"


def test_apply_interannual_keeps_units():
    field = make_field(
        np.full(reference_grid.shape, 4.0), reference_grid, Units.KG_PER_SEASON
    )
    scaled = apply_interannual_scaling(field, _factors(0.5))
    np.testing.assert_allclose(scaled.values, 2.0)
    assert get_units(scaled) == Units.KG_PER_SEASON
    # Input not modified
    np.testing.assert_allclose(field.values, 4.0)

    assert apply_interannual_scaling(field, None) is field


def test_seasonal_scaling():
    reader = DictSectorReader(
        {"NOx/anth_NOx_scale.JJA.generic.1x1": np.full(reference_grid.shape, 0.3)}
    )
    context = TemporalContext.from_date(2000, 7)
    factors = read_seasonal_scale(NOX, context, reader, reference_grid)
    assert reader.calls[0][2] == datetime(1985, 6, 1)

    total = _annual(10.0)
    hourly = make_field(
        np.ones((24, *reference_grid.shape)),
        reference_grid,
        Units.KG_PER_YEAR,
        hourly=True,
    )
    total_s, hourly_s = apply_seasonal_scaling([total, hourly], factors, reference_grid)

    np.testing.assert_allclose(total_s.values, 3.0)
    np.testing.assert_allclose(hourly_s.values, 0.3)
    assert get_units(total_s) == Units.KG_PER_SEASON
    assert get_units(hourly_s) == Units.KG_PER_SEASON


def test_seasonal_scaling_after_regridding_raises():
    regridded = _annual(grid=model_grid)
    with pytest.raises(ValueError):
        apply_seasonal_scaling([regridded], _factors(1.0), reference_grid)


def test_seasonal_scaling_twice_raises():
    (seasonal,) = apply_seasonal_scaling([_annual()], _factors(0.25), reference_grid)
    with pytest.raises(ValueError):
        apply_seasonal_scaling([seasonal], _factors(0.25), reference_grid)


def test_monthly_scaling_on_model_grid():
    reader = DictSectorReader(
        {"SOx/ship_SOx_scale.MAR.geos.1x1": np.full(model_grid.shape, 0.1)}
    )
    context = TemporalContext.from_date(2002, 3)
    monthly = apply_monthly_scaling(
        _annual(20.0, grid=model_grid), SOX, context, reader, model_grid
    )

    np.testing.assert_allclose(monthly.values, 2.0)
    assert get_units(monthly) == Units.KG_PER_MONTH
    assert reader.calls == [
        ("SOx/ship_SOx_scale.MAR.geos.1x1", SOX.scale_tracer, datetime(1985, 3, 1))
    ]


def test_monthly_scaling_before_regridding_raises():
    reader = DictSectorReader()
    context = TemporalContext.from_date(2002, 3)
    with pytest.raises(ValueError):
        apply_monthly_scaling(_annual(), SOX, context, reader, model_grid)


def test_negative_factors_raise():
    with pytest.raises(ValueError):
        apply_scale_factors(_annual(), _factors(-1.0))


def test_factors_must_be_dimensionless():
    with pytest.raises(ValueError):
        apply_scale_factors(_annual(), _annual())
