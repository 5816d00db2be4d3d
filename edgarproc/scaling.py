"""Temporal scaling of the annual inventory.

The inventory is given as annual totals for the year 2000. The scale
factors convert it to the emissions of a season, of a month or of another
year. All factors are dimensionless fields applied element-wise.
"""

from __future__ import annotations

import logging
from datetime import datetime

import numpy as np
import xarray as xr

from edgarproc.fields import (
    MASS_UNITS,
    Units,
    check_grid,
    check_units,
    get_units,
    with_units,
)
from edgarproc.grids import Grid
from edgarproc.readers import (
    INVENTORY_REFERENCE_TIME,
    SectorReader,
    interannual_scale_resource,
    monthly_ship_scale_resource,
    seasonal_scale_resource,
)
from edgarproc.sectors import Tracer
from edgarproc.temporal import TemporalContext

logger = logging.getLogger(__name__)

BASE_YEAR = 2000
# Years for which interannual factors from the base year exist
INTERANNUAL_MIN_YEAR = 1998
INTERANNUAL_MAX_YEAR = 2002


def apply_scale_factors(field: xr.DataArray, factors: xr.DataArray) -> xr.DataArray:
    """Multiply the field by the dimensionless factors.

    Hourly fields are scaled at every hour.
    """
    check_units(factors, Units.DIMENSIONLESS)
    check_grid(field, factors.attrs["grid"])
    if np.any(factors.values < 0):
        raise ValueError("Scale factors must be non negative.")
    scaled = field.copy(data=field.values * factors.values)
    return scaled


def read_seasonal_scale(
    tracer: Tracer,
    context: TemporalContext,
    reader: SectorReader,
    reference_grid: Grid,
) -> xr.DataArray:
    """Read the seasonal scale factors, defined on the reference grid."""
    record = reader.read(
        seasonal_scale_resource(tracer, context.season),
        tracer,
        reference_grid,
        context.season_reference_time,
        units=Units.DIMENSIONLESS,
        scale_factors=True,
    )
    return record.field


def apply_seasonal_scaling(
    fields: list[xr.DataArray],
    factors: xr.DataArray,
    reference_grid: Grid,
) -> list[xr.DataArray]:
    """Convert annual fields on the reference grid to seasonal fields.

    The same factors are applied to all the fields (ex. the total and the
    hourly totals).
    """
    check_grid(factors, reference_grid)
    out = []
    for field in fields:
        check_grid(field, reference_grid)
        check_units(field, Units.KG_PER_YEAR)
        out.append(with_units(apply_scale_factors(field, factors), Units.KG_PER_SEASON))
    return out


def apply_monthly_scaling(
    field: xr.DataArray,
    tracer: Tracer,
    context: TemporalContext,
    reader: SectorReader,
    model_grid: Grid,
) -> xr.DataArray:
    """Convert an annual field on the model grid to a monthly field.

    The monthly factors of the ship emissions are only defined on the
    model grid, so this must happen after regridding.
    """
    check_grid(field, model_grid)
    check_units(field, Units.KG_PER_YEAR)
    record = reader.read(
        monthly_ship_scale_resource(tracer, context.month_name),
        tracer,
        model_grid,
        context.month_reference_time,
        units=Units.DIMENSIONLESS,
        scale_factors=True,
    )
    return with_units(apply_scale_factors(field, record.field), Units.KG_PER_MONTH)


def clamp_interannual_year(year: int) -> int:
    """Year of the closest available interannual scale factors."""
    return max(min(year, INTERANNUAL_MAX_YEAR), INTERANNUAL_MIN_YEAR)


def interannual_scale_resources(tracer: Tracer, year: int) -> list[tuple[str, datetime]]:
    """The scale factor resources needed to go from the base year to the year.

    Years outside the available range are clamped, which is an
    approximation. Before 1998, tracers with a pre 1998 correction use in
    addition the factors from 1998 to the year.

    :return: The resources and their time stamps, to be multiplied together.
    """
    if year == BASE_YEAR:
        return []

    resources = [
        (
            interannual_scale_resource(tracer, clamp_interannual_year(year), BASE_YEAR),
            INVENTORY_REFERENCE_TIME,
        )
    ]
    if year < INTERANNUAL_MIN_YEAR and tracer.pre_1998_correction:
        resources.append(
            (
                interannual_scale_resource(tracer, year, INTERANNUAL_MIN_YEAR),
                datetime(year, 1, 1),
            )
        )
    return resources


def get_interannual_scale(
    tracer: Tracer,
    year: int,
    reader: SectorReader,
    reference_grid: Grid,
) -> xr.DataArray | None:
    """Read the interannual scale factors of the tracer for the year.

    :return: The factors on the reference grid, or None for the base year.
    """
    factors = None
    for resource, reference_time in interannual_scale_resources(tracer, year):
        record = reader.read(
            resource,
            tracer,
            reference_grid,
            reference_time,
            units=Units.DIMENSIONLESS,
            scale_factors=True,
        )
        if factors is None:
            factors = record.field
        else:
            factors = apply_scale_factors(factors, record.field)

    if factors is not None and year != clamp_interannual_year(year):
        logger.debug(
            f"Interannual factors of {tracer.name} for {year} use the"
            f" {clamp_interannual_year(year)} factors."
        )
    return factors


def apply_interannual_scaling(
    field: xr.DataArray,
    factors: xr.DataArray | None,
) -> xr.DataArray:
    """Scale a field of the base year to the year of the factors.

    The units of the field are kept.
    """
    check_units(field, *MASS_UNITS)
    if factors is None:
        return field
    return with_units(apply_scale_factors(field, factors), get_units(field))
