"""Gridded fields carrying their unit and grid.

Every field handled by the processing is a :py:class:`xarray.DataArray`
with the dimensions ``("x", "y")`` (or ``("hour", "x", "y")`` for hourly
fields) and two attributes:

* ``grid``: the name of the :py:class:`~edgarproc.grids.Grid` it lives on,
* ``units``: the value of one of the :py:class:`Units`.

Operations check these tags, such that a scale factor defined on the
reference grid cannot be applied to a field already on the model grid,
and such that an annual total is not converted twice.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
import xarray as xr

from edgarproc.grids import Grid

N_HOURS = 24


class Units(Enum):
    """Units of the fields.

    Emissions are always masses per cell and per reporting period.
    """

    KG_PER_YEAR = "kg yr-1"
    KG_PER_SEASON = "kg season-1"
    KG_PER_MONTH = "kg month-1"
    DIMENSIONLESS = "1"


MASS_UNITS = [Units.KG_PER_YEAR, Units.KG_PER_SEASON, Units.KG_PER_MONTH]


def make_field(
    data: np.ndarray | None,
    grid: Grid,
    units: Units,
    hourly: bool = False,
) -> xr.DataArray:
    """Create a field on the grid.

    :arg data: The values. If None, the field is filled with zeros.
    :arg grid: The grid of the field.
    :arg units: The units of the field.
    :arg hourly: Whether the field has an additional leading hour axis.
    """
    shape = (N_HOURS, *grid.shape) if hourly else grid.shape
    dims = ("hour", "x", "y") if hourly else ("x", "y")

    if data is None:
        data = np.zeros(shape, dtype=float)
    else:
        data = np.array(data, dtype=float)
        if data.shape != shape:
            raise ValueError(
                f"Data of shape {data.shape} does not match {grid} of shape {shape}."
            )
        # Missing cells are zeros
        data[~np.isfinite(data)] = 0.0

    return xr.DataArray(
        data,
        dims=dims,
        attrs={"grid": grid.name, "units": Units(units).value},
    )


def get_units(field: xr.DataArray) -> Units:
    """Return the units of the field."""
    if "units" not in field.attrs:
        raise ValueError(f"Field {field.name=} has no units.")
    return Units(field.attrs["units"])


def check_grid(field: xr.DataArray, grid: Grid | str):
    """Check that the field is defined on the given grid."""
    grid_name = grid if isinstance(grid, str) else grid.name
    if field.attrs.get("grid") != grid_name:
        raise ValueError(
            f"Field is on grid {field.attrs.get('grid')!r}, expected {grid_name!r}."
        )


def check_units(field: xr.DataArray, *units: Units):
    """Check that the field is in one of the given units."""
    field_units = get_units(field)
    if field_units not in units:
        raise ValueError(
            f"Field is in {field_units.value!r}, expected one of "
            f"{[u.value for u in units]}."
        )


def with_units(field: xr.DataArray, units: Units) -> xr.DataArray:
    """Return the same field tagged with the new units."""
    return field.assign_attrs(units=Units(units).value)
