"""Summing the sectors of the inventory."""

from __future__ import annotations

import numpy as np
import xarray as xr

from edgarproc.fields import N_HOURS, check_grid, get_units
from edgarproc.profiles import DiurnalProfile


def _check_compatible(total: xr.DataArray, sector_field: xr.DataArray):
    check_grid(sector_field, total.attrs["grid"])
    if get_units(sector_field) != get_units(total):
        raise ValueError(
            f"Cannot add a field in {get_units(sector_field).value!r} "
            f"to a total in {get_units(total).value!r}."
        )


def accumulate(total: xr.DataArray, sector_field: xr.DataArray):
    """Add the field of a sector to the total, in place."""
    _check_compatible(total, sector_field)
    total.values += sector_field.values


def accumulate_with_hourly_weights(
    total: xr.DataArray,
    hourly: xr.DataArray,
    sector_field: xr.DataArray,
    weights: DiurnalProfile | np.ndarray,
):
    """Add the field of a sector to the total and to the hourly totals.

    For every hour ``h``, ``hourly[h] += weights[h] * sector_field``.

    :arg total: The total, of shape (nx, ny).
    :arg hourly: The hourly totals, of shape (24, nx, ny).
    :arg sector_field: The emissions of the sector.
    :arg weights: The 24 diurnal weights of the sector.
    """
    if isinstance(weights, DiurnalProfile):
        weights = weights.weights
    weights = np.asarray(weights, dtype=float)
    if weights.shape != (N_HOURS,):
        raise ValueError(f"{weights.shape=} must be ({N_HOURS},).")
    _check_compatible(hourly, sector_field)

    accumulate(total, sector_field)
    # All the hours and cells at once
    hourly.values += weights[:, np.newaxis, np.newaxis] * sector_field.values
