"""Storage of the processed emission fields."""

from __future__ import annotations

import logging
from enum import Enum

import numpy as np
import xarray as xr

from edgarproc.fields import N_HOURS, Units, check_grid, check_units, make_field
from edgarproc.grids import Grid
from edgarproc.sectors import CO, NOX, SOX, Tracer

logger = logging.getLogger(__name__)


class EmissionField(Enum):
    """The emission fields produced by the processing."""

    NOX = "NOx"
    CO = "CO"
    SO2_ANTH = "SO2_anth"
    SO2_SHIP = "SO2_ship"

    @property
    def tracer(self) -> Tracer:
        return {
            EmissionField.NOX: NOX,
            EmissionField.CO: CO,
            EmissionField.SO2_ANTH: SOX,
            EmissionField.SO2_SHIP: SOX,
        }[self]

    @property
    def units(self) -> Units:
        """Units of the stored field: the reporting period of the field."""
        return {
            EmissionField.NOX: Units.KG_PER_SEASON,
            EmissionField.CO: Units.KG_PER_YEAR,
            EmissionField.SO2_ANTH: Units.KG_PER_SEASON,
            EmissionField.SO2_SHIP: Units.KG_PER_MONTH,
        }[self]


class EmissionsState:
    """Owner of the fields on the model grid.

    The fields are allocated once with :py:meth:`allocate`, replaced as a
    whole with :py:meth:`commit` and released with :py:meth:`reset`.
    Nothing else keeps a writable reference to them.
    """

    grid: Grid | None
    fields: dict[EmissionField, xr.DataArray]
    diurnal_factors: xr.DataArray | None
    area_cm2: np.ndarray | None

    def __init__(self):
        self.grid = None
        self.fields = {}
        self.diurnal_factors = None
        self.area_cm2 = None

    @property
    def is_allocated(self) -> bool:
        return self.grid is not None

    def allocate(self, grid: Grid):
        """Allocate all the fields, filled with zeros."""
        if self.is_allocated:
            raise RuntimeError(f"{self} is already allocated.")
        logger.debug(f"Allocating emission fields on {grid}")
        self.grid = grid
        self.fields = {
            key: make_field(None, grid, key.units) for key in EmissionField
        }
        # No emissions anywhere, so no diurnal variation
        self.diurnal_factors = make_field(
            np.ones((N_HOURS, *grid.shape)), grid, Units.DIMENSIONLESS, hourly=True
        )
        self.area_cm2 = np.array(grid.cell_areas_cm2, dtype=float)
        self.area_cm2.setflags(write=False)

    def _check_allocated(self):
        if not self.is_allocated:
            raise RuntimeError("The emission fields are not allocated.")

    def commit(self, key: EmissionField, field: xr.DataArray):
        """Replace the stored field."""
        self._check_allocated()
        check_grid(field, self.grid)
        check_units(field, key.units)
        self.fields[key] = field

    def commit_diurnal_factors(self, factors: xr.DataArray):
        """Replace the stored diurnal factors."""
        self._check_allocated()
        check_grid(factors, self.grid)
        check_units(factors, Units.DIMENSIONLESS)
        if factors.dims != ("hour", "x", "y"):
            raise ValueError(f"{factors.dims=} must be ('hour', 'x', 'y').")
        self.diurnal_factors = factors

    def get(self, key: EmissionField) -> xr.DataArray:
        self._check_allocated()
        return self.fields[key]

    def reset(self):
        """Release the fields. Can be called more than once."""
        self.grid = None
        self.fields = {}
        self.diurnal_factors = None
        self.area_cm2 = None
