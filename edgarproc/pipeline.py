"""Processing of the EDGAR inventory for a given year and month.

:py:class:`EdgarEmissions` reads the sectors of the inventory, sums them,
applies the temporal scale factors and regrids the totals to the model
grid. The fields are then available through :py:meth:`EdgarEmissions.get`
in the requested units.

CO is annual and only recomputed when the year changes. NOx and SO2 have
seasonal (and monthly for ships) factors and are recomputed when the
month changes. A new year with the same month keeps the NOx and SO2 of
the previous call, with the interannual factors of that year.
"""

from __future__ import annotations

import logging

import numpy as np
import xarray as xr

from edgarproc.accumulate import accumulate, accumulate_with_hourly_weights
from edgarproc.config import EdgarConfig
from edgarproc.fields import N_HOURS, Units, make_field
from edgarproc.future import FutureEmissionsScaler
from edgarproc.grids import Grid
from edgarproc.readers import INVENTORY_REFERENCE_TIME, SectorReader, sector_resource
from edgarproc.regrid import QuantityKind, Regridder
from edgarproc.report import log_totals
from edgarproc.scaling import (
    apply_interannual_scaling,
    apply_monthly_scaling,
    apply_seasonal_scaling,
    get_interannual_scale,
    read_seasonal_scale,
)
from edgarproc.sectors import (
    CO,
    DEFAULT_SECTORS,
    NOX,
    SOX,
    Sector,
    Tracer,
    select_sectors,
)
from edgarproc.state import EmissionField, EmissionsState
from edgarproc.temporal import TemporalContext
from edgarproc.utilities import check_month
from edgarproc.utils.units import UnitMode, convert_units

logger = logging.getLogger(__name__)


class EdgarEmissions:
    """EDGAR anthropogenic emissions on the model grid.

    :param config: Which tracers and sectors are processed.
    :param reader: Reads the inventory and scale factor resources.
    :param regridder: Regrids from the reference grid to the model grid.
    :param reference_grid: The grid of the inventory (generic 1x1).
    :param model_grid: The grid of the model.
    :param sectors: The sectors of each tracer, by tracer name.
        Defaults to :py:data:`~edgarproc.sectors.DEFAULT_SECTORS`.
    :param future_scaler: Factors for future emissions, required if
        ``config.use_future_emissions`` is set.
    """

    def __init__(
        self,
        config: EdgarConfig,
        reader: SectorReader,
        regridder: Regridder,
        reference_grid: Grid,
        model_grid: Grid,
        sectors: dict[str, list[Sector]] | None = None,
        future_scaler: FutureEmissionsScaler | None = None,
    ):
        if config.use_future_emissions and future_scaler is None:
            raise ValueError(
                "A future_scaler is required when 'use_future_emissions' is set."
            )
        self.config = config
        self.reader = reader
        self.regridder = regridder
        self.reference_grid = reference_grid
        self.model_grid = model_grid
        self.sectors = DEFAULT_SECTORS if sectors is None else sectors
        self.future_scaler = future_scaler

        self.state = EmissionsState()
        self._context: TemporalContext | None = None
        self._last_year: int | None = None
        self._last_month: int | None = None

    def __repr__(self) -> str:
        return f"EdgarEmissions({self.model_grid.name}, ready={self.is_ready})"

    @property
    def is_ready(self) -> bool:
        return self.state.is_allocated and self._context is not None

    @property
    def context(self) -> TemporalContext:
        """The temporal context of the fields currently stored."""
        self._check_ready()
        return self._context

    def _check_ready(self):
        if not self.is_ready:
            raise RuntimeError(f"{self} has not processed any date yet, call 'process'.")

    def _get_sectors(self, tracer: Tracer) -> list[Sector]:
        if tracer.name not in self.sectors:
            raise ValueError(f"No sectors given for tracer {tracer.name}.")
        return select_sectors(self.sectors[tracer.name], self.config.use_ship)

    def _read_sector(self, tracer: Tracer, sector: Sector) -> xr.DataArray:
        record = self.reader.read(
            sector_resource(tracer, sector),
            tracer,
            self.reference_grid,
            INVENTORY_REFERENCE_TIME,
        )
        return record.field

    def _sum_sectors(self, tracer: Tracer, sectors: list[Sector]) -> xr.DataArray:
        """Annual total of the sectors on the reference grid."""
        total = make_field(None, self.reference_grid, Units.KG_PER_YEAR)
        for sector in sectors:
            accumulate(total, self._read_sector(tracer, sector))
        return total

    def _to_model_grid(self, field: xr.DataArray) -> xr.DataArray:
        return self.regridder.regrid(QuantityKind.EXTENSIVE, field)

    def _compute_co(self, context: TemporalContext) -> xr.DataArray:
        logger.info(f"Computing {CO.name} emissions for {context.year}")
        total = self._sum_sectors(CO, self._get_sectors(CO))
        factors = get_interannual_scale(CO, context.year, self.reader, self.reference_grid)
        total = apply_interannual_scaling(total, factors)
        return self._to_model_grid(total)

    def _compute_diurnal_factors(
        self, total: xr.DataArray, hourly: xr.DataArray
    ) -> xr.DataArray:
        """Ratio of the hourly totals to the total on the model grid.

        The factor is 1 in the cells without emissions.
        """
        total_model = self.regridder.regrid(QuantityKind.INTENSIVE, total).to_numpy()
        hourly_model = self.regridder.regrid(QuantityKind.INTENSIVE, hourly).to_numpy()
        factors = np.ones_like(hourly_model)
        mask = np.broadcast_to(total_model > 0, hourly_model.shape)
        np.divide(
            hourly_model,
            np.broadcast_to(total_model, hourly_model.shape),
            out=factors,
            where=mask,
        )
        return make_field(factors, self.model_grid, Units.DIMENSIONLESS, hourly=True)

    def _compute_nox(
        self, context: TemporalContext
    ) -> tuple[xr.DataArray, xr.DataArray]:
        logger.info(
            f"Computing {NOX.name} emissions for {context.year} {context.season_name}"
        )
        total = make_field(None, self.reference_grid, Units.KG_PER_YEAR)
        hourly = make_field(None, self.reference_grid, Units.KG_PER_YEAR, hourly=True)
        for sector in self._get_sectors(NOX):
            accumulate_with_hourly_weights(
                total, hourly, self._read_sector(NOX, sector), sector.diurnal_profile
            )

        season_factors = read_seasonal_scale(
            NOX, context, self.reader, self.reference_grid
        )
        total, hourly = apply_seasonal_scaling(
            [total, hourly], season_factors, self.reference_grid
        )
        diurnal_factors = self._compute_diurnal_factors(total, hourly)

        factors = get_interannual_scale(NOX, context.year, self.reader, self.reference_grid)
        total = apply_interannual_scaling(total, factors)
        return self._to_model_grid(total), diurnal_factors

    def _compute_so2(
        self, context: TemporalContext
    ) -> dict[EmissionField, xr.DataArray]:
        logger.info(
            f"Computing {SOX.name} emissions for {context.year} {context.month_name}"
        )
        sectors = self._get_sectors(SOX)
        anthro = self._sum_sectors(SOX, [s for s in sectors if not s.is_ship])
        factors = get_interannual_scale(SOX, context.year, self.reader, self.reference_grid)

        season_factors = read_seasonal_scale(
            SOX, context, self.reader, self.reference_grid
        )
        (anthro,) = apply_seasonal_scaling([anthro], season_factors, self.reference_grid)
        anthro = apply_interannual_scaling(anthro, factors)
        fields = {EmissionField.SO2_ANTH: self._to_model_grid(anthro)}

        if self.config.use_ship:
            ship = self._sum_sectors(SOX, [s for s in sectors if s.is_ship])
            ship = self._to_model_grid(apply_interannual_scaling(ship, factors))
            fields[EmissionField.SO2_SHIP] = apply_monthly_scaling(
                ship, SOX, context, self.reader, self.model_grid
            )
        return fields

    def process(self, year: int, month: int):
        """Compute the emissions for the year and month.

        Nothing is recomputed if the date did not change. If anything fails,
        the fields of the previous date are kept.

        :arg year: The year, scaled from 2000 with the interannual factors.
        :arg month: The month, from 1 to 12.
        """
        check_month(month)
        context = TemporalContext.from_date(year, month)

        if not self.state.is_allocated:
            self.state.allocate(self.model_grid)

        new_fields: dict[EmissionField, xr.DataArray] = {}
        diurnal_factors = None

        year_changed = year != self._last_year
        month_changed = month != self._last_month

        if year_changed and self.config.use_co:
            new_fields[EmissionField.CO] = self._compute_co(context)
        if month_changed:
            if self.config.use_nox:
                new_fields[EmissionField.NOX], diurnal_factors = self._compute_nox(context)
            if self.config.use_sox:
                new_fields.update(self._compute_so2(context))
        if not (year_changed or month_changed):
            logger.debug(f"Emissions of {year}-{month:02d} already computed.")

        # Everything succeeded
        for key, field in new_fields.items():
            self.state.commit(key, field)
        if diurnal_factors is not None:
            self.state.commit_diurnal_factors(diurnal_factors)
        self._last_year = year
        self._last_month = month
        self._context = context

        log_totals(self.state, context)

    def seconds_in_period(self, field: EmissionField) -> float:
        """Length of the period of the stored field, in seconds."""
        context = self.context
        return {
            EmissionField.NOX: context.seconds_in_season,
            EmissionField.CO: context.seconds_in_reference_year,
            EmissionField.SO2_ANTH: context.seconds_in_season,
            EmissionField.SO2_SHIP: context.seconds_in_month,
        }[field]

    def _check_cell(self, i: int, j: int):
        nx, ny = self.model_grid.shape
        if not (0 <= i < nx and 0 <= j < ny):
            raise IndexError(f"Cell ({i}, {j}) is outside the grid of shape {(nx, ny)}.")

    def get(
        self,
        field: EmissionField,
        i: int,
        j: int,
        unit_mode: UnitMode = UnitMode.NATIVE,
    ) -> float:
        """Return the emission of the cell (i, j) of the model grid.

        :arg field: Which emission.
        :arg i: Index of the cell along x.
        :arg j: Index of the cell along y.
        :arg unit_mode: The units of the returned value.
        """
        self._check_ready()
        if not isinstance(unit_mode, UnitMode):
            raise TypeError(f"{unit_mode=} must be a {UnitMode}.")
        self._check_cell(i, j)

        value = float(self.state.get(field).values[i, j])
        if self.config.use_future_emissions:
            value *= self.future_scaler.get_scale(field.tracer, i, j)

        return float(
            convert_units(
                value,
                unit_mode,
                self.seconds_in_period(field),
                area_cm2=self.state.area_cm2[i, j],
                substance=field.tracer.substance,
            )
        )

    def get_field(
        self, field: EmissionField, unit_mode: UnitMode = UnitMode.NATIVE
    ) -> np.ndarray:
        """Return the emissions of all the cells, as an array of shape (nx, ny)."""
        self._check_ready()
        if not isinstance(unit_mode, UnitMode):
            raise TypeError(f"{unit_mode=} must be a {UnitMode}.")

        values = self.state.get(field).to_numpy().copy()
        if self.config.use_future_emissions:
            nx, ny = self.model_grid.shape
            values *= np.array(
                [
                    [self.future_scaler.get_scale(field.tracer, i, j) for j in range(ny)]
                    for i in range(nx)
                ]
            )

        return convert_units(
            values,
            unit_mode,
            self.seconds_in_period(field),
            area_cm2=self.state.area_cm2,
            substance=field.tracer.substance,
        )

    def get_diurnal_factor(self, i: int, j: int, hour: int) -> float:
        """Return the NOx diurnal factor of the cell at the hour (0 to 23)."""
        self._check_ready()
        if not isinstance(hour, (int, np.integer)) or isinstance(hour, bool):
            raise TypeError(f"{hour=} must be an int.")
        if not 0 <= hour < N_HOURS:
            raise ValueError(f"{hour=} must be between 0 and {N_HOURS - 1}.")
        self._check_cell(i, j)
        return float(self.state.diurnal_factors.values[hour, i, j])

    def reset(self):
        """Release the fields. The next :py:meth:`process` starts from scratch."""
        self.state.reset()
        self._context = None
        self._last_year = None
        self._last_month = None
