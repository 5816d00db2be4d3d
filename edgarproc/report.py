"""Summaries of the processed emissions."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import shapely
import xarray as xr

from edgarproc import PROCESS
from edgarproc.fields import check_grid
from edgarproc.grids import Grid, RegularGrid
from edgarproc.state import EmissionField, EmissionsState
from edgarproc.temporal import TemporalContext
from edgarproc.utils.constants import get_mass_ratio

logger = logging.getLogger(__name__)

KG_PER_TG = 1e9

# (lon_min, lon_max, lat_min, lat_max) of the regions, bounds included
REGIONS: dict[str, tuple[float, float, float, float]] = {
    "World": (-180.0, 180.0, -90.0, 90.0),
    "North America": (-165.0, -40.0, 20.0, 80.0),
    "South America": (-90.0, -30.0, -60.0, 15.0),
    "Europe": (-15.0, 60.0, 35.0, 80.0),
    "Asia": (60.0, 170.0, 0.0, 80.0),
    "Africa": (-20.0, 55.0, -40.0, 35.0),
}

_LABELS = {
    EmissionField.NOX: "NOx",
    EmissionField.CO: "CO",
    EmissionField.SO2_ANTH: "Anthro SO2",
    EmissionField.SO2_SHIP: "Ship   SO2",
}


def tg_ratio(key: EmissionField) -> float:
    """Factor from kg of the stored substance to Tg of the reported element."""
    tracer = key.tracer
    return get_mass_ratio(tracer.substance, tracer.element) / KG_PER_TG


def total_emissions_tg(state: EmissionsState) -> pd.Series:
    """Total of every field, in Tg of the reported element.

    NOx is reported as N, SO2 as S and CO as CO.
    """
    return pd.Series(
        {
            key.value: float(state.get(key).values.sum()) * tg_ratio(key)
            for key in EmissionField
        },
        name="Tg",
    )


def _cell_centers(grid: Grid) -> tuple[np.ndarray, np.ndarray]:
    """Lon and lat of the cell centers, as arrays of the grid shape."""
    if isinstance(grid, RegularGrid):
        lon, lat = np.meshgrid(grid.lon_range, grid.lat_range, indexing="ij")
        return lon, lat
    centers = shapely.centroid(np.array(grid.cells_as_polylist, dtype=object))
    return (
        shapely.get_x(centers).reshape(grid.shape),
        shapely.get_y(centers).reshape(grid.shape),
    )


def regional_totals(
    field: xr.DataArray, grid: Grid, ratio: float = 1.0
) -> pd.Series:
    """Sum the field over the regions.

    A cell belongs to a region if its center is in the region.

    :arg field: The field to sum, on the grid.
    :arg grid: The grid of the field.
    :arg ratio: Multiplied to the sums (ex. :py:func:`tg_ratio`).
    """
    check_grid(field, grid)
    lon, lat = _cell_centers(grid)
    values = field.transpose("x", "y").to_numpy()

    totals = {}
    for region, (lon_min, lon_max, lat_min, lat_max) in REGIONS.items():
        mask = (lon >= lon_min) & (lon <= lon_max) & (lat >= lat_min) & (lat <= lat_max)
        totals[region] = float(values[mask].sum()) * ratio
    return pd.Series(totals, name=field.attrs.get("units"))


def format_totals(totals: pd.Series, context: TemporalContext) -> str:
    """Framed text summary of the totals."""
    periods = {
        EmissionField.NOX: f"and season {context.season_name}",
        EmissionField.CO: "(annual total)",
        EmissionField.SO2_ANTH: f"and season {context.season_name}",
        EmissionField.SO2_SHIP: f"and month  {context.month_name}",
    }
    lines = ["=" * 79, "E D G A R   E M I S S I O N S", ""]
    for key in EmissionField:
        element = key.tracer.element
        lines.append(
            f"{_LABELS[key]:<10} for year {context.year:4d} {periods[key]:<16} :"
            f" {totals[key.value]:10.4f} [Tg {element}]"
        )
    lines.append("=" * 79)
    return "\n".join(lines)


def log_totals(state: EmissionsState, context: TemporalContext):
    """Log the summary of the totals at the PROCESS level."""
    logger.log(PROCESS, "\n" + format_totals(total_emissions_tg(state), context))
