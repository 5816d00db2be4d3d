"""Reading the gridded inventory and scale factor files.

The processing only needs a :py:class:`SectorReader`: something returning
the gridded field stored in a named resource. How the resource is decoded
is up to the reader. :py:class:`NetcdfSectorReader` reads netcdf files
laid out like the EDGAR 2006/07 data directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from pathlib import Path

import numpy as np
import xarray as xr

from edgarproc.fields import Units, make_field
from edgarproc.grids import Grid
from edgarproc.sectors import Sector, Tracer
from edgarproc.temporal import Season

logger = logging.getLogger(__name__)

# Time stamp of the base inventory files
INVENTORY_REFERENCE_TIME = datetime(2000, 1, 1)


class ReadError(OSError):
    """A resource could not be read.

    :param resource: The name of the resource that failed.
    """

    def __init__(self, resource: str, reason: str = ""):
        self.resource = resource
        self.reason = reason
        msg = f"Could not read resource '{resource}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


@dataclass(frozen=True, eq=False)
class SectorRecord:
    """The field read from a resource.

    :param tracer: The tracer of the data.
    :param resource: The name of the resource it was read from.
    :param reference_time: Time stamp of the data.
    :param field: The gridded data.
    """

    tracer: Tracer
    resource: str
    reference_time: datetime
    field: xr.DataArray


class SectorReader:
    """Base class for the readers of gridded resources.

    Derive from this class and implement :py:meth:`read_array`.
    """

    def read_array(
        self,
        resource: str,
        tracer_number: int,
        grid: Grid,
        reference_time: datetime,
    ) -> np.ndarray:
        """Return the data of the resource as an array of the grid shape.

        Must raise :py:class:`ReadError` if the resource cannot be read.
        """
        raise NotImplementedError("Method not implemented")

    def read(
        self,
        resource: str,
        tracer: Tracer,
        grid: Grid,
        reference_time: datetime,
        units: Units = Units.KG_PER_YEAR,
        scale_factors: bool = False,
    ) -> SectorRecord:
        """Read the resource into a :py:class:`SectorRecord`.

        :arg resource: Name of the resource.
        :arg tracer: Tracer of the data.
        :arg grid: Grid on which the resource is defined.
        :arg reference_time: Time stamp of the data to read.
        :arg units: Units of the data.
        :arg scale_factors: Whether the resource is a scale factor file,
            which uses the scale tracer number.
        """
        tracer_number = tracer.scale_tracer if scale_factors else tracer.data_tracer
        logger.info(f"Reading {resource} ({tracer.name}, {reference_time:%Y-%m-%d})")
        data = self.read_array(resource, tracer_number, grid, reference_time)
        data = np.asarray(data, dtype=float)
        if data.shape != grid.shape:
            raise ReadError(
                resource, f"shape {data.shape} does not match {grid} {grid.shape}"
            )
        if np.any(data < 0):
            raise ReadError(resource, "negative values found")
        return SectorRecord(
            tracer=tracer,
            resource=resource,
            reference_time=reference_time,
            field=make_field(data, grid, units),
        )


class NetcdfSectorReader(SectorReader):
    """Read resources from netcdf files.

    The resource ``"NOx/EDGAR.f1000nox.generic.1x1"`` is read from the file
    ``data_dir / "NOx" / "EDGAR.f1000nox.generic.1x1.nc"``.

    The file must contain one data variable with ``lon`` and ``lat``
    dimensions (and optionally ``time``). If more than one variable is
    present, the one with the attribute ``tracer`` equal to the requested
    tracer number is used.

    :param data_dir: The directory containing the files.
    :param suffix: Suffix appended to the resource names.
    """

    def __init__(
        self,
        data_dir: PathLike,
        suffix: str = ".nc",
        lon_name: str = "lon",
        lat_name: str = "lat",
        time_name: str = "time",
    ):
        self.data_dir = Path(data_dir)
        self.suffix = suffix
        self.lon_name = lon_name
        self.lat_name = lat_name
        self.time_name = time_name

    def get_path(self, resource: str) -> Path:
        return self.data_dir / f"{resource}{self.suffix}"

    def _select_variable(self, ds: xr.Dataset, resource: str, tracer: int) -> xr.DataArray:
        variables = list(ds.data_vars)
        if len(variables) == 1:
            return ds[variables[0]]
        matching = [v for v in variables if ds[v].attrs.get("tracer") == tracer]
        if len(matching) != 1:
            raise ReadError(
                resource, f"cannot select a variable for {tracer=} in {variables}"
            )
        return ds[matching[0]]

    def read_array(
        self,
        resource: str,
        tracer_number: int,
        grid: Grid,
        reference_time: datetime,
    ) -> np.ndarray:
        filepath = self.get_path(resource)
        if not filepath.is_file():
            raise ReadError(resource, f"file {filepath} not found")

        try:
            with xr.open_dataset(filepath) as ds:
                da = self._select_variable(ds, resource, tracer_number)
                if self.time_name in da.dims:
                    da = da.sel({self.time_name: np.datetime64(reference_time)})
                da = da.transpose(self.lon_name, self.lat_name)
                data = da.fillna(0.0).to_numpy()
        except ReadError:
            raise
        except (KeyError, ValueError, OSError) as e:
            raise ReadError(resource, str(e)) from e

        return data


def sector_resource(tracer: Tracer, sector: Sector) -> str:
    """Resource of the inventory data of a sector."""
    return f"{tracer.directory}/EDGAR.{sector.filename}.generic.1x1"


def seasonal_scale_resource(tracer: Tracer, season: Season) -> str:
    """Resource of the seasonal scale factors of anthropogenic emissions."""
    return (
        f"{tracer.directory}/anth_{tracer.scale_prefix}_scale.{season.name}.generic.1x1"
    )


def monthly_ship_scale_resource(tracer: Tracer, month_name: str) -> str:
    """Resource of the monthly scale factors of ship emissions."""
    return f"{tracer.directory}/ship_{tracer.scale_prefix}_scale.{month_name}.geos.1x1"


def interannual_scale_resource(tracer: Tracer, year: int, base_year: int) -> str:
    """Resource of the scale factors from the base year to the year."""
    return (
        f"{tracer.directory}/EDGAR.{tracer.scale_prefix}Scalar-{year:04d}-{base_year}"
        ".geos.1x1"
    )
