"""Edgarproc Grids.

Classes handling the grids used by the processing, namely the reference
grid of the EDGAR inventory and the simulation grid of the model.

Fields defined on a grid are arrays of shape ``(nx, ny)``. The cell ``k`` of
:py:attr:`Grid.cells_as_polylist` is the cell ``(k // ny, k % ny)`` of such
an array (C order flattening).
"""

from __future__ import annotations

import logging
import math
from functools import cached_property
from typing import Iterable

import geopandas as gpd
import numpy as np
from shapely.creation import polygons
from shapely.geometry import Polygon

WGS84 = 4326
WGS84_NSIDC = 6933  # Unit: meters

# Radius of the earth
R_EARTH = 6371000  # m


logger = logging.getLogger(__name__)

# Type alias
# minx, miny, maxx, maxy
BoundingBox = tuple[float, float, float, float]


class Grid:
    """Abstract base class for a grid.

    Derive your own grid implementation from this and make sure to provide
    an appropriate implementation of the required methods.

    :param name: Name of the grid. Fields carry this name in their
        ``grid`` attribute.
    :type name: str
    :param crs: The coordinate reference system of the grid.
    :type crs: int | str

    :param nx: Number of cells in the x direction.
    :type nx: int
    :param ny: Number of cells in the y direction.
    :type ny: int
    :param shape: The shape of the grid as a tuple (nx, ny).
    :type shape: tuple[int, int]
    :param cell_areas: Area of the cells in m^2.
    :type cell_areas: Iterable[float]
    """

    name: str

    nx: int
    ny: int

    # The crs value as an integer
    crs: int | str

    def __init__(self, name: str | None, crs: int | str = WGS84):
        if name is None:
            name = "unnamed"
        self.name = name
        self.crs = crs

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"

    @property
    def gdf(self) -> gpd.GeoDataFrame:
        """Return a geopandas dataframe containing the grid."""
        if not hasattr(self, "_gdf"):
            self._gdf = gpd.GeoDataFrame(
                geometry=self.cells_as_polylist,
                crs=self.crs,
            )
        return self._gdf

    def cell_corners(self, i, j):
        """Return the corners of the cell with indices (i,j).

        Returns a tuple of arrays with shape (4,). The first
        tuple element are the x-coordinates of the corners,
        the second are the y-coordinates.
        """
        raise NotImplementedError("Method not implemented")

    @cached_property
    def cells_as_polylist(self) -> list[Polygon]:
        """Return all the cells as a list of polygons."""
        return [
            Polygon(zip(*self.cell_corners(i, j)))
            for i in range(self.nx)
            for j in range(self.ny)
        ]

    @cached_property
    def shape(self) -> tuple[int, int]:
        return (self.nx, self.ny)

    @cached_property
    def cell_areas(self) -> Iterable[float]:
        """Return an array containing the area of each cell in m2."""
        return (
            gpd.GeoSeries(self.cells_as_polylist, crs=self.crs)
            # Convert to an equal area projection to get the area in m^2
            .to_crs(epsg=WGS84_NSIDC).area.to_numpy()
        )

    @cached_property
    def cell_areas_cm2(self) -> np.ndarray:
        """Area of the cells in cm2, as an array of shape (nx, ny)."""
        return np.asarray(self.cell_areas, dtype=float).reshape(self.shape) * 1e4

    def __len__(self):
        """Return the number of cells in the grid."""
        return self.nx * self.ny


class RegularGrid(Grid):
    """Regular grid with rectangular cells.

    To create the grid, one mandatory parameter is the reference:

    :param xmin/ymin: The minimum x and y coordinate of the grid.

    Then you need two of the three following:

    :param xmax/ymax: The maximum x and y coordinate of the grid.
    :param nx/ny: The number of cells in both directions.
    :param dx/dy: The size of the cells.
        The number of decimals specified is used to round the coordinates.

    The grid will be constructed to fit the given parameters.
    """

    # The centers of the cells (lon =x, lat = y)
    lon_range: np.ndarray
    lat_range: np.ndarray

    # The edges of the cells
    lat_bounds: np.ndarray
    lon_bounds: np.ndarray

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    dx: float
    dy: float

    def __init__(
        self,
        xmin: float,
        ymin: float,
        xmax: float | None = None,
        ymax: float | None = None,
        nx: int | None = None,
        ny: int | None = None,
        dx: float | None = None,
        dy: float | None = None,
        name: str | None = None,
        crs: int | str = WGS84,
    ):
        self.xmin, self.ymin = xmin, ymin

        # Check if they did not specify all the optional parameters
        if all((p is not None for p in [xmax, ymax, nx, ny, dx, dy])):
            raise ValueError(
                "Specified too many parameters. "
                "Specify only 2 of the following: "
                "(xmax, ymax), (nx, ny), (dx, dy)"
            )

        if dx is None and dy is None and xmax is None and ymax is None:
            raise ValueError(
                "Cannot create grid with only nx and ny. "
                "Specify at least dx, dy or xmax, ymax."
            )

        # Calclate the number of cells if not specified
        if nx is None and ny is None:
            if dx is None or dy is None:
                raise ValueError(
                    "Either nx and ny or dx and dy must be specified. "
                    f"Received: {nx=}, {ny=}, {dx=}, {dy=}"
                )
            if xmax is None or ymax is None:
                raise ValueError(
                    "When using only dx dy, xmax and ymax must be specified. "
                    f"Received: {xmax=}, {ymax=}"
                )
            nx = (xmax - xmin) / dx
            ny = (ymax - ymin) / dy

            # Round to avoid decimal errors
            # Get the decimals in the dx and dy
            get_rounding = (
                lambda x: (len(str(x).split(".")[1]) if isinstance(x, float) else 0)
                or None
            )
            clean = lambda n, d: math.ceil(
                round(n, get_rounding(d)) if get_rounding(d) is not None else n
            )
            nx = clean(nx, dx)
            ny = clean(ny, dy)

        elif dx is None and dy is None:
            dx = (xmax - xmin) / nx
            dy = (ymax - ymin) / ny

        # Set maxs or correct maxs to ensure consistency with ns and ds
        xmax = xmin + nx * dx
        ymax = ymin + ny * dy

        self.xmax, self.ymax = xmax, ymax

        self.nx, self.ny = nx, ny
        self.dx, self.dy = dx, dy

        build_range = lambda min_, n_, d_: min_ + np.arange(n_) * d_ + d_ / 2
        self.lon_range = build_range(self.xmin, self.nx, self.dx)
        self.lat_range = build_range(self.ymin, self.ny, self.dy)

        self.lon_bounds = np.concatenate(
            [self.lon_range - self.dx / 2, [self.lon_range[-1] + self.dx / 2]]
        )
        self.lat_bounds = np.concatenate(
            [self.lat_range - self.dy / 2, [self.lat_range[-1] + self.dy / 2]]
        )

        assert len(self.lon_range) == nx, f"{len(self.lon_range)=} != {nx=}"
        assert len(self.lat_range) == ny, f"{len(self.lat_range)=} != {ny=}"

        super().__init__(name, crs)

    def __repr__(self) -> str:
        return (
            f"{super().__repr__()}_"
            f"nx({self.nx})_ny({self.ny})_"
            f"dx({self.dx})_dy({self.dy})_"
            f"x({self.xmin},{self.xmax})_"
            f"y({self.ymin},{self.ymax})_"
        )

    @cached_property
    def cells_as_polylist(self) -> list[Polygon]:

        x_coords, y_coords = np.meshgrid(
            self.lon_range - self.dx / 2.0, self.lat_range - self.dy / 2.0
        )
        # Reshape to 1D, y varies fastest
        x_coords = x_coords.flatten(order="F")
        y_coords = y_coords.flatten(order="F")
        dx = float(self.dx)
        dy = float(self.dy)
        coords = np.array(
            [
                [x, y]
                for x, y in zip(
                    [x_coords, x_coords, x_coords + dx, x_coords + dx],
                    [y_coords, y_coords + dy, y_coords + dy, y_coords],
                )
            ]
        )
        coords = np.rollaxis(coords, -1, 0)
        return list(polygons(coords))

    def cell_corners(self, i, j):
        """Return the corners of the cell with indices (i,j)."""
        x = self.xmin + i * self.dx
        y = self.ymin + j * self.dy

        return (
            np.array([x, x + self.dx, x + self.dx, x]),
            np.array([y, y, y + self.dy, y + self.dy]),
        )

    @cached_property
    def bounds(self) -> BoundingBox:
        return self.xmin, self.ymin, self.xmax, self.ymax

    @cached_property
    def cell_areas(self) -> np.ndarray:
        """Return an array containing the area of each cell in m2.

        Cells of a lon/lat grid are bands of the sphere, so the area is
        computed analytically.
        """
        if self.crs != WGS84:
            return super().cell_areas

        lats = np.deg2rad(np.clip(self.lat_bounds, -90.0, 90.0))
        dlon = np.deg2rad(self.dx)
        areas = R_EARTH * R_EARTH * dlon * np.abs(np.sin(lats[1:]) - np.sin(lats[:-1]))
        areas = np.broadcast_to(areas[np.newaxis, :], (self.nx, self.ny))

        return areas.flatten()


def global_grid(dx: float, dy: float, name: str | None = None) -> RegularGrid:
    """Create a global lon/lat grid starting at (-180, -90)."""
    if name is None:
        name = f"global_{dx}x{dy}"
    return RegularGrid(
        xmin=-180.0, ymin=-90.0, xmax=180.0, ymax=90.0, dx=dx, dy=dy, name=name
    )


def generic_1x1_grid() -> RegularGrid:
    """The generic 1x1 grid on which the EDGAR inventory is defined."""
    return RegularGrid(
        xmin=-180.0, ymin=-90.0, nx=360, ny=180, dx=1.0, dy=1.0, name="generic_1x1"
    )
