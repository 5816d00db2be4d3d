"""Regridding of the fields between the reference grid and the model grid."""

from __future__ import annotations

import logging
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Iterable

import geopandas as gpd
import numpy as np
import xarray as xr
from scipy.sparse import coo_array
from shapely.geometry import MultiPolygon, Polygon

from edgarproc.fields import check_grid
from edgarproc.grids import Grid

logger = logging.getLogger("edgarproc.regrid")


class QuantityKind(Enum):
    """Which kind of quantity is regridded.

    The kind decides how values are combined when cells overlap.
    Using the wrong kind silently gives wrong fields.
    """

    #: Masses (ex. kg/yr per cell). Conservative remapping: the sum is preserved.
    EXTENSIVE = "kg/yr"
    #: Dimensionless values (ex. scale factors). Area weighted mean.
    INTENSIVE = "unitless"


def get_weights_mapping(
    weights_filepath: Path | None,
    shapes_inv: Iterable[Polygon],
    shapes_out: Iterable[Polygon],
) -> dict[str, np.ndarray]:
    """Get the requested weights mapping.

    If it does not exists, calls :py:func:`calculate_weights_mapping`
    and save the weights once computed.

    :arg weights_filepath: The name of the file in which to save the
        weights data. This file has to be a npz archive ending with suffix .npz .
        Edgarproc will add the suffix if you don't.
    :arg shapes_inv: Shapes from which the remapping will be done.
    :arg shapes_out: The shapes to which the remapping will be done.
    """
    if weights_filepath is not None:
        weights_filepath = Path(weights_filepath).with_suffix(".npz")

    if (weights_filepath is None) or (not weights_filepath.exists()):
        w_mapping = calculate_weights_mapping(shapes_inv, shapes_out)
        if weights_filepath is not None:
            # Make sure dir is created
            weights_filepath.parent.mkdir(exist_ok=True, parents=True)
            np.savez(weights_filepath, **w_mapping)

    else:
        logger.debug(f"Loading weights from {weights_filepath}")
        w_mapping = {**np.load(weights_filepath)}

    return w_mapping


def _as_geoserie(shapes: Iterable[Polygon], name: str) -> gpd.GeoSeries:
    if isinstance(shapes, gpd.GeoDataFrame):
        return shapes.geometry.reset_index(drop=True)
    elif isinstance(shapes, gpd.GeoSeries):
        return shapes.reset_index(drop=True)
    elif isinstance(shapes, (list, np.ndarray)):
        return gpd.GeoSeries(list(shapes))
    else:
        raise TypeError(f"'{name}' cannot be {type(shapes)}")


def calculate_weights_mapping(
    shapes_inv: Iterable[Polygon | MultiPolygon],
    shapes_out: Iterable[Polygon],
) -> dict[str, np.ndarray]:
    """Return a dictionary with the mapping.

    Every weight means: From which shape in the inventory
    to which shape in the output and the weight value is the proportion
    of the inventory shape present in the output shape.

    :return: A dict with

        * ``inv_indexes``: The indexes of the inventory shapes.
        * ``output_indexes``: The indexes of the output shapes.
        * ``weights``: The weight of this connexion (between 0 and 1).
        * ``areas``: The area of the intersection of the two shapes.
    """
    shapes_vect = _as_geoserie(shapes_inv, "shapes_inv")
    shapes_looped = _as_geoserie(shapes_out, "shapes_out")

    logger.info(
        "calculating weights mapping "
        f"from {len(shapes_vect)} inventory shapes "
        f"to {len(shapes_looped)} grid cells."
    )

    # Only area sources can be remapped
    if not np.all(
        shapes_vect.map(lambda shape: isinstance(shape, (Polygon, MultiPolygon)))
    ):
        raise TypeError("Non Polygon geometries cannot be used for remapping.")

    # Merge the two geometries using intersections
    gdf_in = gpd.GeoDataFrame(geometry=shapes_vect)
    gdf_out = gpd.GeoDataFrame(geometry=shapes_looped)
    gdf_weights = gdf_in.sjoin(gdf_out, rsuffix="out")
    gdf_weights = gdf_weights.merge(
        gdf_out, left_on="index_out", right_index=True, suffixes=("", "_out")
    )
    gdf_weights.index.name = "index_inv"
    gdf_weights = gdf_weights.assign(
        geometry_inter=lambda d: (
            d["geometry"].intersection(gpd.GeoSeries(d["geometry_out"]))
        )
    )
    gdf_weights["areas"] = gdf_weights.geometry_inter.area
    gdf_weights["weights"] = gdf_weights["areas"] / gdf_weights.geometry.area

    # Touching cells share only a boundary
    gdf_weights = gdf_weights.loc[gdf_weights["areas"] > 0]
    gdf_weights = gdf_weights.sort_values(by=["index_out", "index_inv"])

    return {
        "inv_indexes": np.array(gdf_weights.index.to_numpy(), dtype=int),
        "output_indexes": np.array(gdf_weights.index_out.to_numpy(), dtype=int),
        "weights": np.array(gdf_weights.weights.to_numpy(), dtype=float),
        "areas": np.array(gdf_weights.areas.to_numpy(), dtype=float),
    }


class Regridder:
    """Base class for mapping fields from a source grid to a target grid.

    Derive from this class and implement :py:meth:`regrid`.
    """

    source_grid: Grid
    target_grid: Grid

    def regrid(
        self, quantity_kind: QuantityKind, source_field: xr.DataArray
    ) -> xr.DataArray:
        """Return the field remapped on the target grid.

        :arg quantity_kind: Whether the field is extensive (masses, sums
            preserved) or intensive (scale factors, values preserved).
        :arg source_field: The field on the source grid.
        """
        raise NotImplementedError("Method not implemented")


class GridRegridder(Regridder):
    """Regrid using the overlap of the cells of the grids.

    The weights are calculated once, at the first regridding, and
    optionally saved to a file.

    :param source_grid: The grid of the fields to regrid.
    :param target_grid: The grid to regrid to.
    :param weights_file: Where to store the weights.
    """

    def __init__(
        self,
        source_grid: Grid,
        target_grid: Grid,
        weights_file: PathLike | None = None,
    ):
        self.source_grid = source_grid
        self.target_grid = target_grid
        self.weights_file = None if weights_file is None else Path(weights_file)
        self._matrices: dict[QuantityKind, coo_array] = {}

    def _get_matrix(self, quantity_kind: QuantityKind) -> coo_array:
        if quantity_kind in self._matrices:
            return self._matrices[quantity_kind]

        target_cells = self.target_grid.gdf.geometry
        if target_cells.crs != self.source_grid.crs:
            target_cells = target_cells.to_crs(self.source_grid.crs)
        w_mapping = get_weights_mapping(
            self.weights_file, self.source_grid.gdf.geometry, target_cells
        )
        rows = w_mapping["output_indexes"]
        cols = w_mapping["inv_indexes"]
        shape = (len(self.target_grid), len(self.source_grid))

        if quantity_kind is QuantityKind.EXTENSIVE:
            values = w_mapping["weights"]
        elif quantity_kind is QuantityKind.INTENSIVE:
            # Area weighted mean over the covered part of the output cells
            covered = np.bincount(rows, weights=w_mapping["areas"], minlength=shape[0])
            values = w_mapping["areas"] / covered[rows]
        else:
            raise TypeError(f"{quantity_kind=} must be a {QuantityKind}.")

        matrix = coo_array((values, (rows, cols)), shape=shape, dtype=float).tocsr()
        self._matrices[quantity_kind] = matrix
        return matrix

    def regrid(
        self, quantity_kind: QuantityKind, source_field: xr.DataArray
    ) -> xr.DataArray:
        check_grid(source_field, self.source_grid)
        matrix = self._get_matrix(quantity_kind)

        if "hour" in source_field.dims:
            data = source_field.transpose("hour", "x", "y").to_numpy()
            # One column per hour
            flat = data.reshape(data.shape[0], -1).T
            out = matrix.dot(flat).T.reshape(data.shape[0], *self.target_grid.shape)
            dims = ("hour", "x", "y")
        else:
            flat = source_field.transpose("x", "y").to_numpy().reshape(-1)
            out = matrix.dot(flat).reshape(self.target_grid.shape)
            dims = ("x", "y")

        return xr.DataArray(
            out,
            dims=dims,
            attrs={**source_field.attrs, "grid": self.target_grid.name},
        )
