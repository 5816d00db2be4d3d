"""Readers and regridders working in memory, for the tests."""

from __future__ import annotations

from collections import Counter
from datetime import datetime

import numpy as np
import xarray as xr

from edgarproc.fields import check_grid
from edgarproc.grids import Grid
from edgarproc.readers import ReadError, SectorReader
from edgarproc.regrid import QuantityKind, Regridder


def is_scale_resource(resource: str) -> bool:
    name = resource.split("/")[-1]
    return "_scale." in name or "Scalar-" in name


class DictSectorReader(SectorReader):
    """Return the arrays given in a dict.

    :param data: Arrays by resource name.
    :param default_data: Value of the inventory resources not in ``data``.
        If None, missing inventory resources raise a :py:class:`ReadError`.
    :param default_scale: Value of the scale factor resources not in
        ``data``. If None, missing scale factors raise a :py:class:`ReadError`.

    All the reads are recorded in :py:attr:`calls`.
    """

    def __init__(
        self,
        data: dict[str, np.ndarray] | None = None,
        default_data: float | None = 0.0,
        default_scale: float | None = 1.0,
    ):
        self.data = {} if data is None else dict(data)
        self.default_data = default_data
        self.default_scale = default_scale
        self.calls: list[tuple[str, int, datetime]] = []
        # Resources that raise a ReadError
        self.failing: set[str] = set()

    @property
    def resources(self) -> list[str]:
        return [resource for resource, _, _ in self.calls]

    def count(self, directory: str) -> int:
        """Number of reads of the resources in the directory."""
        counts = Counter(r.split("/")[0] for r in self.resources)
        return counts[directory]

    def read_array(
        self,
        resource: str,
        tracer_number: int,
        grid: Grid,
        reference_time: datetime,
    ) -> np.ndarray:
        self.calls.append((resource, tracer_number, reference_time))
        if resource in self.failing:
            raise ReadError(resource, "failing on purpose")
        if resource in self.data:
            return self.data[resource]

        default = self.default_scale if is_scale_resource(resource) else self.default_data
        if default is None:
            raise ReadError(resource, "not in the test data")
        return np.full(grid.shape, default, dtype=float)


class IdentityRegridder(Regridder):
    """Regrid between two grids with the same cells.

    The values are unchanged, only the grid tag is replaced.
    """

    def __init__(self, source_grid: Grid, target_grid: Grid):
        if source_grid.shape != target_grid.shape:
            raise ValueError(
                f"{source_grid} and {target_grid} do not have the same shape."
            )
        self.source_grid = source_grid
        self.target_grid = target_grid
        self.calls: list[QuantityKind] = []

    def regrid(
        self, quantity_kind: QuantityKind, source_field: xr.DataArray
    ) -> xr.DataArray:
        if not isinstance(quantity_kind, QuantityKind):
            raise TypeError(f"{quantity_kind=} must be a {QuantityKind}.")
        check_grid(source_field, self.source_grid)
        self.calls.append(quantity_kind)
        return source_field.copy(deep=True).assign_attrs(grid=self.target_grid.name)
