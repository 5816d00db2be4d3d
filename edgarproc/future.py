"""Scaling of the emissions to future scenarios."""

from __future__ import annotations

from edgarproc.sectors import Tracer


class FutureEmissionsScaler:
    """Base class for the future emission scale factors.

    Derive from this class and implement :py:meth:`get_scale`.
    """

    def get_scale(self, tracer: Tracer, i: int, j: int) -> float:
        """Return the factor for the tracer at the cell (i, j) of the model grid."""
        raise NotImplementedError("Method not implemented")


class ConstantFutureScaler(FutureEmissionsScaler):
    """Same factor for all the cells.

    :param factors: Factor per tracer name. Tracers not given get 1.0.
    """

    def __init__(self, factors: dict[str, float]):
        for name, factor in factors.items():
            if factor < 0:
                raise ValueError(f"Factor of {name} must be non negative, got {factor}.")
        self.factors = dict(factors)

    def get_scale(self, tracer: Tracer, i: int, j: int) -> float:
        return float(self.factors.get(tracer.name, 1.0))
