"""Units in edgarproc are always kg/period/cell unless otherwise specified.

The period depends on the emission field: a season, a month or the
reference year. The conversions below expose the values as rates or as
molecular fluxes.
"""

from __future__ import annotations

from enum import Enum

import numpy as np

from edgarproc.utils.constants import get_molecules_per_kg


class UnitMode(Enum):
    """How the values of an emission field are returned."""

    #: kg per reporting period and per cell
    NATIVE = "kg"
    #: kg per second and per cell
    RATE = "kg s-1"
    #: molecules per cm2 per second
    FLUX = "molec cm-2 s-1"


def convert_units(
    value: float | np.ndarray,
    unit_mode: UnitMode,
    seconds_in_period: float,
    area_cm2: float | np.ndarray | None = None,
    substance: str | None = None,
) -> float | np.ndarray:
    """Convert a value in kg/period/cell to the requested unit mode.

    :arg value: The emission in kg per period.
    :arg unit_mode: The requested output.
    :arg seconds_in_period: Length of the period of the value.
    :arg area_cm2: Area of the cell(s), required for :py:attr:`UnitMode.FLUX`.
    :arg substance: The substance in which the mass is expressed,
        required for :py:attr:`UnitMode.FLUX`.
    """
    if not isinstance(unit_mode, UnitMode):
        raise TypeError(f"{unit_mode=} must be a {UnitMode}.")

    if unit_mode is UnitMode.NATIVE:
        return value
    elif unit_mode is UnitMode.RATE:
        # kg/period / s/period = kg/s
        return value / seconds_in_period
    elif unit_mode is UnitMode.FLUX:
        if area_cm2 is None or substance is None:
            raise ValueError("Flux conversion requires the cell area and substance.")
        # kg/period * molec/kg / (cm2 * s/period) = molec/cm2/s
        return value * get_molecules_per_kg(substance) / (area_cm2 * seconds_in_period)
    else:
        raise NotImplementedError(f"Unit mode {unit_mode} not supported.")
