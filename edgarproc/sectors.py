"""Tracers and sectors of the EDGAR inventory.

The sectors are data: a new sector or a new species is added by extending
the tables below (or by giving another table to
:py:class:`~edgarproc.pipeline.EdgarEmissions`), not by changing the
processing code.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from edgarproc.profiles import (
    FLAT,
    INDUSTRY,
    POWER_GENERATION,
    RESIDENTIAL,
    TRANSPORT,
    DiurnalProfile,
)


@dataclass(frozen=True)
class Tracer:
    """A species family of the inventory.

    :param name: Name of the tracer.
    :param directory: Directory of the files of this tracer.
    :param substance: The substance in which the masses are expressed.
    :param element: The element used when reporting totals (ex. Tg N).
    :param data_tracer: Tracer number of the inventory files.
    :param scale_tracer: Tracer number of the scale factor files.
    :param scale_prefix: Prefix of the interannual scale factor files.
    :param pre_1998_correction: Whether years before 1998 get an additional
        correction from the 1998 factors.
    """

    name: str
    directory: str
    substance: str
    element: str
    data_tracer: int
    scale_tracer: int
    scale_prefix: str
    pre_1998_correction: bool = True


NOX = Tracer(
    name="NOx",
    directory="NOx",
    substance="NO2",
    element="N",
    data_tracer=1,
    scale_tracer=71,
    scale_prefix="NOx",
)
CO = Tracer(
    name="CO",
    directory="CO",
    substance="CO",
    element="CO",
    data_tracer=4,
    scale_tracer=72,
    scale_prefix="CO",
)
# Factors before 1998 are not available for SO2
SOX = Tracer(
    name="SOx",
    directory="SOx",
    substance="SO2",
    element="S",
    data_tracer=26,
    scale_tracer=73,
    scale_prefix="SOx",
    pre_1998_correction=False,
)


@dataclass(frozen=True)
class Sector:
    """A sector of the inventory for a given tracer.

    :param code: EDGAR code of the sector (ex. F10).
    :param description: Human readable name of the sector.
    :param filename: Name of the data file, without directory and extension.
    :param diurnal_profile: Hourly weights of the sector.
    :param is_ship: Whether this is the shipping sector, which is included
        only if shipping is enabled.
    """

    code: str
    description: str
    filename: str
    diurnal_profile: DiurnalProfile = field(default_factory=lambda: FLAT)
    is_ship: bool = False


NOX_SECTORS = [
    Sector("F10", "Industry", "f1000nox", INDUSTRY),
    Sector("F20", "Power generation", "f2000nox", POWER_GENERATION),
    Sector("F30", "Conversion", "f3000nox"),
    Sector("F40", "Residential", "f4000nox", RESIDENTIAL),
    Sector("F51", "Road transport", "f5100nox", TRANSPORT),
    Sector("F54", "Non-road land transport", "f5400nox", TRANSPORT),
    # Aircraft emissions (F57) are not used for NOx
    Sector("F58", "Shipping", "f5800nox(IEA)", is_ship=True),
    Sector("F80", "Oil production", "f8000nox"),
    Sector("I10", "Iron and steel production", "i1000nox"),
    Sector("I30", "Chemical production", "i3000nox"),
    Sector("I40", "Cement production", "i4000nox"),
    Sector("I50", "Pulp and paper production", "i5000nox"),
    Sector("W40", "Waste incineration", "w4000nox"),
]

CO_SECTORS = [
    Sector("F10", "Industry", "f1000co"),
    Sector("F20", "Power generation", "f2000co"),
    Sector("F30", "Conversion", "f3000co"),
    Sector("F40", "Residential, commercial and other", "f4000co"),
    Sector("F51", "Road transport", "f5100co"),
    Sector("F54", "Non-road land transport", "f5400co"),
    Sector("F57", "Air transport", "f5700co"),
    Sector("F58", "Shipping", "f5800co", is_ship=True),
    Sector("F80", "Oil production", "f8000co"),
    Sector("I10", "Iron and steel production", "i1000co"),
    Sector("I20", "Non-ferrous production", "i2000co"),
    Sector("I50", "Pulp and paper production", "i5000co"),
    Sector("W40", "Waste incineration", "w4095co"),
]

SO2_SECTORS = [
    Sector("F10", "Industry", "f1000so2"),
    Sector("F20", "Power generation", "f2000so2"),
    Sector("F30", "Conversion", "f3000so2"),
    Sector("F40", "Residential, commercial and other", "f4000so2"),
    Sector("F51", "Road transport", "f5100so2"),
    Sector("F54", "Non-road land transport", "f5400so2"),
    Sector("F57", "Air transport", "f5700so2"),
    Sector("F58", "Shipping", "f5800so2(IEA)", is_ship=True),
    Sector("F80", "Oil production", "f8000so2"),
    Sector("I10", "Iron and steel production", "i1000so2"),
    Sector("I20", "Non-ferrous production", "i2000so2"),
    Sector("I30", "Chemical production", "i3000so2"),
    Sector("I40", "Cement production", "i4000so2"),
    Sector("I50", "Pulp and paper production", "i5000so2"),
    Sector("W40", "Waste incineration", "w4000so2"),
]

# Sector lookup table: tracer name -> sectors
DEFAULT_SECTORS: dict[str, list[Sector]] = {
    NOX.name: NOX_SECTORS,
    CO.name: CO_SECTORS,
    SOX.name: SO2_SECTORS,
}


def select_sectors(sectors: list[Sector], use_ship: bool) -> list[Sector]:
    """Return the sectors to include, given whether shipping is enabled."""
    return [s for s in sectors if use_ship or not s.is_ship]
