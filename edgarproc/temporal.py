"""Temporal context of the processing.

The scale factor files are stamped with reference times following the
convention of the binary punch files: a ``tau`` value counting hours since
1985-01-01 00:00. Seasonal and monthly climatologies are stamped in 1985
(December of 1984 for DJF).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from edgarproc.utilities import (
    DAYS_PER_MONTH_REFERENCE,
    SEC_PER_DAY,
    SEC_PER_REFERENCE_YEAR,
    check_month,
)

TAU_ORIGIN = datetime(1985, 1, 1)
CLIMATOLOGY_YEAR = 1985

MONTH_NAMES = (
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
)


class Season(Enum):
    """The four seasons, as triplets of calendar months."""

    DJF = (12, 1, 2)
    MAM = (3, 4, 5)
    JJA = (6, 7, 8)
    SON = (9, 10, 11)

    @classmethod
    def from_month(cls, month: int) -> Season:
        """Return the season containing the month (1 = January)."""
        check_month(month)
        for season in cls:
            if month in season.value:
                return season
        raise ValueError(f"No season for {month=}.")

    @property
    def months(self) -> tuple[int, int, int]:
        return self.value

    @property
    def reference_time(self) -> datetime:
        """Time stamp of the seasonal scale factors (first day of the season)."""
        first_month = self.value[0]
        year = CLIMATOLOGY_YEAR - 1 if first_month == 12 else CLIMATOLOGY_YEAR
        return datetime(year, first_month, 1)

    @property
    def seconds(self) -> float:
        """Seconds in the season, with the days of the reference year."""
        return sum(DAYS_PER_MONTH_REFERENCE[m - 1] for m in self.value) * SEC_PER_DAY


def get_tau0(time: datetime) -> float:
    """Return the hours elapsed since 1985-01-01 00:00."""
    return (time - TAU_ORIGIN).total_seconds() / 3600.0


@dataclass(frozen=True)
class TemporalContext:
    """Everything the processing needs to know about a (year, month).

    Use :py:meth:`from_date` to create it. This is a pure function of the
    year and the month.
    """

    year: int
    month: int
    season: Season
    month_name: str
    season_reference_time: datetime
    month_reference_time: datetime
    seconds_in_month: float
    seconds_in_season: float
    seconds_in_reference_year: float = SEC_PER_REFERENCE_YEAR

    @classmethod
    def from_date(cls, year: int, month: int) -> TemporalContext:
        check_month(month)
        season = Season.from_month(month)
        return cls(
            year=year,
            month=month,
            season=season,
            month_name=MONTH_NAMES[month - 1],
            season_reference_time=season.reference_time,
            month_reference_time=datetime(CLIMATOLOGY_YEAR, month, 1),
            seconds_in_month=DAYS_PER_MONTH_REFERENCE[month - 1] * SEC_PER_DAY,
            seconds_in_season=season.seconds,
        )

    @property
    def season_name(self) -> str:
        return self.season.name

    @property
    def season_tau0(self) -> float:
        return get_tau0(self.season_reference_time)

    @property
    def month_tau0(self) -> float:
        return get_tau0(self.month_reference_time)
