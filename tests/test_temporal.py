from datetime import datetime

import pytest

from edgarproc.temporal import MONTH_NAMES, Season, TemporalContext, get_tau0
from edgarproc.utilities import SEC_PER_DAY


@pytest.mark.parametrize(
    "month,season",
    [
        (12, Season.DJF),
        (1, Season.DJF),
        (2, Season.DJF),
        (3, Season.MAM),
        (4, Season.MAM),
        (5, Season.MAM),
        (6, Season.JJA),
        (7, Season.JJA),
        (8, Season.JJA),
        (9, Season.SON),
        (10, Season.SON),
        (11, Season.SON),
    ],
)
def test_season_from_month(month, season):
    assert Season.from_month(month) is season


@pytest.mark.parametrize("month", [0, 13, -1])
def test_season_wrong_month(month):
    with pytest.raises(ValueError):
        Season.from_month(month)


@pytest.mark.parametrize(
    "season,tau0",
    [
        (Season.DJF, -744.0),
        (Season.MAM, 1416.0),
        (Season.JJA, 3624.0),
        (Season.SON, 5832.0),
    ],
)
def test_season_tau0(season, tau0):
    assert get_tau0(season.reference_time) == tau0


def test_seconds_in_season():
    # Days of the year 2000
    assert Season.DJF.seconds == (31 + 31 + 29) * SEC_PER_DAY
    assert Season.MAM.seconds == (31 + 30 + 31) * SEC_PER_DAY
    assert Season.JJA.seconds == (30 + 31 + 31) * SEC_PER_DAY
    assert Season.SON.seconds == (30 + 31 + 30) * SEC_PER_DAY
    assert sum(s.seconds for s in Season) == 366 * SEC_PER_DAY


def test_context_from_date():
    context = TemporalContext.from_date(1995, 2)

    assert context.year == 1995
    assert context.month == 2
    assert context.season is Season.DJF
    assert context.season_name == "DJF"
    assert context.month_name == "FEB"
    assert context.season_reference_time == datetime(1984, 12, 1)
    assert context.month_reference_time == datetime(1985, 2, 1)
    assert context.seconds_in_month == 29 * SEC_PER_DAY
    assert context.seconds_in_season == Season.DJF.seconds
    assert context.seconds_in_reference_year == 366 * SEC_PER_DAY
    assert context.season_tau0 == -744.0
    assert context.month_tau0 == 744.0


def test_context_is_pure():
    assert TemporalContext.from_date(2001, 7) == TemporalContext.from_date(2001, 7)


def test_month_names():
    assert len(MONTH_NAMES) == 12
    assert TemporalContext.from_date(2000, 12).month_name == "DEC"


@pytest.mark.parametrize("month", [0, 13])
def test_context_wrong_month(month):
    with pytest.raises(ValueError):
        TemporalContext.from_date(2000, month)


def test_context_month_not_int():
    with pytest.raises(TypeError):
        TemporalContext.from_date(2000, 1.0)
