import numpy as np
import pytest

from edgarproc import PROCESS
from edgarproc.fields import Units, make_field
from edgarproc.grids import Grid, global_grid
from edgarproc.report import (
    REGIONS,
    format_totals,
    log_totals,
    regional_totals,
    tg_ratio,
    total_emissions_tg,
)
from edgarproc.state import EmissionField, EmissionsState
from edgarproc.temporal import TemporalContext
from edgarproc.tests_utils.test_grids import model_grid

grid_10x10 = global_grid(10.0, 10.0, name="global 10x10")


class CornersGrid(Grid):
    """Same cells as a regular grid, but only defined by the corners."""

    def __init__(self, regular):
        self.regular = regular
        self.nx, self.ny = regular.nx, regular.ny
        super().__init__("corners grid")

    def cell_corners(self, i, j):
        return self.regular.cell_corners(i, j)


def _filled_state() -> EmissionsState:
    state = EmissionsState()
    state.allocate(model_grid)
    for key, value in [
        (EmissionField.NOX, 46e9),
        (EmissionField.CO, 2e9),
        (EmissionField.SO2_ANTH, 64e9),
        (EmissionField.SO2_SHIP, 8e9),
    ]:
        data = np.zeros(model_grid.shape)
        data[0, 0] = value
        state.commit(key, make_field(data, model_grid, key.units))
    return state


def test_tg_ratio():
    assert tg_ratio(EmissionField.NOX) == pytest.approx(14 / 46 / 1e9)
    assert tg_ratio(EmissionField.CO) == pytest.approx(1e-9)
    assert tg_ratio(EmissionField.SO2_SHIP) == pytest.approx(0.5e-9)


def test_total_emissions_tg():
    totals = total_emissions_tg(_filled_state())

    assert totals["NOx"] == pytest.approx(14.0)
    assert totals["CO"] == pytest.approx(2.0)
    assert totals["SO2_anth"] == pytest.approx(32.0)
    assert totals["SO2_ship"] == pytest.approx(4.0)


def _field_at(grid, lon, lat, value=1.0):
    data = np.zeros(grid.shape)
    i = int((lon - grid.xmin) // grid.dx)
    j = int((lat - grid.ymin) // grid.dy)
    data[i, j] = value
    return make_field(data, grid, Units.KG_PER_YEAR)


def test_regional_totals():
    field = _field_at(grid_10x10, -100.0, 40.0, 5.0)
    field.values[:] += _field_at(grid_10x10, 10.0, 50.0, 2.0).values

    totals = regional_totals(field, grid_10x10, ratio=0.5)

    assert list(totals.index) == list(REGIONS)
    assert totals["World"] == pytest.approx(3.5)
    assert totals["North America"] == pytest.approx(2.5)
    assert totals["Europe"] == pytest.approx(1.0)
    assert totals["Asia"] == 0.0


def test_regional_totals_from_cell_polygons():
    corners_grid = CornersGrid(grid_10x10)
    field = make_field(
        _field_at(grid_10x10, 100.0, 30.0, 7.0).values, corners_grid, Units.KG_PER_YEAR
    )

    totals = regional_totals(field, corners_grid)

    assert totals["Asia"] == pytest.approx(7.0)
    assert totals["Africa"] == 0.0


def test_regional_totals_wrong_grid():
    with pytest.raises(ValueError):
        regional_totals(make_field(None, model_grid, Units.KG_PER_YEAR), grid_10x10)


def test_format_totals():
    context = TemporalContext.from_date(1999, 8)
    text = format_totals(total_emissions_tg(_filled_state()), context)

    lines = text.splitlines()
    assert lines[0] == "=" * 79
    assert lines[-1] == "=" * 79
    assert "E D G A R   E M I S S I O N S" in text
    assert "season JJA" in text
    assert "month  AUG" in text
    assert "14.0000 [Tg N]" in text


def test_log_totals(caplog):
    caplog.set_level(PROCESS, logger="edgarproc")
    log_totals(_filled_state(), TemporalContext.from_date(2000, 1))

    records = [r for r in caplog.records if r.levelno == PROCESS]
    assert len(records) == 1
    assert "Tg S" in records[0].getMessage()
