from edgarproc.grids import RegularGrid

# Small reference grid with 1x1 cells
reference_grid = RegularGrid(
    xmin=0, ymin=0, nx=4, ny=2, dx=1.0, dy=1.0, name="Test Reference Grid"
)

# Same cells as the reference grid, under another name
model_grid = RegularGrid(
    xmin=0, ymin=0, nx=4, ny=2, dx=1.0, dy=1.0, name="Test Model Grid"
)

# Each cell covers 2x2 cells of the reference grid
coarse_grid = RegularGrid(
    xmin=0, ymin=0, nx=2, ny=1, dx=2.0, dy=2.0, name="Test Coarse Grid"
)

# Cells shifted by half a cell of the reference grid
shifted_grid = RegularGrid(
    xmin=0.5, ymin=0, nx=3, ny=2, dx=1.0, dy=1.0, name="Test Shifted Grid"
)
