import numpy as np
import pytest

from raster_grid import RasterGrid

WHITE = (255, 255, 255)
RED = (200, 30, 30)


@pytest.fixture
def make_grid():
    """Grid whose classes come straight from a bool mask (True = part). Colors are irrelevant."""
    def _make(mask):
        mask = np.asarray(mask, dtype=bool)
        grid = RasterGrid(np.zeros(mask.shape + (3,), dtype=np.uint8))
        grid.part[:] = mask
        return grid
    return _make


@pytest.fixture
def make_rgb():
    """White (h, w) image with optional filled rectangles: [(x0, y0, x1, y1, color), ...], bounds inclusive."""
    def _make(w, h, rects=(), background=WHITE):
        rgb = np.empty((h, w, 3), dtype=np.uint8)
        rgb[:] = background
        for x0, y0, x1, y1, color in rects:
            rgb[y0:y1 + 1, x0:x1 + 1] = color
        return rgb
    return _make
