from collections import namedtuple

import numpy as np

from errors import IndexOutOfRange

Point = namedtuple("Point", ["x", "y"])


class Pixel:
    """Handle on one cell of a RasterGrid. Reads and writes go straight to the grid arrays."""

    __slots__ = ("_grid", "x", "y")

    def __init__(self, grid, x, y):
        self._grid = grid
        self.x = x
        self.y = y

    @property
    def color(self):
        r, g, b = self._grid.colors[self.y, self.x]
        return int(r), int(g), int(b)

    @property
    def part(self):
        return bool(self._grid.part[self.y, self.x])

    @part.setter
    def part(self, value):
        self._grid.part[self.y, self.x] = bool(value)

    @property
    def scan_generation(self):
        return int(self._grid.generation[self.y, self.x])

    @scan_generation.setter
    def scan_generation(self, value):
        self._grid.generation[self.y, self.x] = value

    def __repr__(self):
        return (f"Pixel(x={self.x}, y={self.y}, color={self.color}, "
                f"part={self.part}, scan_generation={self.scan_generation})")


class RasterGrid:
    """
    Fixed-size raster of pixel records stored as parallel arrays:
      - colors:     (H, W, 3) uint8 RGB
      - part:       (H, W) bool, True = part of the shape, False = background
      - generation: (H, W) int64 scan stamp, 0 = never visited
    Cell (x, y) lives at flat index y * width + x in every array.
    """

    def __init__(self, colors):
        colors = np.asarray(colors)
        if colors.ndim != 3 or colors.shape[2] != 3:
            raise ValueError(f"expected an (H, W, 3) RGB array, got shape {colors.shape}")
        self.height, self.width = int(colors.shape[0]), int(colors.shape[1])
        self.colors = np.ascontiguousarray(colors, dtype=np.uint8)
        self.part = np.zeros((self.height, self.width), dtype=bool)
        self.generation = np.zeros((self.height, self.width), dtype=np.int64)

    @property
    def size(self):
        return self.width * self.height

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def at(self, x, y):
        """Bounds-checked access. Raises IndexOutOfRange outside the grid."""
        if not self.in_bounds(x, y):
            raise IndexOutOfRange(x, y, self.width, self.height)
        return Pixel(self, x, y)

    def get(self, x, y):
        """Like at(), but returns None outside the grid. Safe for neighbor lookups at the edges."""
        if not self.in_bounds(x, y):
            return None
        return Pixel(self, x, y)

    def coords(self):
        """Every (x, y) in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y

    def flat_part(self):
        """Writable flat view of the class array, indexed by y * width + x."""
        return memoryview(self.part.reshape(-1))

    def flat_generation(self):
        """Writable flat view of the scan stamps, indexed by y * width + x."""
        return memoryview(self.generation.reshape(-1))

    def count_part(self):
        return int(np.count_nonzero(self.part))

    def clear_scan_marks(self):
        self.generation.fill(0)

    def __repr__(self):
        return f"RasterGrid({self.width}x{self.height}, part={self.count_part()})"
