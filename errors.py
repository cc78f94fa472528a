class ShapeFinderError(Exception):
    """Base class for everything the detector raises on purpose."""


class EmptyImage(ShapeFinderError, ValueError):
    """The raster has no pixels, so there is no reference color to sample."""


class NoShapeDetected(ShapeFinderError):
    """No pixel survived classification and hole closing."""


class IndexOutOfRange(ShapeFinderError, IndexError):
    def __init__(self, x, y, width, height):
        super().__init__(f"pixel ({x}, {y}) is outside a {width}x{height} grid")
        self.x, self.y = x, y
