import logging

import cv2
import numpy as np

from color_distance import ciede2000
from errors import EmptyImage, NoShapeDetected
from raster_grid import Point, RasterGrid
from region_scanner import ScanGenerations, close_small_regions

logger = logging.getLogger(__name__)

# ==== Config ====
THRESHOLD      = 35.0          # dE2000 from the corner color to count as part of the shape
HOLE_FRACTION  = 0.001         # regions below this share of the image get flipped
MAX_SIZE       = (800, 600)    # working resolution (w, h) the input is shrunk to fit
BACKGROUND_COL = (40, 40, 50)  # background fill in the rendered overlay (RGB)
MARKER_COL     = (255, 0, 0)   # crosshair color (RGB)


class ShapeDetector:
    def __init__(self, threshold=THRESHOLD, hole_fraction=HOLE_FRACTION,
                 distance=ciede2000, max_size=MAX_SIZE):
        # Pixels at least this far from the reference color are part of the shape
        self.threshold = float(threshold)
        if self.threshold < 0:
            raise ValueError(f"threshold must be >= 0, got {threshold}")
        # Connected regions smaller than this fraction of the image are flipped (0 disables)
        self.hole_fraction = float(hole_fraction)
        if not 0.0 <= self.hole_fraction <= 1.0:
            raise ValueError(f"hole_fraction must be in [0, 1], got {hole_fraction}")
        # distance(ref_rgb, colors[..., 3]) -> distances[...]
        self.distance = distance
        # None => process at full resolution
        if max_size is not None:
            max_w, max_h = (int(v) for v in max_size)
            if max_w <= 0 or max_h <= 0:
                raise ValueError(f"max_size must be positive, got {max_size}")
            max_size = (max_w, max_h)
        self.max_size = max_size

    def classify(self, grid):
        """Mark every pixel far enough from the top-left color as part of the shape.

        The top-left pixel is assumed to be background.
        """
        if grid.size == 0:
            raise EmptyImage("cannot sample a reference color from an empty image")
        ref = grid.at(0, 0).color
        dist = np.asarray(self.distance(ref, grid.colors))
        grid.part[:] = dist >= self.threshold
        logger.debug("classified %d/%d px as part (ref=%s, threshold=%.1f)",
                     grid.count_part(), grid.size, ref, self.threshold)

    def close_holes(self, grid):
        """Flip small islands of either class. Starts a fresh scan on the grid."""
        grid.clear_scan_marks()
        return close_small_regions(grid, self.hole_fraction, ScanGenerations())

    @staticmethod
    def centroid(grid):
        """Floor of the mean coordinate of all part pixels, or None if there are none."""
        ys, xs = np.nonzero(grid.part)
        count = xs.size
        if count == 0:
            return None
        # Python ints, so the sums cannot overflow
        sum_x = int(xs.sum(dtype=np.int64))
        sum_y = int(ys.sum(dtype=np.int64))
        return Point(sum_x // count, sum_y // count)

    def locate(self, grid):
        """Classify, close holes and return the centroid. Raises NoShapeDetected."""
        self.classify(grid)
        self.close_holes(grid)
        point = self.centroid(grid)
        if point is None:
            raise NoShapeDetected("no pixel differs enough from the background")
        return point

    def fit_working_size(self, rgb):
        """Shrink rgb to fit inside max_size, keeping the aspect ratio. Never upsamples."""
        if self.max_size is None:
            return rgb
        h, w = rgb.shape[:2]
        max_w, max_h = self.max_size
        scale = min(max_w / w, max_h / h) if w and h else 1.0
        if scale >= 1.0:
            return rgb
        new_w = max(1, int(round(w * scale)))
        new_h = max(1, int(round(h * scale)))
        return cv2.resize(rgb, (new_w, new_h), interpolation=cv2.INTER_AREA)

    @staticmethod
    def render(grid, point=None):
        """Background painted flat, part pixels kept, crosshair + dot at the centroid."""
        overlay = grid.colors.copy()
        overlay[~grid.part] = BACKGROUND_COL
        if point is None:
            return overlay
        cx, cy = int(point.x), int(point.y)
        cv2.line(overlay, (0, cy), (grid.width - 1, cy), MARKER_COL, 1)
        cv2.line(overlay, (cx, 0), (cx, grid.height - 1), MARKER_COL, 1)
        cv2.circle(overlay, (cx, cy), 4, MARKER_COL, -1)
        return overlay

    def detect(self, rgb):
        """Locate the shape in rgb as given (no resizing). Returns (overlay, point)."""
        grid = RasterGrid(rgb)
        point = self.locate(grid)
        return self.render(grid, point), point

    def process_rgb(self, rgb):
        """
        Full pipeline for a single image:
        1) Shrink to working size 2) Build grid 3) Classify 4) Close holes
        5) Centroid 6) Render overlay
        Returns: (overlay RGB at working size, centroid Point).
        Raises NoShapeDetected when nothing stands out from the background.
        """
        # 1) Resize
        work = self.fit_working_size(rgb)

        # 2)-6) Grid, classify, hole closing, centroid, overlay
        return self.detect(work)
