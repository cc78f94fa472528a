import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class ScanGenerations:
    """Hands out scan generation ids: strictly increasing, never 0, never reused."""

    def __init__(self, start=1):
        if start < 1:
            raise ValueError("generation ids start above 0 (0 means 'never visited')")
        self._next = int(start)

    def next(self):
        gen = self._next
        self._next += 1
        return gen


def scan_and_apply(grid, x0, y0, generation, visit=None):
    """
    Flood-fill the 8-connected region of same-class pixels around (x0, y0).

    Every pixel reached gets visit(pixel) called once and is stamped with
    `generation`. Uses an explicit stack of flat indices, so large uniform
    regions cannot blow the call stack. Neighbor ranges are clamped to the
    grid, never wrapped. The class to match is read once from the seed,
    which lets `visit` flip classes while the fill is running.

    Returns the number of pixels stamped (0 if the seed already carries
    this generation).
    """
    seed = grid.at(x0, y0)  # raises IndexOutOfRange for a bad seed
    kind = seed.part
    if seed.scan_generation == generation:
        return 0

    width, height = grid.width, grid.height
    part = grid.flat_part()
    stamps = grid.flat_generation()

    if visit is not None:
        visit(seed)
    seed_idx = y0 * width + x0
    stamps[seed_idx] = generation
    stack = [seed_idx]
    region_size = 1

    while stack:
        idx = stack.pop()
        y, x = divmod(idx, width)
        x_lo, x_hi = max(x - 1, 0), min(x + 2, width)
        for ny in range(max(y - 1, 0), min(y + 2, height)):
            row = ny * width
            for nidx in range(row + x_lo, row + x_hi):
                # the center cell is skipped by its own stamp
                if part[nidx] != kind or stamps[nidx] == generation:
                    continue
                if visit is not None:
                    visit(grid.get(nidx - row, ny))
                stamps[nidx] = generation
                stack.append(nidx)
                region_size += 1

    return region_size


@dataclass
class ClosingReport:
    regions: int = 0            # regions measured
    flipped_regions: int = 0
    filled_pixels: int = 0      # background -> part
    cleared_pixels: int = 0     # part -> background

    @property
    def flipped_pixels(self):
        return self.filled_pixels + self.cleared_pixels


def close_small_regions(grid, size_threshold_fraction, generations=None):
    """
    Flip every connected region smaller than `size_threshold_fraction` of the
    image to the opposite class. Fills holes inside the shape and removes
    specks of noise outside it.

    Expects a freshly classified grid (all scan stamps 0). Each region is
    measured once without touching it; only small ones get a second fill
    that flips them.
    """
    if not 0.0 <= size_threshold_fraction <= 1.0:
        raise ValueError(f"size_threshold_fraction must be in [0, 1], got {size_threshold_fraction}")
    if generations is None:
        generations = ScanGenerations()

    report = ClosingReport()
    area = grid.size
    if area == 0:
        return report

    stamps = grid.flat_generation()
    for idx, (x, y) in enumerate(grid.coords()):
        if stamps[idx] != 0:
            continue

        region_size = scan_and_apply(grid, x, y, generations.next())
        report.regions += 1
        if region_size == 0 or region_size / area >= size_threshold_fraction:
            continue

        was_part = grid.at(x, y).part

        def flip(pixel, new_class=not was_part):
            pixel.part = new_class

        flipped = scan_and_apply(grid, x, y, generations.next(), flip)
        report.flipped_regions += 1
        if was_part:
            report.cleared_pixels += flipped
        else:
            report.filled_pixels += flipped
        logger.debug("flipped %s region of %d px at (%d, %d)",
                     "part" if was_part else "background", flipped, x, y)

    logger.debug("hole closing: %d regions, %d flipped (%d px filled, %d px cleared)",
                 report.regions, report.flipped_regions,
                 report.filled_pixels, report.cleared_pixels)
    return report
