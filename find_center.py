"""
Find the centroid of the one object in a picture and mark it.
Usage: find-center image.jpg [--out out.png] [--show | --open]
"""
import argparse
import logging
import sys
import time
from pathlib import Path

import image_io
import shape_detector
from color_distance import METRICS, get_metric
from errors import EmptyImage, NoShapeDetected
from shape_detector import ShapeDetector

# ==== Config ====
OUT_PATH = "out.png"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Locate a shape on a plain background and mark its centroid.")
    parser.add_argument("input", type=Path, help="Input image (PNG, JPEG, BMP, ...)")
    parser.add_argument("--out", type=Path, default=Path(OUT_PATH), help="Where to write the marked image")
    parser.add_argument("--threshold", type=float, default=shape_detector.THRESHOLD,
                        help="Color distance from the top-left pixel that counts as part of the shape")
    parser.add_argument("--hole-fraction", type=float, default=shape_detector.HOLE_FRACTION,
                        help="Regions smaller than this fraction of the image are flipped (0 disables)")
    parser.add_argument("--metric", choices=sorted(METRICS), default="ciede2000", help="Color distance metric")
    parser.add_argument("--max-width", type=int, default=shape_detector.MAX_SIZE[0], help="Working width limit")
    parser.add_argument("--max-height", type=int, default=shape_detector.MAX_SIZE[1], help="Working height limit")
    parser.add_argument("--no-resize", action="store_true", help="Process at full resolution")
    view = parser.add_mutually_exclusive_group()
    view.add_argument("--show", action="store_true", help="Show the result in a matplotlib window")
    view.add_argument("--open", action="store_true", help="Open the result with the system image viewer")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        det = ShapeDetector(
            threshold=args.threshold,
            hole_fraction=args.hole_fraction,
            distance=get_metric(args.metric),
            max_size=None if args.no_resize else (args.max_width, args.max_height),
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    # ---- Load ----
    t0 = time.perf_counter()
    try:
        rgb = image_io.load_rgb(args.input)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logging.info("Read in: %.2fs", time.perf_counter() - t0)

    # ---- Resize ----
    t0 = time.perf_counter()
    work = det.fit_working_size(rgb)
    logging.info("Resized in: %.2fs (%dx%d -> %dx%d)", time.perf_counter() - t0,
                 rgb.shape[1], rgb.shape[0], work.shape[1], work.shape[0])

    # ---- Detect ----
    t0 = time.perf_counter()
    try:
        overlay, point = det.detect(work)
    except (EmptyImage, NoShapeDetected) as e:
        print(f"No shape found in {args.input}: {e}", file=sys.stderr)
        return 1
    logging.info("Work in: %.2fs", time.perf_counter() - t0)

    try:
        out = image_io.save_rgb(args.out, overlay)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"{point.x} {point.y}")
    logging.info("Saved output to: %s", out)

    if args.show:
        image_io.show_rgb(overlay, title=f"Centroid ({point.x}, {point.y})")
    elif args.open:
        image_io.open_with_default_viewer(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
