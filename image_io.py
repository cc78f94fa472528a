import logging
import subprocess
import sys
from pathlib import Path

import cv2
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


def load_rgb(path):
    """Read an image file as an (H, W, 3) uint8 RGB array."""
    path = Path(path)
    bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if bgr is None:
        raise FileNotFoundError(f"Image not found or unreadable: {path}")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def save_rgb(path, rgb):
    """Write an RGB array to path. Raises OSError when OpenCV cannot write it."""
    path = Path(path)
    try:
        ok = cv2.imwrite(str(path), cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
    except cv2.error as e:
        raise OSError(f"Could not write image {path}: {e}") from e
    if not ok:
        raise OSError(f"Could not write image: {path}")
    logger.debug("saved %s", path)
    return path


def show_rgb(rgb, title=None):
    """Blocking matplotlib window with the image."""
    plt.imshow(rgb); plt.axis("off")
    if title:
        plt.title(title)
    plt.tight_layout(); plt.show()


def open_with_default_viewer(path):
    """Hand the file to the OS viewer and return without waiting for it."""
    path = str(path)
    if sys.platform.startswith("win"):
        cmd = ["cmd", "/C", "start", "", path]
    elif sys.platform == "darwin":
        cmd = ["open", path]
    else:
        cmd = ["xdg-open", path]
    logger.debug("launching viewer: %s", " ".join(cmd))
    return subprocess.Popen(cmd)
