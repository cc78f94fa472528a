"""
Color-difference metrics used by the classifier.

Every metric has the same shape contract:
    metric(ref, colors) -> distances
      ref:    one RGB triple (uint8 range)
      colors: array (..., 3) of RGB triples
      return: float array (...), symmetric, >= 0, and 0 for identical colors
"""
import numpy as np
from skimage.color import deltaE_ciede2000, rgb2lab


def _as_rgb_array(colors):
    arr = np.asarray(colors, dtype=np.float64)
    if arr.shape[-1] != 3:
        raise ValueError(f"expected RGB triples in the last axis, got shape {arr.shape}")
    return arr


def ciede2000(ref, colors):
    """Perceptual CIE dE2000 between ref and every color (sRGB, D65)."""
    colors = _as_rgb_array(colors)
    ref = _as_rgb_array(ref).reshape(1, 1, 3)

    # rgb2lab wants at least 2-D images in [0, 1]
    lead_shape = colors.shape[:-1]
    lab = rgb2lab(colors.reshape(1, -1, 3) / 255.0)
    ref_lab = np.repeat(rgb2lab(ref / 255.0), lab.shape[1], axis=1)
    return deltaE_ciede2000(ref_lab, lab).reshape(lead_shape)


def euclidean(ref, colors):
    """Plain RGB distance. Not perceptual, but cheap and easy to reason about in tests."""
    colors = _as_rgb_array(colors)
    ref = _as_rgb_array(ref)
    return np.sqrt(((colors - ref) ** 2).sum(axis=-1))


METRICS = {
    "ciede2000": ciede2000,
    "euclidean": euclidean,
}


def get_metric(name):
    try:
        return METRICS[name]
    except KeyError:
        raise ValueError(f"unknown color metric {name!r}; choose from {sorted(METRICS)}") from None
