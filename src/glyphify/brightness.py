import math

import numpy as np

from glyphify.errors import InvalidInput

# ITU-R BT.601 luma weights (0.299, 0.587, 0.114) in thousandths, so that
# white sums to exactly 255000 and maps to a luminance of exactly 1.0
RED_WEIGHT = 299
GREEN_WEIGHT = 587
BLUE_WEIGHT = 114
_SCALE = 1000 * 255


def luminance(r: int, g: int, b: int) -> float:
    """Perceptual brightness of an RGB triple, in [0, 1]."""
    return (RED_WEIGHT * r + GREEN_WEIGHT * g + BLUE_WEIGHT * b) / _SCALE


def ramp_index(lum: float, length: int) -> int:
    index = math.floor(lum * (length - 1))
    return min(max(index, 0), length - 1)


def prepare_ramp(ramp: str, inverted: bool = False) -> str:
    """Validate a ramp and apply inversion once, up front."""
    if len(ramp) < 1:
        raise InvalidInput("Character ramp is empty")
    return ramp[::-1] if inverted else ramp


def map_glyph(r: int, g: int, b: int, ramp: str) -> str:
    """Pick the glyph for one pixel from an already prepared ramp."""
    return ramp[ramp_index(luminance(r, g, b), len(ramp))]


def luminance_array(pixels: np.ndarray) -> np.ndarray:
    """Vectorised luminance for an array of shape (..., 3+) with channels in RGB order."""
    arr = pixels[..., :3].astype(np.int64)
    return (RED_WEIGHT * arr[..., 0] + GREEN_WEIGHT * arr[..., 1] + BLUE_WEIGHT * arr[..., 2]) / _SCALE


def index_array(lum: np.ndarray, length: int) -> np.ndarray:
    return np.clip(np.floor(lum * (length - 1)), 0, length - 1).astype(np.intp)
