from pathlib import Path

import numpy as np
from PIL import Image

from glyphify.errors import InvalidInput


def load_image(image: Image.Image | str | Path) -> Image.Image:
    if not isinstance(image, Image.Image):
        image = Image.open(image)
    if image.width <= 0 or image.height <= 0:
        raise InvalidInput(f"Degenerate image: {image.width}x{image.height}")
    return image


class ImageSampler:
    """Pixel source that resamples an image once to the target grid size."""

    def __init__(
        self,
        image: Image.Image,
        columns: int,
        rows: int,
        resample: Image.Resampling = Image.Resampling.BILINEAR,
    ):
        if columns < 1 or rows < 1:
            raise InvalidInput(f"Grid must be at least 1x1, got {columns}x{rows}")
        self.columns = columns
        self.rows = rows
        scaled = image.convert("RGBA").resize((columns, rows), resample)
        # (rows, cols, 4) uint8
        self.pixels = np.asarray(scaled, dtype=np.uint8)

    def __call__(self, col: int, row: int) -> tuple[int, int, int]:
        r, g, b, _ = self.pixels[row, col]
        return int(r), int(g), int(b)
