import asyncio
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from glyphify.brightness import index_array, luminance_array, map_glyph, prepare_ramp
from glyphify.errors import InvalidInput, SamplingFailure
from glyphify.formats import format_markup, format_plain
from glyphify.grid import GlyphGrid, PixelSampler
from glyphify.sampler import ImageSampler, load_image
from glyphify.settings import ConversionSettings
from glyphify.sizing import check_cell_limit, size_grid

logger = logging.getLogger(__name__)


def _check_dimensions(columns: int, rows: int) -> None:
    if columns < 1 or rows < 1:
        raise InvalidInput(f"Grid must be at least 1x1, got {columns}x{rows}")
    check_cell_limit(columns, rows)


def build_grid(
    sampler: PixelSampler,
    columns: int,
    rows: int,
    ramp: str,
    colored: bool = False,
    inverted: bool = False,
) -> GlyphGrid:
    """Sample every cell through `sampler` and map it to a glyph.

    Either the whole grid is returned or an exception is raised; a failing
    sampler never yields a partial grid.
    """
    _check_dimensions(columns, rows)
    ramp = prepare_ramp(ramp, inverted)
    logger.debug("Building %dx%d grid (colored=%s, inverted=%s)", columns, rows, colored, inverted)

    lines = []
    colours = np.empty((rows, columns, 3), dtype=np.uint8) if colored else None
    for y in range(rows):
        glyphs = []
        for x in range(columns):
            try:
                r, g, b = (int(v) for v in sampler(x, y))
                if not (0 <= r <= 255 and 0 <= g <= 255 and 0 <= b <= 255):
                    raise ValueError(f"channel out of range: {(r, g, b)}")
            except Exception as exc:
                raise SamplingFailure(x, y, exc) from exc
            glyphs.append(map_glyph(r, g, b, ramp))
            if colours is not None:
                colours[y, x] = (r, g, b)
        lines.append("".join(glyphs))
    return GlyphGrid(rows=tuple(lines), colours=colours)


def grid_from_pixels(pixels: np.ndarray, ramp: str, colored: bool = False, inverted: bool = False) -> GlyphGrid:
    """Vectorised equivalent of build_grid for an already resampled (rows, cols, 3+) array."""
    rows, columns = pixels.shape[:2]
    _check_dimensions(columns, rows)
    ramp = prepare_ramp(ramp, inverted)
    indices = index_array(luminance_array(pixels), len(ramp))
    lines = tuple("".join(ramp[i] for i in row) for row in indices.tolist())
    colours = pixels[..., :3].astype(np.uint8) if colored else None
    return GlyphGrid(rows=lines, colours=colours)


def convert(
    sampler: PixelSampler,
    columns: int,
    rows: int,
    ramp: str,
    colored: bool = False,
    inverted: bool = False,
) -> str:
    grid = build_grid(sampler, columns, rows, ramp, colored=colored, inverted=inverted)
    return format_markup(grid) if colored else format_plain(grid)


def image_to_grid(
    image: Image.Image | str | Path,
    settings: ConversionSettings | None = None,
    resample: Image.Resampling = Image.Resampling.BILINEAR,
) -> GlyphGrid:
    if settings is None:
        settings = ConversionSettings()
    image = load_image(image)
    columns, rows = size_grid(image.width, image.height, settings.columns)
    sampler = ImageSampler(image, columns, rows, resample=resample)
    logger.debug("Resampled %dx%d image to %dx%d cells", image.width, image.height, columns, rows)
    return grid_from_pixels(sampler.pixels, settings.ramp, colored=settings.colored, inverted=settings.inverted)


def image_to_text(
    image: Image.Image | str | Path,
    settings: ConversionSettings | None = None,
    resample: Image.Resampling = Image.Resampling.BILINEAR,
) -> str:
    """Convert an image to plain text, or to span markup when colour is enabled."""
    if settings is None:
        settings = ConversionSettings()
    grid = image_to_grid(image, settings, resample=resample)
    return format_markup(grid) if settings.colored else format_plain(grid)


async def convert_async(
    image: Image.Image | str | Path,
    settings: ConversionSettings | None = None,
    resample: Image.Resampling = Image.Resampling.BILINEAR,
) -> str:
    """Run image_to_text in a worker thread so an event loop stays responsive."""
    return await asyncio.to_thread(image_to_text, image, settings, resample)
