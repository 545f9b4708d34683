import math

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from glyphify.formats import is_markup, parse_markup
from glyphify.grid import GlyphGrid

BACKGROUND = (0, 0, 0)
DEFAULT_FOREGROUND = (255, 255, 255)

# Any channel above this on the black background counts as content
TRIM_THRESHOLD = 10
TRIM_MARGIN = 2


def _load_font(font_path: str | None, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    if font_path is None:
        return ImageFont.load_default(size=size)
    return ImageFont.truetype(font_path, size)


def _cell_size(font, font_size: int, line_height: float) -> tuple[int, int]:
    cell_width = max(1, math.ceil(font.getlength("M")))
    cell_height = max(1, round(font_size * line_height))
    return cell_width, cell_height


def render_grid(
    grid: GlyphGrid,
    font_path: str | None = None,
    font_size: int = 12,
    line_height: float = 1.2,
    scale: int = 2,
) -> Image.Image:
    """Rasterize a glyph grid onto a black canvas, one fixed-size cell per glyph."""
    size = font_size * scale
    font = _load_font(font_path, size)
    cell_width, cell_height = _cell_size(font, size, line_height)
    width = max(1, max((len(line) for line in grid.rows), default=0) * cell_width)
    height = max(1, grid.row_count * cell_height)

    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    for r, line in enumerate(grid.rows):
        for c, glyph in enumerate(line):
            if glyph.isspace():
                continue
            fill = grid.colour_at(c, r) or DEFAULT_FOREGROUND
            draw.text((c * cell_width, r * cell_height), glyph, fill=fill, font=font)
    return image


def render_markup(markup: str, **options) -> Image.Image:
    return render_grid(parse_markup(markup), **options)


def content_bbox(image: Image.Image, threshold: int = TRIM_THRESHOLD) -> tuple[int, int, int, int] | None:
    """Return (left, top, right, bottom) inclusive bounds of non-background pixels, or None."""
    arr = np.asarray(image.convert("RGBA"))
    mask = (arr[..., 3] > 0) & (arr[..., :3] > threshold).any(axis=2)
    ys, xs = np.nonzero(mask)
    if len(xs) == 0:
        return None
    return int(xs.min()), int(ys.min()), int(xs.max()), int(ys.max())


def trim_image(image: Image.Image, threshold: int = TRIM_THRESHOLD, margin: int = TRIM_MARGIN) -> Image.Image:
    """Crop to the smallest rectangle holding content, plus a margin.

    An image with no content is returned unchanged.
    """
    bbox = content_bbox(image, threshold)
    if bbox is None:
        return image
    left, top, right, bottom = bbox
    left = max(0, left - margin)
    top = max(0, top - margin)
    right = min(image.width - 1, right + margin)
    bottom = min(image.height - 1, bottom + margin)
    return image.crop((left, top, right + 1, bottom + 1))


def capture_image(result: str | GlyphGrid, **options) -> Image.Image:
    """Render plain text, span markup or a GlyphGrid to a trimmed image."""
    if isinstance(result, GlyphGrid):
        grid = result
    elif is_markup(result):
        grid = parse_markup(result)
    else:
        grid = GlyphGrid(rows=tuple(result.split("\n")))
    return trim_image(render_grid(grid, **options))
