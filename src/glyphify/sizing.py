from glyphify.errors import InvalidInput, ResourceLimitExceeded

# Monospace glyphs are roughly 0.55 times as wide as they are tall
CHARACTER_ASPECT_RATIO = 0.55
_ASPECT_NUMERATOR = 11
_ASPECT_DENOMINATOR = 20

MAX_CELLS = 10_000_000


def size_grid(source_width: int, source_height: int, columns: int) -> tuple[int, int]:
    """Return (columns, rows) for a grid that keeps the source's proportions on screen.

    Rows are scaled down by CHARACTER_ASPECT_RATIO so the text is not
    vertically stretched when rendered in a fixed-width font. Rounding is
    half-up and done in integers, so arbitrarily large inputs size exactly
    and then fail the cell ceiling rather than overflowing a float.
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidInput(f"Degenerate image: {source_width}x{source_height}")
    if columns < 1:
        raise InvalidInput(f"Columns must be positive, got {columns}")
    # floor(columns * H/W * 11/20 + 1/2)
    denominator = 2 * _ASPECT_DENOMINATOR * source_width
    rows = (2 * _ASPECT_NUMERATOR * columns * source_height + _ASPECT_DENOMINATOR * source_width) // denominator
    rows = max(1, rows)
    check_cell_limit(columns, rows)
    return columns, rows


def check_cell_limit(columns: int, rows: int, limit: int = MAX_CELLS) -> None:
    if columns * rows > limit:
        raise ResourceLimitExceeded(columns, rows, limit)
