import re

import numpy as np

from glyphify.errors import InvalidInput
from glyphify.grid import GlyphGrid

SPAN_TEMPLATE = '<span style="color: rgb({r}, {g}, {b})">{glyph}</span>'
LINE_BREAK = "<br/>"

_SPAN_RE = re.compile(r'<span style="color: rgb\((\d{1,3}), (\d{1,3}), (\d{1,3})\)">(.)</span>', re.DOTALL)


def format_plain(grid: GlyphGrid) -> str:
    return "\n".join(grid.rows)


def _require_colours(grid: GlyphGrid) -> np.ndarray:
    if grid.colours is None:
        raise InvalidInput("Grid has no colour information")
    return grid.colours


def format_markup(grid: GlyphGrid) -> str:
    """Wrap every glyph in a span carrying its cell colour; rows are separated by <br/>."""
    colours = _require_colours(grid)
    out = []
    for r, line in enumerate(grid.rows):
        parts = []
        for c, glyph in enumerate(line):
            red, green, blue = (int(v) for v in colours[r, c])
            parts.append(SPAN_TEMPLATE.format(r=red, g=green, b=blue, glyph=glyph))
        out.append("".join(parts))
    return LINE_BREAK.join(out)


def format_ansi(grid: GlyphGrid) -> str:
    """Wrap each glyph in an ANSI truecolor foreground escape sequence."""
    if grid.colours is None:
        return format_plain(grid)
    out = []
    for r, line in enumerate(grid.rows):
        parts = []
        for c, glyph in enumerate(line):
            fr, fg, fb = (int(v) for v in grid.colours[r, c])
            parts.append(f"\033[38;2;{fr};{fg};{fb}m{glyph}")
        parts.append("\033[0m")
        out.append("".join(parts))
    return "\n".join(out)


def _parse_row(row: str, row_number: int) -> tuple[str, list[tuple[int, int, int]]]:
    glyphs = []
    colours = []
    pos = 0
    while pos < len(row):
        match = _SPAN_RE.match(row, pos)
        if match is None:
            raise InvalidInput(f"Unexpected markup in row {row_number} at offset {pos}: {row[pos:pos + 20]!r}")
        rgb = tuple(int(v) for v in match.group(1, 2, 3))
        if any(v > 255 for v in rgb):
            raise InvalidInput(f"Colour out of range in row {row_number}: {rgb}")
        glyphs.append(match.group(4))
        colours.append(rgb)
        pos = match.end()
    return "".join(glyphs), colours


def parse_markup(text: str) -> GlyphGrid:
    """Recover glyphs and colours from span-per-glyph markup."""
    if not text:
        return GlyphGrid(rows=(), colours=np.zeros((0, 0, 3), dtype=np.uint8))
    segments = text.split(LINE_BREAK)
    # Tolerate a break after the last row as well as between rows
    if len(segments) > 1 and segments[-1] == "":
        segments.pop()
    rows = []
    colour_rows = []
    for i, row in enumerate(segments):
        glyphs, colours = _parse_row(row, i)
        rows.append(glyphs)
        colour_rows.append(colours)
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise InvalidInput("Markup rows have differing lengths")
    colours = np.array(colour_rows, dtype=np.uint8).reshape(len(rows), width, 3)
    return GlyphGrid(rows=tuple(rows), colours=colours)


def is_markup(text: str) -> bool:
    return text.startswith("<span ")


def strip_markup(text: str) -> str:
    """Plain text version of a markup grid."""
    return format_plain(parse_markup(text))
