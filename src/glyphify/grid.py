from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np


class PixelSampler(Protocol):
    def __call__(self, col: int, row: int) -> tuple[int, int, int]:
        """Return the (r, g, b) colour of one grid cell."""
        ...


@dataclass(frozen=True, eq=False)
class GlyphGrid:
    rows: tuple[str, ...]  # one string per row, top to bottom
    colours: np.ndarray | None = None  # (rows, cols, 3) uint8, or None

    def __post_init__(self):
        if self.colours is not None:
            view = self.colours.view()
            view.setflags(write=False)
            object.__setattr__(self, "colours", view)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def glyph_at(self, col: int, row: int) -> str:
        return self.rows[row][col]

    def colour_at(self, col: int, row: int) -> tuple[int, int, int] | None:
        if self.colours is None:
            return None
        r, g, b = self.colours[row, col]
        return int(r), int(g), int(b)
