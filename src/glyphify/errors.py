class GlyphifyError(Exception):
    """Base class for conversion failures."""


class InvalidInput(GlyphifyError, ValueError):
    """Degenerate image, empty ramp, or non-positive grid dimensions."""


class ResourceLimitExceeded(GlyphifyError):
    def __init__(self, columns: int, rows: int, limit: int):
        self.columns = columns
        self.rows = rows
        self.limit = limit
        super().__init__(f"Grid of {columns}x{rows} ({columns * rows} cells) exceeds limit of {limit} cells")


class SamplingFailure(GlyphifyError):
    def __init__(self, column: int, row: int, cause: BaseException):
        self.column = column
        self.row = row
        super().__init__(f"Sampling failed at ({column}, {row}): {cause}")
