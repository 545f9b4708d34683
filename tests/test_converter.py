import asyncio

import numpy as np
import pytest
from PIL import Image

from glyphify.charsets import STANDARD
from glyphify.converter import build_grid, convert, convert_async, grid_from_pixels, image_to_grid, image_to_text
from glyphify.errors import InvalidInput, ResourceLimitExceeded, SamplingFailure
from glyphify.grid import GlyphGrid
from glyphify.settings import ConversionSettings
from glyphify.sizing import size_grid

SPAN_PREFIX = '<span style="color: rgb('


def solid(rgb):
    return lambda col, row: rgb


def array_sampler(pixels):
    return lambda col, row: tuple(int(v) for v in pixels[row, col, :3])


def plain(columns=100, **kwargs):
    return ConversionSettings(columns=columns, colored=False, **kwargs)


def test_all_white_two_by_two():
    assert convert(solid((255, 255, 255)), 2, 2, STANDARD) == "@@\n@@"


def test_single_black_pixel_is_first_glyph():
    assert convert(solid((0, 0, 0)), 1, 1, STANDARD) == " "


def test_inverted_white_is_first_glyph():
    assert convert(solid((255, 255, 255)), 1, 1, STANDARD, inverted=True) == " "


def test_white_image_end_to_end():
    img = Image.new("RGB", (2, 2), (255, 255, 255))
    # 2 columns * 1.0 * 0.55 rounds to a single row
    result = image_to_text(img, plain(columns=2), resample=Image.Resampling.NEAREST)
    assert result == "@@"


def test_black_pixel_end_to_end():
    img = Image.new("RGB", (1, 1), (0, 0, 0))
    assert image_to_text(img, plain(columns=1)) == " "


def test_no_trailing_newline():
    result = convert(solid((0, 0, 0)), 3, 4, STANDARD)
    assert result == "\n".join(["   "] * 4)
    assert not result.endswith("\n")


def test_row_and_column_order():
    pixels = np.zeros((2, 3, 3), dtype=np.uint8)
    pixels[0, 2] = 255  # top right
    pixels[1, 0] = 255  # bottom left
    assert convert(array_sampler(pixels), 3, 2, STANDARD) == "  @\n@  "


def test_conversion_is_deterministic():
    rng = np.random.default_rng(3)
    img = Image.fromarray(rng.integers(0, 256, size=(40, 60, 3), dtype=np.uint8), "RGB")
    settings = ConversionSettings(columns=30)
    assert image_to_text(img, settings) == image_to_text(img, settings)


@pytest.mark.parametrize("size,columns", [((60, 40), 20), ((40, 60), 33), ((300, 7), 50), ((3, 500), 1)])
def test_row_count_matches_sizing(size, columns):
    img = Image.new("RGB", size, (90, 120, 30))
    grid = image_to_grid(img, plain(columns=columns))
    _, rows = size_grid(size[0], size[1], columns)
    assert grid.row_count == rows
    assert all(len(row) == columns for row in grid.rows)


def test_sampling_failure_yields_no_grid():
    calls = []

    def flaky(col, row):
        calls.append((col, row))
        if (col, row) == (3, 2):
            raise OSError("truncated image data")
        return (10, 20, 30)

    with pytest.raises(SamplingFailure) as excinfo:
        build_grid(flaky, 5, 4, STANDARD)
    assert (excinfo.value.column, excinfo.value.row) == (3, 2)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert calls[-1] == (3, 2)


def test_out_of_range_sample_is_a_sampling_failure():
    with pytest.raises(SamplingFailure):
        convert(solid((256, 0, 0)), 1, 1, STANDARD)


def test_numpy_samples_accepted():
    pixels = np.full((1, 1, 3), 255, dtype=np.uint8)
    sampler = lambda col, row: tuple(pixels[row, col])  # noqa: E731
    assert convert(sampler, 1, 1, STANDARD, colored=True) == '<span style="color: rgb(255, 255, 255)">@</span>'


def test_colour_markup_contract():
    rng = np.random.default_rng(11)
    pixels = rng.integers(0, 256, size=(4, 7, 3), dtype=np.uint8)
    result = convert(array_sampler(pixels), 7, 4, STANDARD, colored=True)
    assert result.count(SPAN_PREFIX) == 7 * 4
    assert result.count("<br/>") == 3
    assert "\n" not in result
    assert not result.endswith("<br/>")


def test_colour_markup_carries_cell_colour():
    result = convert(solid((255, 0, 0)), 2, 1, STANDARD, colored=True)
    # 0.299 * 9 = 2.69 -> ":"
    assert result == '<span style="color: rgb(255, 0, 0)">:</span>' * 2


def test_invert_twice_matches_original_ramp():
    sampler = solid((128, 64, 200))
    once = convert(sampler, 4, 2, STANDARD[::-1], inverted=True)
    assert once == convert(sampler, 4, 2, STANDARD)


def test_empty_ramp_rejected():
    with pytest.raises(InvalidInput):
        convert(solid((0, 0, 0)), 1, 1, "")


@pytest.mark.parametrize("columns,rows", [(0, 1), (1, 0), (-2, 3)])
def test_non_positive_dimensions_rejected(columns, rows):
    with pytest.raises(InvalidInput):
        convert(solid((0, 0, 0)), columns, rows, STANDARD)


def test_resource_limit_checked_before_sampling():
    calls = []

    def sampler(col, row):
        calls.append((col, row))
        return (0, 0, 0)

    with pytest.raises(ResourceLimitExceeded):
        convert(sampler, 10_000, 1_001, STANDARD)
    assert calls == []


def test_vectorised_path_matches_sampler_path():
    rng = np.random.default_rng(5)
    pixels = rng.integers(0, 256, size=(9, 13, 4), dtype=np.uint8)
    for colored in (False, True):
        for inverted in (False, True):
            fast = grid_from_pixels(pixels, STANDARD, colored=colored, inverted=inverted)
            slow = build_grid(array_sampler(pixels), 13, 9, STANDARD, colored=colored, inverted=inverted)
            assert fast.rows == slow.rows
            if colored:
                np.testing.assert_array_equal(fast.colours, slow.colours)
            else:
                assert fast.colours is None and slow.colours is None


def test_grid_is_read_only():
    grid = build_grid(solid((1, 2, 3)), 2, 2, STANDARD, colored=True)
    with pytest.raises(ValueError):
        grid.colours[0, 0, 0] = 9
    with pytest.raises(AttributeError):
        grid.rows = ()


def test_accepts_file_path(tmp_path):
    path = tmp_path / "test.png"
    Image.new("RGB", (20, 20), (255, 255, 255)).save(path)
    result = image_to_text(path, plain(columns=10))
    assert len(result.split("\n")) == 6


def test_transparent_pixels_use_their_colour_channels():
    img = Image.new("RGBA", (1, 1), (0, 0, 0, 0))
    assert image_to_text(img, plain(columns=1)) == " "


def test_default_settings_are_coloured():
    img = Image.new("RGB", (10, 10), (0, 0, 255))
    assert image_to_text(img).startswith(SPAN_PREFIX)


def test_named_character_set():
    img = Image.new("RGB", (1, 1), (0, 0, 0))
    assert image_to_text(img, plain(columns=1, character_set="simple")) == "@"


def test_async_matches_inline():
    rng = np.random.default_rng(9)
    img = Image.fromarray(rng.integers(0, 256, size=(30, 30, 3), dtype=np.uint8), "RGB")
    settings = ConversionSettings(columns=12)
    assert asyncio.run(convert_async(img, settings)) == image_to_text(img, settings)


def test_huge_column_request_fails_cleanly():
    img = Image.new("RGB", (2, 2))
    with pytest.raises(ResourceLimitExceeded):
        image_to_text(img, plain(columns=10**400))


def test_grid_does_not_freeze_callers_array():
    colours = np.zeros((1, 2, 3), dtype=np.uint8)
    grid = GlyphGrid(rows=("ab",), colours=colours)
    colours[0, 0] = (9, 9, 9)
    assert grid.colour_at(0, 0) == (9, 9, 9)
    with pytest.raises(ValueError):
        grid.colours[0, 0, 0] = 1
