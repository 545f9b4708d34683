import argparse
import logging
import sys
from pathlib import Path

from glyphify.charsets import CHARACTER_SETS, DEFAULT_CHARACTER_SET
from glyphify.converter import image_to_grid
from glyphify.errors import GlyphifyError
from glyphify.export import save_image, save_text
from glyphify.formats import format_ansi, format_markup, format_plain
from glyphify.settings import DEFAULT_COLUMNS, ConversionSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

FORMATTERS = {
    "text": format_plain,
    "html": format_markup,
    "ansi": format_ansi,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render an image as ASCII art")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-s", "--size", type=int, default=DEFAULT_COLUMNS, help=f"Output width in columns (default: {DEFAULT_COLUMNS})"
    )
    parser.add_argument(
        "-r",
        "--charset",
        default=DEFAULT_CHARACTER_SET,
        choices=sorted(CHARACTER_SETS),
        help=f"Character ramp preset (default: {DEFAULT_CHARACTER_SET})",
    )
    parser.add_argument("--ramp", default=None, help="Custom character ramp, darkest first (overrides --charset)")
    parser.add_argument("-c", "--colour", action="store_true", default=False, help="Keep per-character colour")
    parser.add_argument("-i", "--invert", action="store_true", default=False, help="Reverse the character ramp")
    parser.add_argument(
        "-f",
        "--format",
        default=None,
        choices=sorted(FORMATTERS),
        help="Output format (default: ansi with --colour, text otherwise)",
    )
    parser.add_argument("-o", "--output", default=None, help="Write to a file; a .png suffix renders an image")
    parser.add_argument("--font", default=None, help="TrueType font for image output (default: Pillow's built-in)")
    parser.add_argument("--font-size", type=int, default=12, help="Font size for image output (default: 12)")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        return 1

    fmt = args.format or ("ansi" if args.colour else "text")
    try:
        settings = ConversionSettings(
            columns=args.size,
            character_set=args.charset,
            custom_ramp=args.ramp,
            colored=args.colour or fmt == "html",
            inverted=args.invert,
        )
        grid = image_to_grid(image_path, settings)
        if args.output is None:
            print(FORMATTERS[fmt](grid))
        elif args.output.lower().endswith(".png"):
            save_image(grid, args.output, font_path=args.font, font_size=args.font_size)
        elif fmt == "html":
            Path(args.output).write_text(format_markup(grid), encoding="utf-8")
        else:
            save_text(format_plain(grid), args.output)
    except GlyphifyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
