from glyphify.errors import InvalidInput

# Ramps run from sparsest to densest glyph, except where noted
STANDARD = " .:-=+*#%@"

DETAILED = " .'`^\",:;Il!i><~+_-?][}{1)(|/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

# Shade blocks, densest first
BLOCKS = "█▓▒░ "

# Reverse of STANDARD: dense glyphs for dark pixels, for light backgrounds
SIMPLE = "@%#*+=-:. "

CHARACTER_SETS = {
    "standard": STANDARD,
    "detailed": DETAILED,
    "blocks": BLOCKS,
    "simple": SIMPLE,
}

DEFAULT_CHARACTER_SET = "standard"


def resolve_ramp(name: str | None = None, custom: str | None = None) -> str:
    """Return the custom ramp if given, otherwise the named preset."""
    if custom is not None:
        if not custom:
            raise InvalidInput("Character ramp is empty")
        return custom
    name = name or DEFAULT_CHARACTER_SET
    try:
        return CHARACTER_SETS[name]
    except KeyError:
        raise InvalidInput(f"Unknown character set: {name!r}") from None
