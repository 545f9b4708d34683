import logging
from pathlib import Path

from glyphify.capture import capture_image
from glyphify.formats import is_markup, strip_markup

logger = logging.getLogger(__name__)

EXTENSIONS = {"text": "txt", "image": "png"}


def export_name(source_name: str | None, kind: str = "text") -> str:
    """Download file name derived from the uploaded file's name."""
    ext = EXTENSIONS[kind]
    if not source_name:
        return f"ascii-art.{ext}"
    stem = Path(source_name).name.split(".")[0]
    return f"{stem}-ascii.{ext}"


def plain_text(result: str) -> str:
    return strip_markup(result) if is_markup(result) else result


def save_text(result: str, path: str | Path) -> Path:
    path = Path(path)
    path.write_text(plain_text(result), encoding="utf-8")
    logger.debug("Wrote text to %s", path)
    return path


def save_image(result, path: str | Path, **render_options) -> Path:
    path = Path(path)
    capture_image(result, **render_options).save(path, format="PNG")
    logger.debug("Wrote image to %s", path)
    return path
