import os
import shutil
import subprocess

import pytest

MONOSPACE_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu-sans-mono-fonts/DejaVuSansMono.ttf",
)


def _fc_match(pattern: str) -> str | None:
    if shutil.which("fc-match") is None:
        return None
    out = subprocess.run(["fc-match", "-f", "%{file}", pattern], capture_output=True, text=True)
    path = out.stdout.strip()
    return path if out.returncode == 0 and path else None


def find_font() -> str | None:
    """Monospace TrueType font for image capture tests, if the system has one."""
    return next((path for path in MONOSPACE_FONTS if os.path.exists(path)), None) or _fc_match("monospace")


FONT_PATH = find_font()
needs_font = pytest.mark.skipif(FONT_PATH is None, reason="No monospace font found on system")


@pytest.fixture
def font_path():
    return FONT_PATH
