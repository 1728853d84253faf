from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from curvechart.raster.canvas import RGBA, composite


LOGGER = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0
# Proportional sans faces tried after the requested family.
SANS_FALLBACKS = ("dejavusans", "liberationsans", "arial", "helvetica", "roboto", "notosans")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("C:/Windows/Fonts"),
)
FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}
_STYLE_WORDS = ("bold", "italic", "oblique", "mono", "condensed", "light")


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> None:
    """Draw ``text`` with the top-left of its ink box at ``(x, y)``."""
    if not text:
        return
    coverage = glyph_mask(text, load_font(font_family, font_size_px))
    composite(dst, x, y, coverage, color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int]:
    """Ink box size of ``text``; empty text is zero wide and one line tall."""
    font = load_font(font_family, font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    _, _, width, height = _ink_box(text, font)
    return (width, height)


@lru_cache(maxsize=256)
def glyph_mask(text: str, font: Font) -> np.ndarray:
    left, top, width, height = _ink_box(text, font)
    image = Image.new("L", (max(1, width), height), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.float32) / 255.0


def _ink_box(text: str, font: Font) -> tuple[int, int, int, int]:
    left, top, right, bottom = font.getbbox(text)
    return (int(left), int(top), max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=64)
def load_font(font_family: str, font_size_px: float) -> Font:
    size = max(1, int(round(font_size_px)))
    path = find_font(font_family)
    if path is None:
        LOGGER.warning("no installed font matches %r; using Pillow default font", font_family)
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(path), size=size)
    except OSError as exc:
        LOGGER.warning("could not load font %s (%s); using Pillow default font", path, exc)
        return ImageFont.load_default(size=size)


def find_font(font_family: str) -> Path | None:
    """Pick a regular-weight font file for ``font_family`` or a sans fallback."""
    index = _installed_fonts()
    wanted = _font_key(font_family) or _font_key(DEFAULT_FONT_FAMILY)
    for key in (wanted,) + SANS_FALLBACKS:
        if key in index:
            return index[key]
        for stem, path in index.items():
            if stem.startswith(key) and not any(word in stem for word in _STYLE_WORDS):
                return path
    return None


@lru_cache(maxsize=1)
def _installed_fonts() -> dict[str, Path]:
    index: dict[str, Path] = {}
    for base in FONT_DIRS:
        if not base.is_dir():
            continue
        for path in sorted(base.rglob("*")):
            if path.suffix.lower() in FONT_SUFFIXES:
                index.setdefault(_font_key(path.stem), path)
    LOGGER.debug("indexed %d installed font files", len(index))
    return index


def _font_key(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())
