import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from keyart.errors import InvalidCharacterSet, RasterizationError
from keyart.model import BrightnessTable
from keyart.sampling import average_brightness

logger = logging.getLogger(__name__)

# Each key is measured as a block of repeated presses: KEY_REPETITION rows of
# KEY_REPETITION * KEY_WIDTH_MULTIPLIER copies, since glyphs are about half as
# wide as they are tall.
KEY_REPETITION = 3
KEY_WIDTH_MULTIPLIER = 2
CHUNK_WIDTH_KEY_AMOUNT = KEY_REPETITION * KEY_WIDTH_MULTIPLIER
KEY_COLOR = 255

DEFAULT_SCALE = 30.0


def validate_keys(characters: str) -> None:
    """Reject key sets containing whitespace or the same key twice."""
    for char in characters:
        if char.isspace():
            raise InvalidCharacterSet(f"Keys cannot contain whitespace: {characters!r}")
    if len(set(characters)) != len(characters):
        raise InvalidCharacterSet(f"Keys must be distinct: {characters!r}")


def _load_font(font: str | Path | ImageFont.FreeTypeFont, scale: float) -> ImageFont.FreeTypeFont:
    if isinstance(font, ImageFont.FreeTypeFont):
        return font.font_variant(size=scale)
    return ImageFont.truetype(str(font), scale)


def key_brightness(key: str, font: ImageFont.FreeTypeFont) -> int:
    """Render a tile of one key white-on-black and return its average brightness."""
    chunk_row = key * CHUNK_WIDTH_KEY_AMOUNT
    # Measured from the draw origin so stacked rows don't overlap
    _, _, row_width, row_height = font.getbbox(chunk_row)
    if row_width <= 0 or row_height <= 0:
        raise RasterizationError(f"Font renders nothing for key {key!r}")

    img = Image.new("L", (row_width, row_height * KEY_REPETITION), 0)
    draw = ImageDraw.Draw(img)
    for y in range(KEY_REPETITION):
        draw.text((0, y * row_height), chunk_row, fill=KEY_COLOR, font=font)
    return average_brightness(img)


def build_table(
    font: str | Path | ImageFont.FreeTypeFont,
    characters: str,
    scale: float = DEFAULT_SCALE,
    workers: int | None = None,
) -> BrightnessTable:
    """Measure the average rendered brightness of every key in a font.

    Args:
        font: path to a TrueType/OpenType file, or an already loaded font
        characters: ordered, distinct, non-whitespace keys
        scale: font size in pixels
        workers: measure keys on this many threads; results keep key order
    """
    validate_keys(characters)
    if scale <= 0:
        raise ValueError(f"Scale must be positive, got {scale}")

    loaded = _load_font(font, scale)
    font_name = font if isinstance(font, (str, Path)) else " ".join(filter(None, loaded.getname()))
    logger.debug("Measuring %d keys with %s at scale %s", len(characters), font_name, scale)

    if workers is not None and workers > 1:
        # FreeType faces are not safe to share between threads, give each task its own
        with ThreadPoolExecutor(max_workers=workers) as executor:
            brightnesses = list(executor.map(lambda key: key_brightness(key, loaded.font_variant()), characters))
    else:
        brightnesses = [key_brightness(key, loaded) for key in characters]

    return BrightnessTable(
        keys=characters,
        brightnesses=tuple(brightnesses),
        font_name=str(font_name),
        scale=float(scale),
    )
