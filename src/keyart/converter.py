import logging
from pathlib import Path

import numpy as np
from PIL import Image

from keyart.mapper import DEFAULT_BLOCK_HEIGHT, DEFAULT_BLOCK_WIDTH, KeyGrid, map_to_keys
from keyart.model import BrightnessTable

logger = logging.getLogger(__name__)

DEFAULT_DOWNSCALE = 8
DEFAULT_BRIGHTEN = -60


def brighten(image: Image.Image, amount: int) -> Image.Image:
    """Add a signed offset to every channel, clamping to 0-255."""
    if amount == 0:
        return image
    arr = np.asarray(image, dtype=np.int16) + amount
    return Image.fromarray(np.clip(arr, 0, 255).astype(np.uint8))


def image_to_keys(
    image: Image.Image | str | Path,
    table: BrightnessTable | None = None,
    downscale: int = DEFAULT_DOWNSCALE,
    brightness: int = DEFAULT_BRIGHTEN,
    block_width: int = DEFAULT_BLOCK_WIDTH,
    block_height: int = DEFAULT_BLOCK_HEIGHT,
) -> KeyGrid:
    if downscale < 1:
        raise ValueError(f"Downscale must be at least 1, got {downscale}")
    if table is None:
        table = BrightnessTable.default()
    if not isinstance(image, Image.Image):
        image = Image.open(image)
    image = image.convert("RGB")

    if downscale > 1:
        new_size = (max(1, image.width // downscale), max(1, image.height // downscale))
        logger.debug("Resizing %dx%d to %dx%d", image.width, image.height, *new_size)
        image = image.resize(new_size, Image.LANCZOS)

    gray = brighten(image, brightness).convert("L")
    return map_to_keys(gray, table, block_width, block_height)
