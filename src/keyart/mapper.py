from dataclasses import dataclass, field

import numpy as np
from PIL import Image

from keyart.errors import DegenerateBlockSize, EmptyTable
from keyart.generator import CHUNK_WIDTH_KEY_AMOUNT, KEY_WIDTH_MULTIPLIER
from keyart.model import BrightnessTable
from keyart.sampling import block_averages

# One block per output key, shaped like a glyph cell (twice as tall as wide)
DEFAULT_BLOCK_WIDTH = CHUNK_WIDTH_KEY_AMOUNT
DEFAULT_BLOCK_HEIGHT = CHUNK_WIDTH_KEY_AMOUNT * KEY_WIDTH_MULTIPLIER


@dataclass
class KeyGrid:
    rows: list[str] = field(default_factory=list)  # one string per row

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    def __str__(self) -> str:
        return "\n".join(self.rows)


def map_to_keys(
    image: Image.Image | np.ndarray,
    table: BrightnessTable,
    block_width: int = DEFAULT_BLOCK_WIDTH,
    block_height: int = DEFAULT_BLOCK_HEIGHT,
) -> KeyGrid:
    """Replace each block of a grayscale image with the key closest in brightness.

    Partial blocks on the right and bottom edges are dropped, so the grid has
    ``height // block_height`` rows of ``width // block_width`` keys. When two
    keys are equally close the one earlier in the table wins.
    """
    if not table.keys:
        raise EmptyTable("Cannot map an image with an empty brightness table")
    if block_width < 1 or block_height < 1:
        raise DegenerateBlockSize(f"Block size must be positive, got {block_width}x{block_height}")

    averages = block_averages(image, block_width, block_height)
    if averages.size == 0:
        # Narrower than one block still yields one empty row per block row
        return KeyGrid(rows=[""] * averages.shape[0])
    return KeyGrid(rows=table.find_nearest_grid(averages))
