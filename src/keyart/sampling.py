import numpy as np
from PIL import Image

from keyart.errors import DegenerateBlockSize


def _as_array(image: Image.Image | np.ndarray) -> np.ndarray:
    if isinstance(image, Image.Image):
        image = image.convert("L")
    arr = np.asarray(image, dtype=np.int64)
    if arr.ndim != 2:
        raise ValueError(f"Expected a single-channel image, got shape {arr.shape}")
    return arr


def average_brightness(image: Image.Image | np.ndarray) -> int:
    """Integer mean of all pixel values, truncated rather than rounded."""
    arr = _as_array(image)
    if arr.size == 0:
        raise ValueError("Cannot average an empty image")
    return int(arr.sum() // arr.size)


def block_averages(image: Image.Image | np.ndarray, block_width: int, block_height: int) -> np.ndarray:
    """Average every block of an image at once. Returns int64 array of shape (rows, cols).

    Blocks are laid out row-major from the top left corner. Pixels past the
    last whole block on the right or bottom edge are dropped.
    """
    if block_width < 1 or block_height < 1:
        raise DegenerateBlockSize(f"Block size must be positive, got {block_width}x{block_height}")

    arr = _as_array(image)
    rows = arr.shape[0] // block_height
    cols = arr.shape[1] // block_width

    # Trim to exact grid and reshape into (rows, block_h, cols, block_w)
    trimmed = arr[: rows * block_height, : cols * block_width]
    blocks = trimmed.reshape(rows, block_height, cols, block_width)
    return blocks.sum(axis=(1, 3)) // (block_width * block_height)
