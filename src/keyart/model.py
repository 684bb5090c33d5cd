import math
import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from keyart.charsets import DEFAULT_BRIGHTNESSES, DEFAULT_KEYS
from keyart.errors import EmptyTable, InvalidCharacterSet

MAGIC = b"KEYB"
FORMAT_VERSION = 1


def _read(f, size: int) -> bytes:
    data = f.read(size)
    if len(data) != size:
        raise ValueError(f"Truncated KEYB file: wanted {size} bytes, got {len(data)}")
    return data


@dataclass(frozen=True)
class BrightnessTable:
    """Average rendered brightness (0-255) of each key, in key order.

    Tables are immutable once built and can be shared freely between mapper calls.
    """

    keys: str
    brightnesses: tuple[int, ...]
    font_name: str = ""
    scale: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "brightnesses", tuple(int(b) for b in self.brightnesses))
        if len(self.keys) != len(self.brightnesses):
            raise ValueError(f"Got {len(self.keys)} keys but {len(self.brightnesses)} brightnesses")
        if len(set(self.keys)) != len(self.keys):
            raise InvalidCharacterSet(f"Keys must be distinct: {self.keys!r}")
        # A blank entry is only allowed at the very end
        if any(key.isspace() for key in self.keys[:-1]):
            raise InvalidCharacterSet(f"Only the last key may be whitespace: {self.keys!r}")
        for brightness in self.brightnesses:
            if not 0 <= brightness <= 255:
                raise ValueError(f"Brightness out of range: {brightness}")

    @classmethod
    def default(cls) -> "BrightnessTable":
        """The precomputed table for the printable keys plus a trailing blank."""
        return cls(keys=DEFAULT_KEYS, brightnesses=DEFAULT_BRIGHTNESSES, font_name="RobotoMono-Regular", scale=30.0)

    def __len__(self) -> int:
        return len(self.keys)

    def as_pairs(self) -> list[tuple[int, str]]:
        return list(zip(self.brightnesses, self.keys))

    def as_mapping(self) -> dict[int, str]:
        """Brightness to key. When brightnesses collide the later key wins."""
        return dict(self.as_pairs())

    def find_nearest(self, brightness: int) -> str:
        if not self.keys:
            raise EmptyTable("Brightness table has no keys")
        best_key = ""
        best_dist = math.inf
        for key_brightness, key in self.as_pairs():
            dist = abs(brightness - key_brightness)
            # Strict comparison keeps the earliest key on a tie
            if dist < best_dist:
                best_dist = dist
                best_key = key
        return best_key

    def find_nearest_grid(self, averages: np.ndarray) -> list[str]:
        """Match a (rows, cols) array of block brightnesses, one string per row."""
        if not self.keys:
            raise EmptyTable("Brightness table has no keys")
        averages = np.asarray(averages, dtype=np.int64)

        # Sort once by brightness, keeping only the earliest key for each value
        brightnesses = np.asarray(self.brightnesses, dtype=np.int64)
        values, first_index = np.unique(brightnesses, return_index=True)

        upper = np.clip(np.searchsorted(values, averages), 0, len(values) - 1)
        lower = np.clip(upper - 1, 0, len(values) - 1)
        dist_upper = np.abs(values[upper] - averages)
        dist_lower = np.abs(values[lower] - averages)
        take_lower = (dist_lower < dist_upper) | (
            (dist_lower == dist_upper) & (first_index[lower] < first_index[upper])
        )
        indices = np.where(take_lower, first_index[lower], first_index[upper])

        keys = np.array(list(self.keys))
        return ["".join(row) for row in keys[indices]]

    def save(self, path: str | Path) -> None:
        path = Path(path)
        with path.open("wb") as f:
            f.write(MAGIC)
            f.write(struct.pack("B", FORMAT_VERSION))
            name_bytes = self.font_name.encode("utf-8")
            f.write(struct.pack(">H", len(name_bytes)))
            f.write(name_bytes)
            f.write(struct.pack(">f", self.scale))
            f.write(struct.pack(">I", len(self.keys)))
            for key, brightness in zip(self.keys, self.brightnesses):
                key_bytes = key.encode("utf-8")
                f.write(struct.pack("B", len(key_bytes)))
                f.write(key_bytes)
                f.write(struct.pack("B", brightness))

    @classmethod
    def load(cls, path: str | Path) -> "BrightnessTable":
        path = Path(path)
        with path.open("rb") as f:
            magic = f.read(4)
            if magic != MAGIC:
                raise ValueError(f"Not a KEYB file: {magic!r}")
            (version,) = struct.unpack("B", _read(f, 1))
            if version != FORMAT_VERSION:
                raise ValueError(f"Unsupported format version: {version}")
            (name_len,) = struct.unpack(">H", _read(f, 2))
            font_name = _read(f, name_len).decode("utf-8")
            (scale,) = struct.unpack(">f", _read(f, 4))
            (key_count,) = struct.unpack(">I", _read(f, 4))
            keys = []
            brightnesses = []
            for _ in range(key_count):
                (key_len,) = struct.unpack("B", _read(f, 1))
                keys.append(_read(f, key_len).decode("utf-8"))
                (brightness,) = struct.unpack("B", _read(f, 1))
                brightnesses.append(brightness)
            return cls(
                keys="".join(keys),
                brightnesses=tuple(brightnesses),
                font_name=font_name,
                scale=scale,
            )
