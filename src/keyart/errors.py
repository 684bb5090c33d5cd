class KeyArtError(ValueError):
    """Base class for errors raised while building tables or mapping images."""


class InvalidCharacterSet(KeyArtError):
    """The key set contains whitespace or a repeated key."""


class EmptyTable(KeyArtError):
    """A lookup was attempted against a table with no keys."""


class DegenerateBlockSize(KeyArtError):
    """A sampling block has a zero or negative dimension."""


class RasterizationError(KeyArtError):
    """The font produced nothing measurable for a key."""
