"""
Exceptions raised by the Level 2 decoder.
"""


class Level2DecodeError(ValueError):
    """A buffer could not be decoded into a radar volume."""


class VolumeHeaderError(Level2DecodeError):
    """The buffer is too small to hold the fixed volume header."""


class EmptyVolumeError(Level2DecodeError):
    """No sweep holds a single decodable ray."""
