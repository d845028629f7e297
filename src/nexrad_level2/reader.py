"""
Big-endian cursor over an immutable byte buffer.
"""

import struct
from typing import Union

import numpy as np

_U8 = struct.Struct(">B")
_I8 = struct.Struct(">b")
_U16 = struct.Struct(">H")
_I16 = struct.Struct(">h")
_U32 = struct.Struct(">I")
_I32 = struct.Struct(">i")
_F32 = struct.Struct(">f")

BytesLike = Union[bytes, bytearray, memoryview]


class OutOfBoundsError(Exception):
    """A read would run past the end of the buffer."""

    def __init__(self, offset: int, width: int, length: int):
        super().__init__(
            f"read of {width} byte(s) at offset {offset} exceeds buffer length {length}"
        )
        self.offset = offset
        self.width = width
        self.length = length


class ByteReader:
    """
    Bounded big-endian reader over a byte buffer.

    The reader keeps a cursor (``offset``) for sequential reads and also
    exposes ``*_at`` methods that read at an absolute position without moving
    the cursor. Every read checks ``position + width <= len(buffer)`` and
    raises ``OutOfBoundsError`` otherwise.

    Parameters
    ----------
    buffer : bytes-like
        Data to read. It is wrapped in a ``memoryview``, never copied.
    offset : int, optional
        Initial cursor position (default: 0)

    Examples
    --------
    >>> r = ByteReader(b"\\x00\\x01\\xff\\xff\\xff\\xfe")
    >>> r.read_u16()
    1
    >>> r.read_i32()
    -2
    """

    __slots__ = ("_view", "offset")

    def __init__(self, buffer: BytesLike, offset: int = 0):
        self._view = memoryview(buffer).cast("B")
        self.offset = offset

    def __len__(self) -> int:
        return len(self._view)

    @property
    def remaining(self) -> int:
        """Number of bytes between the cursor and the end of the buffer."""
        return max(0, len(self._view) - self.offset)

    def check(self, position: int, width: int) -> None:
        """Raise ``OutOfBoundsError`` unless ``width`` bytes exist at ``position``."""
        if position < 0 or width < 0 or position + width > len(self._view):
            raise OutOfBoundsError(position, width, len(self._view))

    def seek(self, position: int) -> None:
        self.offset = position

    def skip(self, count: int) -> None:
        self.offset += count

    # Absolute reads

    def _unpack_at(self, fmt: struct.Struct, position: int):
        self.check(position, fmt.size)
        return fmt.unpack_from(self._view, position)[0]

    def u8_at(self, position: int) -> int:
        return self._unpack_at(_U8, position)

    def i8_at(self, position: int) -> int:
        return self._unpack_at(_I8, position)

    def u16_at(self, position: int) -> int:
        return self._unpack_at(_U16, position)

    def i16_at(self, position: int) -> int:
        return self._unpack_at(_I16, position)

    def u32_at(self, position: int) -> int:
        return self._unpack_at(_U32, position)

    def i32_at(self, position: int) -> int:
        return self._unpack_at(_I32, position)

    def f32_at(self, position: int) -> float:
        return self._unpack_at(_F32, position)

    def bytes_at(self, position: int, length: int) -> memoryview:
        """Return a zero-copy view of ``length`` bytes at ``position``."""
        self.check(position, length)
        return self._view[position:position + length]

    def text_at(self, position: int, length: int) -> str:
        """Decode ``length`` bytes as latin-1 text, keeping padding bytes."""
        return bytes(self.bytes_at(position, length)).decode("latin-1")

    def array_at(self, position: int, count: int, dtype: str) -> np.ndarray:
        """
        Read ``count`` items of a big-endian numpy ``dtype`` at ``position``.

        The returned array is a read-only view over the buffer.
        """
        dt = np.dtype(dtype)
        self.check(position, count * dt.itemsize)
        return np.frombuffer(self._view, dtype=dt, count=count, offset=position)

    def sub(self, position: int, length: int) -> "ByteReader":
        """Return a new reader over a subrange, with its cursor at 0."""
        return ByteReader(self.bytes_at(position, length))

    # Sequential reads

    def _read(self, fmt: struct.Struct):
        value = self._unpack_at(fmt, self.offset)
        self.offset += fmt.size
        return value

    def read_u8(self) -> int:
        return self._read(_U8)

    def read_i8(self) -> int:
        return self._read(_I8)

    def read_u16(self) -> int:
        return self._read(_U16)

    def read_i16(self) -> int:
        return self._read(_I16)

    def read_u32(self) -> int:
        return self._read(_U32)

    def read_i32(self) -> int:
        return self._read(_I32)

    def read_f32(self) -> float:
        return self._read(_F32)

    def read_bytes(self, length: int) -> memoryview:
        view = self.bytes_at(self.offset, length)
        self.offset += length
        return view
