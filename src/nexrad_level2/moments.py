"""
Decoding of generic moment data blocks ("D" blocks of message 31).
"""

from typing import Optional, Union

import numpy as np

from .constants import (
    MAX_GATES,
    MAX_GATE_SPACING_M,
    MIN_GATES,
    MIN_GATE_SPACING_M,
    MOMENT_FIRST_GATE_OFFSET,
    MOMENT_GATE_SPACING_OFFSET,
    MOMENT_GATES_OFFSET,
    MOMENT_HEADER_SIZE,
    MOMENT_MAP,
    MOMENT_NAME_OFFSET,
    MOMENT_OFFSET_OFFSET,
    MOMENT_SCALE_OFFSET,
    MOMENT_WORD_SIZE_OFFSET,
    RAW_NO_DATA_LIMIT,
)
from .models import MomentRecord
from .reader import ByteReader, OutOfBoundsError
from .result import Skip
from .utils import strip_padding

_SAMPLE_DTYPES = {8: ">u1", 16: ">u2"}


def canonical_moment_name(raw_name: str) -> Optional[str]:
    """
    Map a raw three character block name to its canonical identifier.

    Padding (NUL bytes and spaces) is trimmed first. Unknown names give None.
    """
    return MOMENT_MAP.get(strip_padding(raw_name))


def convert_raw(raw: np.ndarray, scale: float, offset: float) -> np.ndarray:
    """
    Convert quantized gate values to physical units.

    Raw values 0 (below threshold) and 1 (range folded) become NaN, every
    other value ``v`` becomes ``(v - offset) / scale``.

    Parameters
    ----------
    raw : np.ndarray
        Unsigned integer samples
    scale, offset : float
        Quantization parameters from the block header. ``scale`` must be non-zero.

    Returns
    -------
    np.ndarray
        float32 array with the same shape as ``raw``
    """
    values = (raw.astype("float64") - offset) / scale
    values[raw < RAW_NO_DATA_LIMIT] = np.nan
    return values.astype("float32")


def decode_moment_block(reader: ByteReader, position: int) -> Union[MomentRecord, Skip]:
    """
    Decode one moment data block.

    Parameters
    ----------
    reader : ByteReader
        Reader over the message 31 body
    position : int
        Offset of the block within the body

    Returns
    -------
    MomentRecord or Skip
        The decoded moment, or a ``Skip`` when the header fails validation,
        the name is not a known moment or the samples run past the buffer.
        The record ``name`` is the canonical moment identifier.
    """
    try:
        reader.check(position, MOMENT_HEADER_SIZE)
        raw_name = reader.text_at(position + MOMENT_NAME_OFFSET, 3)
        gate_count = reader.u16_at(position + MOMENT_GATES_OFFSET)
        first_gate_m = reader.u16_at(position + MOMENT_FIRST_GATE_OFFSET)
        gate_spacing_m = reader.u16_at(position + MOMENT_GATE_SPACING_OFFSET)
        word_size = reader.u8_at(position + MOMENT_WORD_SIZE_OFFSET)
        scale = reader.f32_at(position + MOMENT_SCALE_OFFSET)
        offset = reader.f32_at(position + MOMENT_OFFSET_OFFSET)

        name = canonical_moment_name(raw_name)
        if name is None:
            return Skip(f"unknown moment {raw_name!r}")
        if not MIN_GATES <= gate_count <= MAX_GATES:
            return Skip(f"{name}: gate count {gate_count} out of range")
        if not MIN_GATE_SPACING_M <= gate_spacing_m <= MAX_GATE_SPACING_M:
            return Skip(f"{name}: gate spacing {gate_spacing_m} m out of range")
        if scale == 0 or np.isnan(scale):
            return Skip(f"{name}: invalid scale {scale}")
        dtype = _SAMPLE_DTYPES.get(word_size)
        if dtype is None:
            return Skip(f"{name}: unsupported word size {word_size}")

        raw = reader.array_at(position + MOMENT_HEADER_SIZE, gate_count, dtype)
    except OutOfBoundsError as e:
        return Skip(f"moment block at {position} truncated: {e}")

    return MomentRecord(
        name=name,
        gate_count=gate_count,
        first_gate=first_gate_m / 1000.0,
        gate_spacing=gate_spacing_m / 1000.0,
        data=convert_raw(raw, scale, offset),
    )
