"""
Builders for synthetic Level 2 archives used by the tests.

Every function returns raw bytes laid out the way the decoder expects, so
tests can assemble minimal volumes and corrupt them selectively.
"""
import bz2
import struct

import numpy as np


def volume_header(station=b"KTLX", julian=0, ms=0):
    """24-byte volume header."""
    header = b"AR2V0006." + b"001" + struct.pack(">HI", julian, ms) + b"\x00\x00" + station
    assert len(header) == 24
    return header


def moment_block(name=b"REF", values=(2, 3, 4), first_gate_m=2000, spacing_m=250,
                 word_size=8, scale=1.0, offset=0.0, gate_count=None):
    """Generic moment data block with its samples."""
    if gate_count is None:
        gate_count = len(values)
    header = (
        b"D" + name.ljust(3, b"\x00")
        + struct.pack(">I", 0)
        + struct.pack(">HHH", gate_count, first_gate_m, spacing_m)
        + struct.pack(">hh", 0, 0)
        + struct.pack(">BB", 0, word_size)
        + struct.pack(">ff", scale, offset)
    )
    assert len(header) == 28
    dtype = ">u1" if word_size == 8 else ">u2"
    return header + np.asarray(values, dtype=dtype).tobytes()


def volume_block(vcp=212, latitude=35.333, longitude=-97.278, height=370):
    """Volume data block (RVOL)."""
    block = (
        b"RVOL"
        + struct.pack(">HBB", 44, 1, 0)
        + struct.pack(">ff", latitude, longitude)
        + struct.pack(">hH", height, 0)
        + struct.pack(">fffff", 0.0, 0.0, 0.0, 0.0, 0.0)
        + struct.pack(">HH", vcp, 0)
    )
    assert len(block) == 44
    return block


def message31_body(blocks, azimuth=45.0, elevation=0.5, sweep_number=1, station=b"KTLX",
                   julian=0, ms=0, azimuth_bytes=None, block_count=None, pointers=None):
    """
    Message 31 body with block pointers computed from ``blocks``.

    ``azimuth_bytes`` overrides the encoded azimuth field, ``block_count`` the
    declared count and ``pointers`` the pointer table.
    """
    n = len(blocks)
    if azimuth_bytes is None:
        azimuth_bytes = struct.pack(">f", azimuth)
    header = (
        station
        + struct.pack(">IHH", ms, julian, 0)
        + azimuth_bytes
        + struct.pack(">BBHBB", 0, 0, 0, 0, 0)
        + struct.pack(">BB", sweep_number, 0)
        + struct.pack(">f", elevation)
        + struct.pack(">BB", 0, 0)
        + struct.pack(">H", n if block_count is None else block_count)
    )
    assert len(header) == 32

    if pointers is None:
        pointers = []
        pos = 32 + 4 * n
        for block in blocks:
            pointers.append(pos)
            pos += len(block)
    body = header + b"".join(struct.pack(">I", p) for p in pointers) + b"".join(blocks)
    if len(body) % 2:
        body += b"\x00"
    return body


def message(body, msg_type=31, size_halfwords=None):
    """Framing field, 16-byte message header and body."""
    if len(body) % 2:
        body += b"\x00"
    if size_halfwords is None:
        size_halfwords = (16 + len(body)) // 2
    header = struct.pack(">HBBHHIHH", size_halfwords, 0, msg_type, 0, 0, 0, 1, 1)
    assert len(header) == 16
    return b"\x00" * 12 + header + body


def ray_message(values=(2, 3, 4), moment=b"REF", **kwargs):
    """A complete type 31 message holding one moment."""
    return message(message31_body([moment_block(name=moment, values=values)], **kwargs))


def record(payload, compress=False):
    """Size-prefixed record; compressed with bz2 when ``compress``."""
    if compress:
        data = bz2.compress(payload)
        return struct.pack(">i", len(data)) + data
    return struct.pack(">i", -len(payload)) + payload


def archive(*records, header=None):
    """Volume header followed by records."""
    if header is None:
        header = volume_header()
    return header + b"".join(records)


def sweep_messages(sweep_number, azimuths, elevation=0.5, values=(10, 20, 30, 40)):
    """One message per azimuth, all in one sweep."""
    return b"".join(
        ray_message(values=values, azimuth=az, elevation=elevation, sweep_number=sweep_number)
        for az in azimuths
    )
