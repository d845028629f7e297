"""
Framing of the message stream inside one decompressed record.

Each message is a 12-byte legacy framing field, a 16-byte message header and
the message body. The header's first field is the message size in halfwords,
header included. A size outside [16, 20000] bytes means the scanner has lost
sync; it then moves forward by a single byte and tries again.
"""

import logging
from typing import Iterator, NamedTuple, Optional

from .constants import (
    CTM_HEADER_SIZE,
    MAX_MESSAGE_SIZE,
    MSG_HEADER_SIZE,
    MSG_SIZE_OFFSET,
    MSG_TYPE_DIGITAL_RADAR_DATA,
    MSG_TYPE_OFFSET,
)
from .message31 import decode_message31
from .models import DecodeStats, Ray
from .reader import ByteReader, BytesLike
from .result import is_skip

logger = logging.getLogger(__name__)


class Message(NamedTuple):
    """A framed message: its type and a reader over its body."""

    offset: int
    msg_type: int
    body: ByteReader


def iter_messages(segment: BytesLike, stats: Optional[DecodeStats] = None) -> Iterator[Message]:
    """
    Yield every well-framed message in a decompressed record.

    Parameters
    ----------
    segment : bytes-like
        One decompressed record
    stats : DecodeStats, optional
        Counters updated while scanning

    Yields
    ------
    Message
        ``offset`` is the position of the framing field in ``segment``. The
        body reader is clipped to the end of the segment when the declared
        size runs past it.
    """
    if stats is None:
        stats = DecodeStats()
    reader = ByteReader(segment)
    length = len(reader)
    pos = 0
    skipped = 0

    while pos + CTM_HEADER_SIZE + MSG_HEADER_SIZE <= length:
        header = pos + CTM_HEADER_SIZE
        size_bytes = reader.u16_at(header + MSG_SIZE_OFFSET) * 2
        msg_type = reader.u8_at(header + MSG_TYPE_OFFSET)

        if size_bytes < MSG_HEADER_SIZE or size_bytes > MAX_MESSAGE_SIZE:
            stats.resyncs += 1
            skipped += 1
            pos += 1
            continue

        if skipped:
            logger.debug(f"Resynchronized at offset {pos} after skipping {skipped} bytes")
            skipped = 0

        body_start = header + MSG_HEADER_SIZE
        body_end = min(header + size_bytes, length)
        stats.messages += 1
        yield Message(pos, msg_type, reader.sub(body_start, body_end - body_start))

        pos += CTM_HEADER_SIZE + size_bytes


def iter_rays(segment: BytesLike, stats: Optional[DecodeStats] = None) -> Iterator[Ray]:
    """
    Yield the rays decoded from every message 31 in a decompressed record.

    Other message types are skipped. Rays that fail to decode are dropped.
    """
    if stats is None:
        stats = DecodeStats()
    for message in iter_messages(segment, stats):
        if message.msg_type != MSG_TYPE_DIGITAL_RADAR_DATA:
            continue
        stats.radial_messages += 1
        ray = decode_message31(message.body)
        if is_skip(ray):
            stats.rays_rejected += 1
            logger.debug(f"Dropped ray at offset {message.offset}: {ray.reason}")
            continue
        stats.rays_accepted += 1
        yield ray
