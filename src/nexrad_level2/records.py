"""
Splitting of the archive body into (optionally) compressed records.

After the 24-byte volume header the archive is a sequence of records, each
prefixed with a signed 32-bit size:

- size == 0: end of data
- size > 0: ``size`` bytes of compressed data follow
- size < 0: ``abs(size)`` bytes of uncompressed data follow
"""

import bz2
import logging
from typing import Callable, Iterator, Optional

from .constants import BZIP2_MAGIC, RECORD_SIZE_FIELD
from .models import DecodeStats
from .reader import ByteReader, BytesLike

logger = logging.getLogger(__name__)

Decompressor = Callable[[bytes], Optional[bytes]]


def decompress_record(chunk: BytesLike, decompress: Optional[Decompressor] = None) -> Optional[bytes]:
    """
    Decompress one record.

    A chunk starting with the bzip2 signature is passed to ``decompress``
    (``bz2.decompress`` by default). Any other chunk is returned unchanged.

    Raises
    ------
    Exception
        Whatever the decompressor raises for corrupt data
    """
    if decompress is None:
        decompress = bz2.decompress
    data = bytes(chunk)
    if data[:2] == BZIP2_MAGIC:
        return decompress(data)
    return data


def iter_records(
    data: BytesLike,
    decompress: Optional[Decompressor] = None,
    stats: Optional[DecodeStats] = None,
) -> Iterator[bytes]:
    """
    Yield the decompressed payload of each record in ``data``.

    Parameters
    ----------
    data : bytes-like
        Archive contents following the volume header
    decompress : callable, optional
        Decompression routine for compressed records (default: bz2)
    stats : DecodeStats, optional
        Counters updated while scanning

    Yields
    ------
    bytes
        One payload per record. Records that fail to decompress, either by
        raising or by returning None, are skipped and scanning continues at
        the next record; a record running past the end of ``data`` ends the
        scan.
    """
    if stats is None:
        stats = DecodeStats()
    reader = ByteReader(data)

    while reader.remaining >= RECORD_SIZE_FIELD:
        record_size = reader.read_i32()
        if record_size == 0:
            break

        compressed = record_size > 0
        length = abs(record_size)
        if length > reader.remaining:
            logger.warning(
                f"Record at offset {reader.offset - RECORD_SIZE_FIELD} declares "
                f"{length} bytes but only {reader.remaining} remain, stopping"
            )
            stats.truncated = True
            break

        chunk = reader.read_bytes(length)
        stats.records += 1

        if not compressed:
            yield bytes(chunk)
            continue

        stats.compressed_records += 1
        try:
            payload = decompress_record(chunk, decompress)
        except Exception as e:
            stats.failed_decompressions += 1
            logger.warning(f"Dropping record {stats.records}: decompression failed ({e})")
            continue
        if payload is None:
            stats.failed_decompressions += 1
            logger.warning(f"Dropping record {stats.records}: decompressor returned no data")
            continue
        yield payload
