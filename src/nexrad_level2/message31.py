"""
Decoding of message 31 (digital radar data, generic format) into rays.

Layout of the fields used here, relative to the message body start::

    0   station id          4 chars
    4   collection time     uint32, ms of day
    8   Julian day          uint16
    12  azimuth angle       float32 (or uint32 / 8, see decode_azimuth)
    22  elevation number    uint8
    24  elevation angle     float32
    30  data block count    uint16
    32  block pointers      uint32 each, relative to the body start
"""

import logging
import math
from typing import Dict, Optional, Tuple, Union

from .constants import (
    AZIMUTH_INT_SCALE,
    AZIMUTH_MAX,
    AZIMUTH_MIN,
    BLOCK_TYPE_MOMENT,
    BLOCK_TYPE_VOLUME,
    ELEVATION_MAX,
    ELEVATION_MIN,
    M31_AZIMUTH_OFFSET,
    M31_BLOCK_COUNT_OFFSET,
    M31_ELEVATION_NUMBER_OFFSET,
    M31_ELEVATION_OFFSET,
    M31_JULIAN_OFFSET,
    M31_POINTERS_OFFSET,
    M31_STATION_OFFSET,
    M31_TIME_OFFSET,
    MAX_DATA_BLOCKS,
    MIN_DATA_BLOCKS,
    VOL_HEIGHT_OFFSET,
    VOL_LATITUDE_OFFSET,
    VOL_LONGITUDE_OFFSET,
    VOL_VCP_OFFSET,
    VOLUME_BLOCK_NAME,
)
from .models import MomentRecord, Ray, SiteLocation
from .moments import decode_moment_block
from .reader import ByteReader, OutOfBoundsError
from .result import Skip, is_skip
from .utils import julian_to_datetime, strip_padding

logger = logging.getLogger(__name__)


def _valid_azimuth(value: float) -> bool:
    return not math.isnan(value) and AZIMUTH_MIN <= value < AZIMUTH_MAX


def scaled_integer_azimuth(raw: bytes) -> float:
    """Read 4 bytes as an unsigned 32-bit integer in eighths of a degree."""
    return ByteReader(raw).u32_at(0) / AZIMUTH_INT_SCALE


def decode_azimuth(raw: bytes) -> Optional[float]:
    """
    Decode a 4-byte azimuth field.

    The bytes are read as a big-endian IEEE float first. If that is NaN or
    outside [0, 360), the same bytes are read as an unsigned 32-bit integer
    divided by 8, an alternate scaled encoding seen in some record variants.

    Returns
    -------
    float or None
        The azimuth in degrees, or None when neither reading is in range

    Notes
    -----
    Any bit pattern whose float reading is negative, NaN or >= 360 is at
    least 0x43B40000 as an integer, so with IEEE floats the integer reading
    never lands in range either. The fallback is kept for record variants
    that may not hold IEEE floats here.
    """
    azimuth = ByteReader(raw).f32_at(0)
    if _valid_azimuth(azimuth):
        return azimuth
    azimuth = scaled_integer_azimuth(raw)
    if _valid_azimuth(azimuth):
        return azimuth
    return None


def decode_volume_block(reader: ByteReader, position: int) -> Tuple[int, Optional[SiteLocation]]:
    """
    Read the VCP number and site location from a volume data block.

    Returns ``(vcp, site)``; ``vcp`` is 0 when the field is absent.

    VCP is the u16 at offset 40 of the RVOL block, its position in the
    archive layout, rather than offset 16 of any "R" block, which holds the
    site height.
    """
    site = None
    if len(reader) >= position + VOL_HEIGHT_OFFSET + 2:
        site = SiteLocation(
            latitude=reader.f32_at(position + VOL_LATITUDE_OFFSET),
            longitude=reader.f32_at(position + VOL_LONGITUDE_OFFSET),
            height=float(reader.i16_at(position + VOL_HEIGHT_OFFSET)),
        )
    vcp = 0
    if len(reader) >= position + VOL_VCP_OFFSET + 2:
        vcp = reader.u16_at(position + VOL_VCP_OFFSET)
    return vcp, site


def decode_message31(body: ByteReader) -> Union[Ray, Skip]:
    """
    Decode one message 31 body into a ``Ray``.

    Parameters
    ----------
    body : ByteReader
        Reader positioned over exactly the message body (after the 16-byte
        message header). Block pointers are relative to its start.

    Returns
    -------
    Ray or Skip
        ``Skip`` when the station id does not start with an uppercase letter,
        the azimuth, elevation or block count is out of range, no recognized
        moment was decoded, or any read ran past the body.
    """
    try:
        station = body.text_at(M31_STATION_OFFSET, 4)
        if not ("A" <= station[0] <= "Z"):
            return Skip(f"invalid station id {station!r}")

        collection_ms = body.u32_at(M31_TIME_OFFSET)
        julian_day = body.u16_at(M31_JULIAN_OFFSET)

        azimuth = decode_azimuth(body.bytes_at(M31_AZIMUTH_OFFSET, 4))
        if azimuth is None:
            return Skip("azimuth out of range")

        sweep_number = body.u8_at(M31_ELEVATION_NUMBER_OFFSET)
        elevation = body.f32_at(M31_ELEVATION_OFFSET)
        if math.isnan(elevation) or not ELEVATION_MIN <= elevation <= ELEVATION_MAX:
            return Skip(f"elevation {elevation} out of range")

        block_count = body.u16_at(M31_BLOCK_COUNT_OFFSET)
        if not MIN_DATA_BLOCKS <= block_count <= MAX_DATA_BLOCKS:
            return Skip(f"data block count {block_count} out of range")

        pointers = [body.u32_at(M31_POINTERS_OFFSET + 4 * i) for i in range(block_count)]

        moments: Dict[str, MomentRecord] = {}
        vcp = 0
        site = None
        for pointer in pointers:
            if pointer == 0 or pointer + 4 > len(body):
                continue
            block_type = body.u8_at(pointer)
            if block_type == BLOCK_TYPE_VOLUME:
                if strip_padding(body.text_at(pointer + 1, 3)) != VOLUME_BLOCK_NAME:
                    continue
                block_vcp, block_site = decode_volume_block(body, pointer)
                if block_vcp:
                    vcp = block_vcp
                if block_site is not None:
                    site = block_site
            elif block_type == BLOCK_TYPE_MOMENT:
                moment = decode_moment_block(body, pointer)
                if is_skip(moment):
                    logger.debug(f"Dropped moment block: {moment.reason}")
                    continue
                moments[moment.name] = moment
    except OutOfBoundsError as e:
        return Skip(f"message 31 truncated: {e}")

    if not moments:
        return Skip("no recognized moments")

    return Ray(
        azimuth=azimuth,
        elevation=elevation,
        sweep_number=sweep_number,
        moments=moments,
        station_id=strip_padding(station) or None,
        timestamp=julian_to_datetime(julian_day, collection_ms),
        vcp=vcp,
        site=site,
    )
