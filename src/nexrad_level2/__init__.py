"""
nexrad_level2 - Decoder for NEXRAD Level 2 style radar volume archives
"""

from .volume import RadarVolume, read_level2, read_level2_file, read_volume_header
from .models import DecodeStats, MomentRecord, Ray, SiteLocation, Sweep, SweepData
from .errors import Level2DecodeError, VolumeHeaderError, EmptyVolumeError
from .reader import ByteReader, OutOfBoundsError
from .result import Skip, is_skip
from .records import iter_records, decompress_record
from .messages import Message, iter_messages, iter_rays
from .message31 import decode_message31, decode_azimuth, scaled_integer_azimuth
from .moments import decode_moment_block, convert_raw, canonical_moment_name
from .constants import MOMENT_MAP, MOMENT_DESCRIPTIONS, MOMENT_UNITS

__version__ = "0.1.0"

__all__ = [
    # Volume
    "RadarVolume",
    "read_level2",
    "read_level2_file",
    "read_volume_header",
    # Data classes
    "DecodeStats",
    "MomentRecord",
    "Ray",
    "SiteLocation",
    "Sweep",
    "SweepData",
    # Errors
    "Level2DecodeError",
    "VolumeHeaderError",
    "EmptyVolumeError",
    "OutOfBoundsError",
    # Low level decoding
    "ByteReader",
    "Skip",
    "is_skip",
    "iter_records",
    "decompress_record",
    "Message",
    "iter_messages",
    "iter_rays",
    "decode_message31",
    "decode_azimuth",
    "scaled_integer_azimuth",
    "decode_moment_block",
    "convert_raw",
    "canonical_moment_name",
    # Constants
    "MOMENT_MAP",
    "MOMENT_DESCRIPTIONS",
    "MOMENT_UNITS",
]
