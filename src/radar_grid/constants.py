"""
Defaults for polar to Cartesian resampling.
"""

# Side length of the square output grid in pixels
DEFAULT_IMAGE_SIZE = 2000

# Byte budget of the resampling geometry cache
GEOMETRY_CACHE_BYTES = 256 * 1024 * 1024

# Value of pixels with no polar sample
FILL_VALUE = float("nan")
