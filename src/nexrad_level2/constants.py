"""
Constants for the Level 2 archive layout, validation limits and moment names.
"""

# Archive layout (bytes)
VOLUME_HEADER_SIZE = 24
CTM_HEADER_SIZE = 12        # legacy framing field ahead of every message
MSG_HEADER_SIZE = 16
RECORD_SIZE_FIELD = 4
MAX_MESSAGE_SIZE = 20000

# Volume header offsets
VOLUME_JULIAN_OFFSET = 12
VOLUME_MS_OFFSET = 14
VOLUME_STATION_OFFSET = 20

# Message header offsets (relative to the header start)
MSG_SIZE_OFFSET = 0
MSG_TYPE_OFFSET = 3

MSG_TYPE_DIGITAL_RADAR_DATA = 31

# Compression signature of a bzip2 stream
BZIP2_MAGIC = b"BZ"

# Message 31 field offsets (relative to the message body start)
M31_STATION_OFFSET = 0
M31_TIME_OFFSET = 4
M31_JULIAN_OFFSET = 8
M31_AZIMUTH_OFFSET = 12
M31_ELEVATION_NUMBER_OFFSET = 22
M31_ELEVATION_OFFSET = 24
M31_BLOCK_COUNT_OFFSET = 30
M31_POINTERS_OFFSET = 32

# Data block identifiers
BLOCK_TYPE_VOLUME = ord("R")
BLOCK_TYPE_MOMENT = ord("D")
VOLUME_BLOCK_NAME = "VOL"

# Volume data block offsets (relative to the block start)
VOL_LATITUDE_OFFSET = 8
VOL_LONGITUDE_OFFSET = 12
VOL_HEIGHT_OFFSET = 16
VOL_VCP_OFFSET = 40

# Moment data block offsets (relative to the block start)
MOMENT_NAME_OFFSET = 1
MOMENT_GATES_OFFSET = 8
MOMENT_FIRST_GATE_OFFSET = 10
MOMENT_GATE_SPACING_OFFSET = 12
MOMENT_WORD_SIZE_OFFSET = 19
MOMENT_SCALE_OFFSET = 20
MOMENT_OFFSET_OFFSET = 24
MOMENT_HEADER_SIZE = 28

# Validation limits
AZIMUTH_MIN = 0.0
AZIMUTH_MAX = 360.0         # exclusive
AZIMUTH_INT_SCALE = 8.0
ELEVATION_MIN = -10.0
ELEVATION_MAX = 90.0
MIN_DATA_BLOCKS = 1
MAX_DATA_BLOCKS = 15
MIN_GATES = 1
MAX_GATES = 2000
MIN_GATE_SPACING_M = 50
MAX_GATE_SPACING_M = 4000
WORD_SIZES = (8, 16)

# Raw values 0 (below threshold) and 1 (range folded) carry no data
RAW_NO_DATA_LIMIT = 2

# Raw block names mapped to canonical moment identifiers
MOMENT_MAP = {
    "REF": "REF",
    "VEL": "VEL",
    "SW": "SW",
    "ZDR": "ZDR",
    "PHI": "PHI",
    "RHO": "RHO",
    "CFP": "CFP",
}

# Moment descriptions
MOMENT_DESCRIPTIONS = {
    "REF": "Reflectivity",
    "VEL": "Radial velocity",
    "SW": "Spectrum width",
    "ZDR": "Differential reflectivity",
    "PHI": "Differential phase",
    "RHO": "Correlation coefficient",
    "CFP": "Clutter filter power removed",
}

# Moment units
MOMENT_UNITS = {
    "REF": "dBZ",
    "VEL": "m/s",
    "SW": "m/s",
    "ZDR": "dB",
    "PHI": "deg",
    "RHO": "",
    "CFP": "dB",
}
