# Constants for the serial protocol of the standalone temperature data logger

# Default protocol settings. The logger only talks 8N1.
DEFAULT_BAUD_RATE = 115200

# The line is opened with a 5 decisecond read ceiling
READ_TIMEOUT_SECONDS = 0.5

# Device info is read with a fixed, broadcast-style request
READ_DEVICE_INFO_REQUEST = bytes([0xCC, 0x00, 0x06, 0x00])

# Every other request starts with this prefix, followed by the station number
STATION_COMMAND_PREFIX = 0x33

COMMAND_NAME_TO_HEX = {
    "Read Data Header": 0x01,
    "Read Data Page": 0x02,
    "Write Device Params": 0x05,
    "Set Device Time": 0x07,
    "Set User Info": 0x09,
    "Set Device Identifier": 0x0B,
}

# Response sizes, checksum included
DEVICE_INFO_RESPONSE_SIZE = 160
DATA_HEADER_RESPONSE_SIZE = 11
ACKNOWLEDGEMENT_RESPONSE_SIZE = 3

# Page responses carry no length field. This comfortably exceeds any page the
# logger sends; the read ends at the timeout.
DATA_PAGE_MAX_RESPONSE_SIZE = 4096

USER_INFO_SIZE = 100
DEVICE_IDENTIFIER_SIZE = 10
WRITE_PARAMS_RESERVED_SIZE = 3

DATETIME_SIZE = 7

# A date field holding year 65535 and 0xFF for everything else means "no date"
NULL_DATETIME_BYTES = b"\xff" * DATETIME_SIZE

# Limits, calibration and samples are sent as tenths of a degree
TEMPERATURE_SCALE = 10

# Delay time (seconds) <-> wire code. Not linear.
DELAY_SECONDS_TO_HEX = {
    0: 0x00,
    30 * 60: 0x01,
    60 * 60: 0x10,
    90 * 60: 0x11,
    120 * 60: 0x20,
    150 * 60: 0x21,
}
DELAY_HEX_TO_SECONDS = {code: seconds for seconds, code in DELAY_SECONDS_TO_HEX.items()}
