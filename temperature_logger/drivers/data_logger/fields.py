# Conversions between the data logger's wire encodings and domain values
import logging
import math
from datetime import datetime
from enum import IntEnum
from typing import Optional, Tuple, Type

from .constants import (
    DATETIME_SIZE,
    DELAY_HEX_TO_SECONDS,
    DELAY_SECONDS_TO_HEX,
    NULL_DATETIME_BYTES,
    TEMPERATURE_SCALE,
)
from .exceptions import InvalidInput, InvalidResponse, UnknownWireCode

logger = logging.getLogger(__name__)


class WorkStatus(IntEnum):
    """ Recording state reported in the device info """

    not_started = 0
    start = 1
    stop = 2
    # The logger reports this itself; it is not a decode failure
    unknown = 3


class Permission(IntEnum):
    """ Whether the stop button / key tone may be used """

    permit = 0x13
    prohibit = 0x31


class TemperatureUnit(IntEnum):
    """ Display unit. Shares its codes with Permission but is never interchangeable with it """

    fahrenheit = 0x13
    celsius = 0x31


def decode_enum(enum_class: Type[IntEnum], code: int) -> IntEnum:
    """ Look up a wire code in one of the enumerations above

        Raises:
            UnknownWireCode if the code isn't defined for this enumeration
    """
    try:
        return enum_class(code)
    except ValueError:
        raise UnknownWireCode(
            f"0x{code:02X} is not a valid {enum_class.__name__} code. "
            f"Expected one of {[f'0x{member.value:02X}' for member in enum_class]}"
        )


def encode_enum(enum_class: Type[IntEnum], value: IntEnum) -> int:
    # IntEnums compare equal to ints, so insist on the member itself
    if not isinstance(value, enum_class):
        raise InvalidInput(f"{value!r} is not a {enum_class.__name__}")
    return value.value


def decode_delay_time(code: int) -> int:
    """ Convert a delay time wire code into seconds """
    try:
        return DELAY_HEX_TO_SECONDS[code]
    except KeyError:
        raise UnknownWireCode(f"0x{code:02X} is not a valid delay time code")


def encode_delay_time(seconds: int) -> int:
    """ Convert a delay time in seconds into its wire code. Only the tabulated delays exist """
    try:
        return DELAY_SECONDS_TO_HEX[seconds]
    except KeyError:
        raise InvalidInput(
            f"Delay time of {seconds} seconds is not supported. "
            f"Choose one of {sorted(DELAY_SECONDS_TO_HEX)}"
        )


def decode_datetime(datetime_bytes: bytes) -> Optional[datetime]:
    """ Parse a packed date field: big-endian 16 bit year, then month, day, hour, minute and second bytes

        Args:
            datetime_bytes: the 7 bytes of the field

        Returns:
            The naive local datetime, or None if the field holds the "no date" marker

        Raises:
            InvalidResponse if the field doesn't describe a real date
    """
    if len(datetime_bytes) != DATETIME_SIZE:
        raise InvalidResponse(
            f"Date fields are {DATETIME_SIZE} bytes, received {len(datetime_bytes)}"
        )

    if datetime_bytes == NULL_DATETIME_BYTES:
        return None

    year = int.from_bytes(datetime_bytes[:2], byteorder="big")
    try:
        return datetime(year, *datetime_bytes[2:])
    except ValueError as e:
        raise InvalidResponse(f"Unable to parse date bytes {datetime_bytes!r}: {e}")


def encode_datetime(datetime_: Optional[datetime]) -> bytes:
    if datetime_ is None:
        return NULL_DATETIME_BYTES

    return datetime_.year.to_bytes(2, byteorder="big") + bytes(
        [
            datetime_.month,
            datetime_.day,
            datetime_.hour,
            datetime_.minute,
            datetime_.second,
        ]
    )


def decode_scaled(data_bytes: bytes, signed: bool = True) -> float:
    """ Parse a big-endian fixed point value sent in tenths of a degree

        e.g. a calibration of 20.0 is sent as the single byte 0xC8 (200)
    """
    return int.from_bytes(data_bytes, byteorder="big", signed=signed) / TEMPERATURE_SCALE


def encode_scaled(value: float, byte_count: int, signed: bool = True) -> bytes:
    """ Encode a value as tenths of a degree, truncated to an integer

        Args:
            value: the value in degrees
            byte_count: width of the field on the wire
            signed: whether the field is two's complement

        Returns:
            big-endian bytes for the field

        Raises:
            InvalidInput if the scaled value doesn't fit in the field
    """
    if not math.isfinite(value):
        raise InvalidInput(f"{value} can't be sent to the logger")

    # Round away float noise first so e.g. 2.3 doesn't truncate to 22
    scaled = int(round(value * TEMPERATURE_SCALE, 6))
    try:
        return scaled.to_bytes(byte_count, byteorder="big", signed=signed)
    except OverflowError:
        raise InvalidInput(
            f"{value} doesn't fit in a {byte_count} byte "
            f"{'signed' if signed else 'unsigned'} field of tenths"
        )


def split_interval(seconds: int) -> Tuple[int, int, int]:
    """ Split an interval in seconds into the (hours, minutes, seconds) triple sent on the wire """
    if not math.isfinite(seconds):
        raise InvalidInput(f"Interval of {seconds} seconds can't be sent to the logger")

    hours, remainder = divmod(int(seconds), 3600)
    minutes, seconds = divmod(remainder, 60)

    if not 0 <= hours <= 0xFF:
        raise InvalidInput(f"Interval of {hours} hours can't be sent to the logger")

    return hours, minutes, seconds


def combine_interval(hours: int, minutes: int, seconds: int) -> int:
    return hours * 3600 + minutes * 60 + seconds


def decode_text(text_bytes: bytes) -> str:
    # Unused space is padded with NULs (or spaces on older firmware)
    return text_bytes.rstrip(b"\x00 ").decode("ascii", errors="replace")


def encode_text(text: str, size: int, truncate: bool = True) -> bytes:
    """ Encode a text field, zero padded to its fixed size

        Args:
            text: the text to send
            size: the number of bytes the field occupies
            truncate: if True (default), text longer than the field is cut short.
                If False, it is an error.

        Raises:
            InvalidInput if the text isn't ASCII, or if it is too long and truncate is False
    """
    try:
        text_bytes = text.encode("ascii")
    except UnicodeEncodeError:
        raise InvalidInput(f"{text!r} can't be sent to the logger: only ASCII is supported")

    if len(text_bytes) > size:
        if not truncate:
            raise InvalidInput(f"{text!r} is longer than the {size} byte field")
        logger.warning(f"Truncating {text!r} to fit the {size} byte field")
        text_bytes = text_bytes[:size]

    return text_bytes.ljust(size, b"\x00")
