# Layouts of the data logger's multi-field requests and responses
import collections
import struct
from typing import List

from .constants import (
    DEVICE_IDENTIFIER_SIZE,
    TEMPERATURE_SCALE,
    USER_INFO_SIZE,
    WRITE_PARAMS_RESERVED_SIZE,
)
from .exceptions import InvalidInput, InvalidResponse
from .fields import (
    Permission,
    TemperatureUnit,
    WorkStatus,
    combine_interval,
    decode_datetime,
    decode_delay_time,
    decode_enum,
    decode_scaled,
    decode_text,
    encode_delay_time,
    encode_enum,
    encode_scaled,
    split_interval,
)


DeviceInfo = collections.namedtuple(
    "DeviceInfo",
    [
        "station_number",
        "model_number",
        "sample_interval",  # seconds
        "upper_limit",  # degrees
        "lower_limit",  # degrees
        "last_online",  # datetime or None
        "work_status",  # WorkStatus
        "start_time",  # datetime or None
        "stop_button",  # Permission
        "record_count",
        "current_time",  # datetime or None
        "user_info",
        "device_number",
        "delay_time",  # seconds
        "tone_set",  # Permission
        "alarm",  # raw byte
        "temperature_unit",  # TemperatureUnit
        "temperature_calibration",  # degrees
    ],
)

DataHeader = collections.namedtuple(
    "DataHeader", ["station_number", "total_count", "start_time"]
)


# Device info response, checksum already stripped. "x" bytes are unused.
_DEVICE_INFO_FORMAT = (
    ">"
    "x"  # set number
    "B"  # station number
    "x"
    "B"  # model number
    "x"
    "3B"  # sample interval hours, minutes, seconds
    "h"  # upper limit
    "h"  # lower limit
    "7s"  # last online
    "B"  # work status
    "7s"  # start time
    "B"  # stop button
    "x"
    "H"  # record count
    "7s"  # current time
    f"{USER_INFO_SIZE}s"
    f"{DEVICE_IDENTIFIER_SIZE}s"
    "B"  # delay time
    "B"  # tone set
    "B"  # alarm
    "B"  # temperature unit
    "B"  # temperature calibration
    "6x"
)
DEVICE_INFO_DATA_SIZE = struct.calcsize(_DEVICE_INFO_FORMAT)

_DATA_HEADER_FORMAT = ">BH7s"
DATA_HEADER_DATA_SIZE = struct.calcsize(_DATA_HEADER_FORMAT)


def _validate_size(data_bytes: bytes, expected_size: int, name: str):
    if len(data_bytes) != expected_size:
        raise InvalidResponse(
            f"{name} response actual size ({len(data_bytes)}) != expected ({expected_size})"
        )


def parse_device_info(data_bytes: bytes) -> DeviceInfo:
    """ Parse the logger's response to a "Read Device Info" command (checksum already stripped)
    """
    _validate_size(data_bytes, DEVICE_INFO_DATA_SIZE, "Device info")

    (
        station_number,
        model_number,
        interval_hours,
        interval_minutes,
        interval_seconds,
        upper_limit,
        lower_limit,
        last_online,
        work_status,
        start_time,
        stop_button,
        record_count,
        current_time,
        user_info,
        device_number,
        delay_time,
        tone_set,
        alarm,
        temperature_unit,
        temperature_calibration,
    ) = struct.unpack(_DEVICE_INFO_FORMAT, data_bytes)

    return DeviceInfo(
        station_number=station_number,
        model_number=model_number,
        sample_interval=combine_interval(
            interval_hours, interval_minutes, interval_seconds
        ),
        upper_limit=upper_limit / TEMPERATURE_SCALE,
        lower_limit=lower_limit / TEMPERATURE_SCALE,
        last_online=decode_datetime(last_online),
        work_status=decode_enum(WorkStatus, work_status),
        start_time=decode_datetime(start_time),
        stop_button=decode_enum(Permission, stop_button),
        record_count=record_count,
        current_time=decode_datetime(current_time),
        user_info=decode_text(user_info),
        device_number=decode_text(device_number),
        delay_time=decode_delay_time(delay_time),
        tone_set=decode_enum(Permission, tone_set),
        alarm=alarm,
        temperature_unit=decode_enum(TemperatureUnit, temperature_unit),
        temperature_calibration=decode_scaled(
            bytes([temperature_calibration]), signed=False
        ),
    )


def construct_device_params_data(
    device_info: DeviceInfo, new_station_number: int = None
) -> bytes:
    """ Construct the data bytes of a "Write Device Params" command

        Args:
            device_info: the desired configuration. Only the configurable fields are used.
            new_station_number: if provided, the station number the logger should answer to
                from now on. Default: keep device_info.station_number

        Returns:
            data bytes to follow the command bytes
    """
    if new_station_number is None:
        new_station_number = device_info.station_number

    for name, value in [
        ("station number", new_station_number),
        ("alarm", device_info.alarm),
    ]:
        if not 0 <= value <= 0xFF:
            raise InvalidInput(f"{name} must fit in one byte, got {value}")

    return (
        bytes(split_interval(device_info.sample_interval))
        + encode_scaled(device_info.upper_limit, byte_count=2)
        + encode_scaled(device_info.lower_limit, byte_count=2)
        + bytes(
            [
                new_station_number,
                encode_enum(Permission, device_info.stop_button),
                encode_delay_time(device_info.delay_time),
                encode_enum(Permission, device_info.tone_set),
                device_info.alarm,
                encode_enum(TemperatureUnit, device_info.temperature_unit),
            ]
        )
        + encode_scaled(
            device_info.temperature_calibration, byte_count=1, signed=False
        )
        + bytes(WRITE_PARAMS_RESERVED_SIZE)
    )


def parse_data_header(data_bytes: bytes) -> DataHeader:
    """ Parse the logger's response to a "Read Data Header" command (checksum already stripped)
    """
    _validate_size(data_bytes, DATA_HEADER_DATA_SIZE, "Data header")

    station_number, total_count, start_time = struct.unpack(
        _DATA_HEADER_FORMAT, data_bytes
    )
    return DataHeader(
        station_number=station_number,
        total_count=total_count,
        start_time=decode_datetime(start_time),
    )


def parse_data_page(data_bytes: bytes) -> List[float]:
    """ Parse the logger's response to a "Read Data Page" command (checksum already stripped)

        The page is one header byte followed by any number of big-endian signed 16 bit
        temperatures in tenths of a degree. The number of temperatures is only known from
        the length of the response.
    """
    temperature_bytes = data_bytes[1:]

    if len(temperature_bytes) % 2:
        raise InvalidResponse(
            f"Data page has an odd number ({len(temperature_bytes)}) of temperature bytes"
        )

    return [
        decode_scaled(temperature_bytes[i : i + 2])
        for i in range(0, len(temperature_bytes), 2)
    ]
