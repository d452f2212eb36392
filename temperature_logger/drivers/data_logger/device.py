"""
A driver for a standalone temperature data logger speaking a fixed-layout binary protocol
over a serial line.

The protocol is strictly request/response and carries no correlation IDs, so only one
request may be outstanding on a line at a time. The logger answers within its read timeout
or not at all; an empty read is retried after flushing the line, and a logger that stays
silent through every attempt is reported by returning None.

Requests other than "Read Device Info" are addressed to a station number:

    0x33        Prefix
    station     Station number the logger answers to
    command     See COMMAND_NAME_TO_HEX
    argument    0x00, or the page index for "Read Data Page"

Set commands are acknowledged with a 3 byte frame.
"""
import logging
import threading
from datetime import datetime
from typing import List, Optional

from temperature_logger.retry import retry_on_empty_response

from .constants import (
    ACKNOWLEDGEMENT_RESPONSE_SIZE,
    COMMAND_NAME_TO_HEX,
    DATA_HEADER_RESPONSE_SIZE,
    DATA_PAGE_MAX_RESPONSE_SIZE,
    DEVICE_IDENTIFIER_SIZE,
    DEVICE_INFO_RESPONSE_SIZE,
    READ_DEVICE_INFO_REQUEST,
    STATION_COMMAND_PREFIX,
    USER_INFO_SIZE,
)
from .exceptions import InvalidInput, InvalidResponse
from .fields import encode_datetime, encode_text
from .packet import decode_frame, encode_frame, format_bytes
from .records import (
    DataHeader,
    DeviceInfo,
    construct_device_params_data,
    parse_data_header,
    parse_data_page,
    parse_device_info,
)

logger = logging.getLogger(__name__)


def _station_command_bytes(
    command_name: str, station_number: int, argument: int = 0x00
) -> bytes:
    for name, value in [("station number", station_number), ("argument", argument)]:
        if not 0 <= value <= 0xFF:
            raise InvalidInput(f"{name} must fit in one byte, got {value}")

    return bytes(
        [
            STATION_COMMAND_PREFIX,
            station_number,
            COMMAND_NAME_TO_HEX[command_name],
            argument,
        ]
    )


class DataLogger:
    """ Commands for one data logger on an open transport

        Args:
            transport: an open transport (see SerialTransport), owned by this DataLogger for
                the rest of the session. Must provide write(bytes), read(max_bytes) and flush().
            retries: number of times to retry a command that got no response
    """

    def __init__(self, transport, retries: int = 1):
        self._transport = transport
        self._retries = retries
        # Held for every exchange; re-entrant so composite operations can hold it throughout
        self.lock = threading.RLock()

    def _write_and_read(self, request: bytes, max_response_bytes: int) -> bytes:
        self._transport.write(request)
        return self._transport.read(max_response_bytes)

    def _flush_transport(self):
        logger.debug("Flushing transport before retrying")
        self._transport.flush()

    def _send_command(
        self, command_bytes: bytes, data_bytes: bytes, max_response_bytes: int
    ) -> Optional[bytes]:
        """ Send a command frame and collect the response frame, retrying if nothing comes back

            Returns:
                The response frame with its checksum validated and stripped,
                or None if the logger didn't respond within the retry budget

            Raises:
                ChecksumMismatch if the response is corrupted
        """
        request = encode_frame(command_bytes, data_bytes)
        write_and_read = retry_on_empty_response(
            self._retries, on_retry=self._flush_transport
        )(self._write_and_read)

        with self.lock:
            logger.debug(f"Sending frame: {format_bytes(request)}")
            response = write_and_read(request, max_response_bytes)

        if not response:
            logger.warning(
                f"No response to {format_bytes(request)} after {self._retries + 1} attempts"
            )
            return None

        logger.debug(f"Received frame: {format_bytes(response)}")
        return decode_frame(response)

    def _send_set_command(
        self, command_bytes: bytes, data_bytes: bytes
    ) -> Optional[bytes]:
        acknowledgement = self._send_command(
            command_bytes, data_bytes, ACKNOWLEDGEMENT_RESPONSE_SIZE
        )
        if acknowledgement is not None:
            _validate_response_size(
                acknowledgement, ACKNOWLEDGEMENT_RESPONSE_SIZE, "Acknowledgement"
            )
        return acknowledgement

    def read_device_info(self) -> Optional[DeviceInfo]:
        """ Read the logger's identity and configuration

            Returns:
                A DeviceInfo, or None if the logger didn't respond
        """
        response = self._send_command(
            READ_DEVICE_INFO_REQUEST, b"", DEVICE_INFO_RESPONSE_SIZE
        )
        if response is None:
            return None

        _validate_response_size(response, DEVICE_INFO_RESPONSE_SIZE, "Device info")
        return parse_device_info(response)

    def write_device_params(
        self, device_info: DeviceInfo, new_station_number: int = None
    ) -> Optional[bytes]:
        """ Configure the logger

            Args:
                device_info: the desired configuration, addressed to device_info.station_number.
                    Interval, limits, stop button, delay time, tone set, alarm, temperature unit
                    and calibration are written; the other fields are ignored.
                new_station_number: if provided, change the logger's station number

            Returns:
                The acknowledgement (checksum stripped), or None if the logger didn't respond
        """
        command_bytes = _station_command_bytes(
            "Write Device Params", device_info.station_number
        )
        data_bytes = construct_device_params_data(device_info, new_station_number)
        return self._send_set_command(command_bytes, data_bytes)

    def clear_data(self) -> Optional[bytes]:
        """ Reset recorded data by writing the current configuration back unchanged
        """
        with self.lock:
            device_info = self.read_device_info()
            if device_info is None:
                return None
            return self.write_device_params(device_info)

    def set_device_identifier(
        self, station_number: int, identifier: str, truncate: bool = True
    ) -> Optional[bytes]:
        command_bytes = _station_command_bytes("Set Device Identifier", station_number)
        data_bytes = encode_text(identifier, DEVICE_IDENTIFIER_SIZE, truncate=truncate)
        return self._send_set_command(command_bytes, data_bytes)

    def set_user_info(
        self, user_info: str, station_number: int, truncate: bool = True
    ) -> Optional[bytes]:
        command_bytes = _station_command_bytes("Set User Info", station_number)
        data_bytes = encode_text(user_info, USER_INFO_SIZE, truncate=truncate)
        return self._send_set_command(command_bytes, data_bytes)

    def set_device_time(
        self, station_number: int, time: datetime = None
    ) -> Optional[bytes]:
        """ Set the logger's clock

            Args:
                station_number: station number of the logger
                time: the time to set. Default: now, in local time
        """
        if time is None:
            time = datetime.now()

        # The command has no argument byte: the date follows the command byte directly
        command_bytes = _station_command_bytes("Set Device Time", station_number)[:3]
        return self._send_set_command(command_bytes, encode_datetime(time))

    def read_data_header(self, station_number: int) -> Optional[DataHeader]:
        """ Read how many samples are stored and when the series started

            Returns:
                A DataHeader, or None if the logger didn't respond
        """
        response = self._send_command(
            _station_command_bytes("Read Data Header", station_number),
            b"",
            DATA_HEADER_RESPONSE_SIZE,
        )
        if response is None:
            return None

        _validate_response_size(response, DATA_HEADER_RESPONSE_SIZE, "Data header")
        data_header = parse_data_header(response)

        if data_header.station_number != station_number:
            raise InvalidResponse(
                f"Data header is for station {data_header.station_number}, "
                f"requested station {station_number}"
            )

        return data_header

    def read_data_page(
        self, station_number: int, page_index: int
    ) -> Optional[List[float]]:
        """ Read one page of recorded temperatures

            Pages vary in length, so the response is read until the transport times out.

            Returns:
                The page's temperatures in degrees, in recording order,
                or None if the logger didn't respond
        """
        response = self._send_command(
            _station_command_bytes("Read Data Page", station_number, page_index),
            b"",
            DATA_PAGE_MAX_RESPONSE_SIZE,
        )
        if response is None:
            return None

        return parse_data_page(response)


def _validate_response_size(response: bytes, expected_frame_size: int, name: str):
    # response has had its checksum stripped
    if len(response) + 1 != expected_frame_size:
        raise InvalidResponse(
            f"{name} frame actual size ({len(response) + 1}) != expected ({expected_frame_size}). "
            f"Frame: {format_bytes(response)}"
        )
