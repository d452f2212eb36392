import logging

import serial

from temperature_logger.drivers.data_logger.constants import (
    DEFAULT_BAUD_RATE,
    READ_TIMEOUT_SECONDS,
)
from temperature_logger.drivers.data_logger.exceptions import TransportUnavailable

logger = logging.getLogger(__name__)


class SerialTransport:
    """ A serial line to one data logger, held open for the whole session.

        The line is always 8 data bits, no parity, 1 stop bit. Reads never block for longer than
        the timeout given at open time; whatever arrived by then is returned, possibly nothing.
    """

    def __init__(self, connection: serial.Serial):
        self._connection = connection

    @property
    def port(self) -> str:
        return self._connection.port

    @classmethod
    def open(
        cls,
        port: str,
        baud_rate: int = DEFAULT_BAUD_RATE,
        timeout: float = READ_TIMEOUT_SECONDS,
    ):
        """ Open and configure a serial line

            Args:
                port: serial port to use, e.g. "COM11" or "/dev/ttyUSB0"
                baud_rate: baud rate for serial connection
                timeout: timeout for each read in seconds. If timeout elapses while we're waiting
                    for a response, we'll return whatever data we have.

            Returns:
                an open SerialTransport

            Raises:
                TransportUnavailable if serial port can't be opened
        """
        try:
            connection = serial.Serial(
                port,
                baudrate=baud_rate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=timeout,
            )
        except (serial.SerialException, ValueError) as e:
            raise TransportUnavailable(f"Unable to open serial port {port}: {e}")

        logger.debug(f"Opened serial port {port} at {baud_rate} baud")

        transport = cls(connection)
        transport.flush()
        return transport

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def write(self, data: bytes) -> int:
        logger.debug(f"Serial command on {self.port}: {data!r}")
        return self._connection.write(data)

    def read(self, max_bytes: int) -> bytes:
        response = self._connection.read(max_bytes)
        logger.debug(f"Serial response on {self.port}: {response!r}")
        return response

    def flush(self):
        """ Discard anything buffered in either direction """
        self._connection.reset_input_buffer()
        self._connection.reset_output_buffer()

    def close(self):
        self._connection.close()
