"""
Framing for the data logger's serial protocol.

Frames in both directions have no fixed header; the command bytes are followed
by the data bytes and a single checksum byte:

    Command     Command bytes (e.g. 0x33, station number, command, argument)
    d-byte 1    1st data byte
    ...
    d-byte n    nth data byte
    Checksum    The 1 byte sum of every preceding byte in the frame

The length of a frame is only known from the command it answers.
"""
from .exceptions import ChecksumMismatch, InvalidResponse


def calculate_checksum(message_bytes: bytes) -> int:
    """ Calculate the checksum of everything in a frame but the checksum itself

        Args:
            message_bytes: every byte of the frame preceding the checksum

        Returns:
            The sum of the bytes, modulo 256
    """
    return sum(message_bytes) & 0xFF


def format_bytes(frame_bytes: bytes) -> str:
    return " ".join(f"0x{byte:02X}" for byte in frame_bytes)


def encode_frame(command_bytes: bytes, data_bytes: bytes = b"") -> bytes:
    """ Construct a frame from command and data bytes by appending their checksum
    """
    message_bytes = bytes(command_bytes) + bytes(data_bytes)
    return message_bytes + bytes([calculate_checksum(message_bytes)])


def decode_frame(frame_bytes: bytes) -> bytes:
    """ Validate a frame's checksum and strip it

        Args:
            frame_bytes: a complete frame as received from the logger

        Returns:
            Every byte of the frame except the trailing checksum

        Raises:
            InvalidResponse if the frame is empty
            ChecksumMismatch if the trailing checksum doesn't match the rest of the frame
    """
    if not frame_bytes:
        raise InvalidResponse("Unable to decode an empty frame")

    message_bytes = frame_bytes[:-1]
    checksum = frame_bytes[-1]
    expected_checksum = calculate_checksum(message_bytes)

    if checksum != expected_checksum:
        raise ChecksumMismatch(
            f"\nFrame checksum actual (0x{checksum:02X}) != expected (0x{expected_checksum:02X})."
            f"\nFrame: {format_bytes(frame_bytes)}"
        )

    return bytes(message_bytes)
