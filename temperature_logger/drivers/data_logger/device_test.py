import logging
from datetime import datetime
from unittest.mock import sentinel

import pytest

from . import device as module
from .exceptions import ChecksumMismatch, InvalidInput, InvalidResponse
from .packet import encode_frame
from .records_test import EXPECTED_DEVICE_INFO, construct_device_info_data

ACKNOWLEDGEMENT = b"\x33\x01\x34"


@pytest.fixture
def mock_transport(mocker):
    return mocker.Mock()


@pytest.fixture
def data_logger(mock_transport):
    return module.DataLogger(mock_transport, retries=1)


class TestSendCommand:
    def test_writes_frame_and_returns_decoded_response(
        self, data_logger, mock_transport
    ):
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        actual = data_logger._send_command(b"\x33\x01\x07", b"", sentinel.max_bytes)

        mock_transport.write.assert_called_once_with(b"\x33\x01\x07\x3B")
        mock_transport.read.assert_called_once_with(sentinel.max_bytes)
        assert actual == b"\x33\x01"

    def test_flushes_once_and_retries_after_empty_read(
        self, mocker, data_logger, mock_transport
    ):
        mock_transport.read.side_effect = [b"", ACKNOWLEDGEMENT]

        actual = data_logger._send_command(b"\x33\x01\x07", b"", 3)

        assert actual == b"\x33\x01"
        mock_transport.flush.assert_called_once_with()
        assert mock_transport.mock_calls == [
            mocker.call.write(b"\x33\x01\x07\x3B"),
            mocker.call.read(3),
            mocker.call.flush(),
            mocker.call.write(b"\x33\x01\x07\x3B"),
            mocker.call.read(3),
        ]

    def test_returns_none_when_every_attempt_is_empty(
        self, data_logger, mock_transport
    ):
        mock_transport.read.return_value = b""

        assert data_logger._send_command(b"\x33\x01\x07", b"", 3) is None
        assert mock_transport.read.call_count == 2

    def test_warns_once_when_giving_up(self, data_logger, mock_transport, caplog):
        mock_transport.read.return_value = b""

        data_logger._send_command(b"\x33\x01\x07", b"", 3)

        warnings = [
            record for record in caplog.records if record.levelno == logging.WARNING
        ]
        assert len(warnings) == 1

    def test_retry_count_is_configurable(self, mock_transport):
        mock_transport.read.return_value = b""
        data_logger = module.DataLogger(mock_transport, retries=3)

        assert data_logger._send_command(b"\x33\x01\x07", b"", 3) is None
        assert mock_transport.read.call_count == 4
        assert mock_transport.flush.call_count == 3

    def test_checksum_mismatch_is_raised_not_retried(
        self, data_logger, mock_transport
    ):
        mock_transport.read.return_value = b"\x33\x01\x00"

        with pytest.raises(ChecksumMismatch):
            data_logger._send_command(b"\x33\x01\x07", b"", 3)

        assert mock_transport.read.call_count == 1
        mock_transport.flush.assert_not_called()


class TestReadDeviceInfo:
    def test_read_device_info(self, data_logger, mock_transport):
        mock_transport.read.return_value = encode_frame(construct_device_info_data())

        actual = data_logger.read_device_info()

        mock_transport.write.assert_called_once_with(b"\xCC\x00\x06\x00\xD2")
        mock_transport.read.assert_called_once_with(160)
        assert actual == EXPECTED_DEVICE_INFO

    def test_returns_none_without_response(self, data_logger, mock_transport):
        mock_transport.read.return_value = b""
        assert data_logger.read_device_info() is None

    def test_raises_on_truncated_response(self, data_logger, mock_transport):
        mock_transport.read.return_value = encode_frame(
            construct_device_info_data()[:100]
        )

        with pytest.raises(InvalidResponse):
            data_logger.read_device_info()


class TestWriteDeviceParams:
    def test_write_device_params(self, data_logger, mock_transport):
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        actual = data_logger.write_device_params(EXPECTED_DEVICE_INFO)

        request = mock_transport.write.call_args[0][0]
        assert len(request) == 22
        assert request[:4] == b"\x33\x01\x05\x00"
        mock_transport.read.assert_called_once_with(3)
        assert actual == b"\x33\x01"

    def test_raises_on_wrong_size_acknowledgement(self, data_logger, mock_transport):
        mock_transport.read.return_value = encode_frame(b"\x33\x01\x00\x00")

        with pytest.raises(InvalidResponse):
            data_logger.write_device_params(EXPECTED_DEVICE_INFO)


class TestClearData:
    def test_writes_back_current_device_info(self, mocker, data_logger):
        mocker.patch.object(
            data_logger, "read_device_info", return_value=EXPECTED_DEVICE_INFO
        )
        mock_write = mocker.patch.object(
            data_logger, "write_device_params", return_value=sentinel.acknowledgement
        )

        assert data_logger.clear_data() == sentinel.acknowledgement
        mock_write.assert_called_once_with(EXPECTED_DEVICE_INFO)

    def test_does_not_write_without_device_info(self, mocker, data_logger):
        mocker.patch.object(data_logger, "read_device_info", return_value=None)
        mock_write = mocker.patch.object(data_logger, "write_device_params")

        assert data_logger.clear_data() is None
        mock_write.assert_not_called()


class TestSetCommands:
    def test_set_device_identifier(self, data_logger, mock_transport):
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        data_logger.set_device_identifier(1, "FRIDGE-1")

        request = mock_transport.write.call_args[0][0]
        assert request[:-1] == b"\x33\x01\x0B\x00FRIDGE-1\x00\x00"
        assert len(request) == 15

    def test_set_device_identifier_truncates(self, data_logger, mock_transport):
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        data_logger.set_device_identifier(1, "FRIDGE-NUMBER-12")

        request = mock_transport.write.call_args[0][0]
        assert request[4:-1] == b"FRIDGE-NUM"

    def test_set_user_info(self, data_logger, mock_transport):
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        data_logger.set_user_info("walk-in cooler", 1)

        request = mock_transport.write.call_args[0][0]
        assert request[:4] == b"\x33\x01\x09\x00"
        assert request[4:-1] == b"walk-in cooler".ljust(100, b"\x00")
        assert len(request) == 105

    def test_set_user_info_raises_on_long_text_without_truncation(
        self, data_logger, mock_transport
    ):
        with pytest.raises(InvalidInput):
            data_logger.set_user_info("x" * 101, 1, truncate=False)

        mock_transport.write.assert_not_called()

    def test_set_device_time(self, data_logger, mock_transport):
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        data_logger.set_device_time(1, datetime(2020, 1, 2, 3, 4, 5))

        request = mock_transport.write.call_args[0][0]
        assert request[:-1] == b"\x33\x01\x07\x07\xE4\x01\x02\x03\x04\x05"

    def test_set_device_time_defaults_to_now(self, mocker, data_logger, mock_transport):
        mock_datetime = mocker.patch.object(module, "datetime")
        mock_datetime.now.return_value = datetime(2021, 2, 3, 4, 5, 6)
        mock_transport.read.return_value = ACKNOWLEDGEMENT

        data_logger.set_device_time(1)

        request = mock_transport.write.call_args[0][0]
        assert request[3:-1] == b"\x07\xE5\x02\x03\x04\x05\x06"

    def test_raises_on_station_number_out_of_range(self, data_logger):
        with pytest.raises(InvalidInput):
            data_logger.set_device_time(300)


class TestReadDataHeader:
    def test_read_data_header(self, data_logger, mock_transport):
        mock_transport.read.return_value = (
            b"\x01\x00\x19\x07\xE4\x01\x02\x03\x04\x05\x14"
        )

        actual = data_logger.read_data_header(1)

        mock_transport.write.assert_called_once_with(b"\x33\x01\x01\x00\x35")
        mock_transport.read.assert_called_once_with(11)
        assert actual.total_count == 25
        assert actual.start_time == datetime(2020, 1, 2, 3, 4, 5)

    def test_raises_if_header_is_for_another_station(self, data_logger, mock_transport):
        mock_transport.read.return_value = encode_frame(
            b"\x02\x00\x19\x07\xE4\x01\x02\x03\x04\x05"
        )

        with pytest.raises(InvalidResponse):
            data_logger.read_data_header(1)


class TestReadDataPage:
    def test_read_data_page(self, data_logger, mock_transport):
        mock_transport.read.return_value = encode_frame(b"\x00\x00\xFA\xFF\x9C")

        actual = data_logger.read_data_page(1, 2)

        mock_transport.write.assert_called_once_with(b"\x33\x01\x02\x02\x38")
        mock_transport.read.assert_called_once_with(
            module.DATA_PAGE_MAX_RESPONSE_SIZE
        )
        assert actual == [25.0, -10.0]

    def test_returns_none_without_response(self, data_logger, mock_transport):
        mock_transport.read.return_value = b""
        assert data_logger.read_data_page(1, 0) is None
