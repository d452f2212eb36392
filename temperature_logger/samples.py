import collections
import logging
from datetime import timedelta
from enum import Enum
from typing import List

import pandas as pd

from .drivers.data_logger import DataLogger, DeviceInfo
from .drivers.data_logger.exceptions import (
    InvalidResponse,
    MissingStartTime,
    NoResponse,
)

logger = logging.getLogger(__name__)


Sample = collections.namedtuple("Sample", ["timestamp", "temperature"])


def require_response(response, description: str):
    if response is None:
        raise NoResponse(f"Data logger didn't respond to {description}")
    return response


def _read_temperatures(
    data_logger: DataLogger, station_number: int, total_count: int
) -> List[float]:
    """ Read successive data pages until total_count temperatures have been collected

        Pages vary in length (the last is usually short), so the count of temperatures
        actually received decides when to stop, never a page count.
    """
    temperatures: List[float] = []
    remaining_count = total_count
    page_index = 0

    while remaining_count > 0:
        page = require_response(
            data_logger.read_data_page(station_number, page_index),
            f"read of data page {page_index}",
        )

        if not page:
            raise InvalidResponse(
                f"Data page {page_index} was empty with {remaining_count} samples remaining"
            )

        logger.debug(f"Read {len(page)} samples from data page {page_index}")
        temperatures.extend(page)
        remaining_count -= len(page)
        page_index += 1

    # The last page may be padded beyond the recorded count
    return temperatures[:total_count]


def fetch_samples(data_logger: DataLogger, station_number: int = None) -> List[Sample]:
    """ Download every recorded sample, timestamped from the start of the recording

        Args:
            data_logger: DataLogger to download from
            station_number: Optional. Station number of the logger.
                Default: the station number the logger reports in its device info

        Returns:
            Samples in recording order. Sample i is timestamped
            start time + i * sample interval.

        Raises:
            NoResponse if the logger stops responding partway through
            MissingStartTime if the logger has no start time for its recording
    """
    with data_logger.lock:
        device_info = require_response(
            data_logger.read_device_info(), "read of device info"
        )
        if station_number is None:
            station_number = device_info.station_number

        data_header = require_response(
            data_logger.read_data_header(station_number), "read of data header"
        )
        if data_header.total_count and data_header.start_time is None:
            raise MissingStartTime(
                f"Station {station_number} reports {data_header.total_count} samples "
                f"but no start time, so they can't be timestamped"
            )

        logger.info(
            f"Reading {data_header.total_count} samples from station {station_number}"
        )
        temperatures = _read_temperatures(
            data_logger, station_number, data_header.total_count
        )

    sample_interval = timedelta(seconds=device_info.sample_interval)
    return [
        Sample(
            timestamp=data_header.start_time + index * sample_interval,
            temperature=temperature,
        )
        for index, temperature in enumerate(temperatures)
    ]


def samples_to_dataframe(samples: List[Sample]) -> pd.DataFrame:
    """ Tabulate samples with one row per sample, indexed by timestamp """
    return pd.DataFrame(samples, columns=Sample._fields).set_index("timestamp")


def _display_value(value):
    return value.name if isinstance(value, Enum) else value


def device_info_to_series(device_info: DeviceInfo) -> pd.Series:
    return pd.Series(
        {field: _display_value(value) for field, value in device_info._asdict().items()}
    )
