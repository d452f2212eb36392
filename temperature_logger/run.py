import sys
import logging

from .configure import get_logger_configuration, LoggerConfiguration
from .drivers.data_logger import DataLogger
from .drivers.serial_port import SerialTransport
from .drivers.data_logger.exceptions import NoResponse
from .samples import (
    device_info_to_series,
    fetch_samples,
    require_response,
    samples_to_dataframe,
)


def _station_number(data_logger: DataLogger, configuration: LoggerConfiguration):
    if configuration.station_number is not None:
        return configuration.station_number

    device_info = require_response(data_logger.read_device_info(), "device info")
    return device_info.station_number


def _run_command(data_logger: DataLogger, configuration: LoggerConfiguration):
    command = configuration.command

    if command == "info":
        device_info = require_response(data_logger.read_device_info(), "device info")
        print(device_info_to_series(device_info).to_string())

    elif command == "samples":
        samples = fetch_samples(data_logger, configuration.station_number)
        logging.info(f"Read {len(samples)} samples")
        samples_to_dataframe(samples).to_csv(sys.stdout)

    elif command == "set-time":
        station_number = _station_number(data_logger, configuration)
        require_response(data_logger.set_device_time(station_number), "set time")
        logging.info(f"Set clock of station {station_number}")

    elif command == "clear":
        require_response(data_logger.clear_data(), "clear data")
        logging.info("Cleared recorded data")


def run(cli_args=None):
    if cli_args is None:
        # First argument is the name of the command itself, not an "argument" we want to parse
        cli_args = sys.argv[1:]
    configuration = get_logger_configuration(cli_args)

    logging_format = "%(asctime)s [%(levelname)s]--- %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if configuration.verbose else logging.INFO,
        format=logging_format,
        handlers=[logging.StreamHandler()],
    )

    logging.info(f"Connecting to data logger on {configuration.port}")

    with SerialTransport.open(configuration.port, configuration.baud_rate) as transport:
        data_logger = DataLogger(transport, retries=configuration.retries)
        try:
            _run_command(data_logger, configuration)
        except NoResponse as e:
            logging.error(f"{e}. Check that the logger is connected and powered on.")
            sys.exit(1)
