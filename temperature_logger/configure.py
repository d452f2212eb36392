import argparse
from collections import namedtuple

from typing import List, Dict

from .drivers.data_logger.constants import DEFAULT_BAUD_RATE

DEFAULT_PORT = "/dev/ttyUSB0"

COMMANDS = ["info", "samples", "set-time", "clear"]

LoggerConfiguration = namedtuple(
    "LoggerConfiguration",
    ["command", "port", "baud_rate", "retries", "station_number", "verbose"],
)


def _parse_args(args: List[str]) -> Dict:
    arg_parser = argparse.ArgumentParser(
        description=(
            "Read configuration and recorded temperatures from a serial temperature data logger"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )

    arg_parser.add_argument(
        "command",
        choices=COMMANDS,
        help=(
            "info: print the logger's device info\n"
            "samples: print every recorded sample as csv\n"
            "set-time: set the logger's clock to now\n"
            "clear: clear recorded data, keeping the current configuration"
        ),
    )

    arg_parser.add_argument(
        "-p",
        "--port",
        required=False,
        default=DEFAULT_PORT,
        help=f"serial port the logger is connected to. Default: {DEFAULT_PORT}",
    )

    arg_parser.add_argument(
        "--baud-rate",
        required=False,
        default=DEFAULT_BAUD_RATE,
        type=int,
        help=f"serial baud rate. Default: {DEFAULT_BAUD_RATE}",
    )

    arg_parser.add_argument(
        "--retries",
        required=False,
        default=1,
        type=int,
        help="number of times to retry a command the logger doesn't answer. Default: 1",
    )

    arg_parser.add_argument(
        "-s",
        "--station",
        dest="station_number",
        required=False,
        type=int,
        help="station number of the logger. Default: the one it reports in its device info",
    )

    arg_parser.add_argument(
        "-v",
        "--verbose",
        required=False,
        action="store_true",
        default=False,
        help="log every frame sent and received",
    )

    logger_arg_namespace = arg_parser.parse_args(args)

    if logger_arg_namespace.retries < 0:
        arg_parser.error("--retries can't be negative")

    station_number = logger_arg_namespace.station_number
    if station_number is not None and not 0 <= station_number <= 255:
        arg_parser.error("--station must be between 0 and 255")

    return vars(logger_arg_namespace)


def get_logger_configuration(cli_args: List[str]) -> LoggerConfiguration:
    args = _parse_args(cli_args)

    return LoggerConfiguration(
        command=args["command"],
        port=args["port"],
        baud_rate=args["baud_rate"],
        retries=args["retries"],
        station_number=args["station_number"],
        verbose=args["verbose"],
    )
