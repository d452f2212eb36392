from .device import DataLogger  # noqa: F401 unused imports
from .exceptions import (  # noqa: F401 unused imports
    ChecksumMismatch,
    DataLoggerError,
    InvalidInput,
    InvalidResponse,
    MissingStartTime,
    NoResponse,
    TransportUnavailable,
    UnknownWireCode,
)
from .fields import Permission, TemperatureUnit, WorkStatus  # noqa: F401 unused imports
from .records import DataHeader, DeviceInfo  # noqa: F401 unused imports
