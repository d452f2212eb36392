class DataLoggerError(Exception):
    # Base class for everything raised while talking to the data logger
    pass


class TransportUnavailable(DataLoggerError):
    # Error class used when the serial line can't be opened
    pass


class NoResponse(DataLoggerError):
    # Error class used when the logger stays silent through every retry
    pass


class InvalidResponse(DataLoggerError, ValueError):
    # Error class used when we can't interpret the response from the logger
    pass


class ChecksumMismatch(InvalidResponse):
    # Error class used when a frame's trailing checksum doesn't match its contents
    pass


class UnknownWireCode(InvalidResponse):
    # Error class used when an enumerated field holds a value outside its defined set
    pass


class MissingStartTime(InvalidResponse):
    # Error class used when samples can't be timestamped because the series has no start time
    pass


class InvalidInput(DataLoggerError, ValueError):
    # Error class used when a caller's value can't be encoded for the logger
    pass
