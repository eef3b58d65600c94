"""
Errors and Error Codes
**********************

Every error raised by tzwire is a subclass of :class:`TzwireError` and carries an error code.
The tzwire command line tool converts these exceptions into a dictionary containing the error message and error code.
These look like ``{"error": "<msg>", "code": <code>}``.
"""

from typing import Any, Dict, Iterator, Optional, Sequence
from contextlib import contextmanager

# Error codes
NO_DEVICE = -1 #: No device was found
TOO_MANY_DEVICES = -2 #: More than one device was found
DEVICE_CONN_ERROR = -3 #: Error reading from or writing to the device
FRAMING_ERROR = -4 #: A USB report could not be framed or reassembled
MARSHAL_ERROR = -5 #: A message could not be serialized or parsed
UNEXPECTED_REPLY = -6 #: The device replied with a message type that was not expected
DEVICE_FAILURE = -7 #: The device reported a failure
PIN_CANCELLED = -8 #: PIN entry was cancelled on the device
PIN_INVALID = -9 #: The device rejected the PIN
NO_PIN = -10 #: No PIN provided, but one is needed
NO_PASSWORD = -11 #: No passphrase provided, but one is needed
INVALID_PATH = -12 #: The derivation path is malformed
BAD_ARGUMENT = -13 #: Bad, malformed, or conflicting argument was provided
ACTION_CANCELED = -14 #: Action was canceled by the user
UNKNOWN_ERROR = -15 #: An unknown error occurred
MISSING_ARGUMENTS = -16 #: Arguments are missing
HELP_TEXT = -17 #: Help text was requested by the user

# Exceptions
class TzwireError(Exception):
    """
    Generic exception type produced by tzwire
    Subclassed by specific Errors to have Exceptions that have specific error codes.

    Contains a message and error code.
    """
    def __init__(self, msg: str, code: int) -> None:
        """
        Create an exception with the message and error code

        :param msg: The error message
        :param code: The error code
        """
        Exception.__init__(self)
        self.code = code
        self.msg = msg

    def get_code(self) -> int:
        """
        Get the error code for this Error

        :return: The error code
        """
        return self.code

    def get_msg(self) -> str:
        """
        Get the error message for this Error

        :return: The error message
        """
        return self.msg

    def __str__(self) -> str:
        return self.msg

class DeviceDiscoveryError(TzwireError):
    """
    Base class for errors raised while looking for the single attached device
    """

class NoDeviceError(DeviceDiscoveryError):
    """
    :class:`TzwireError` for :data:`NO_DEVICE`
    """
    def __init__(self, msg: str = "No device found"):
        DeviceDiscoveryError.__init__(self, msg, NO_DEVICE)

class TooManyDevicesError(DeviceDiscoveryError):
    """
    :class:`TzwireError` for :data:`TOO_MANY_DEVICES`
    """
    def __init__(self, msg: str = "Too many devices"):
        DeviceDiscoveryError.__init__(self, msg, TOO_MANY_DEVICES)

class DeviceConnectionError(TzwireError):
    """
    :class:`TzwireError` for :data:`DEVICE_CONN_ERROR`
    """
    def __init__(self, msg: str):
        """
        :param msg: The error message
        """
        TzwireError.__init__(self, msg, DEVICE_CONN_ERROR)

class TransportError(DeviceConnectionError):
    """
    Raised when a USB read or write fails
    """

class FramingError(TzwireError):
    """
    :class:`TzwireError` for :data:`FRAMING_ERROR`
    """
    def __init__(self, msg: str):
        TzwireError.__init__(self, msg, FRAMING_ERROR)

class MarshalError(TzwireError):
    """
    :class:`TzwireError` for :data:`MARSHAL_ERROR`
    """
    def __init__(self, msg: str):
        TzwireError.__init__(self, msg, MARSHAL_ERROR)

class UnexpectedReplyError(TzwireError):
    """
    :class:`TzwireError` for :data:`UNEXPECTED_REPLY`
    """
    def __init__(self, expected: Sequence[str], received: str):
        """
        :param expected: The names of the message types that were acceptable
        :param received: The name of the message type the device sent
        """
        self.expected = list(expected)
        self.received = received
        TzwireError.__init__(self, "Expected reply types {}, got {}".format(self.expected, received), UNEXPECTED_REPLY)

class DeviceFailureError(TzwireError):
    """
    :class:`TzwireError` for :data:`DEVICE_FAILURE`

    Raised when the device answers with a ``Failure`` message.
    """
    def __init__(self, msg: str, failure_code: Optional[int] = None, code: int = DEVICE_FAILURE):
        """
        :param msg: The message sent by the device
        :param failure_code: The ``FailureType`` sent by the device, if any
        :param code: The error code
        """
        TzwireError.__init__(self, msg, code)
        self.failure_code = failure_code

class PinCancelledError(DeviceFailureError):
    """
    :class:`DeviceFailureError` for :data:`PIN_CANCELLED`
    """
    def __init__(self, msg: str, failure_code: Optional[int] = None):
        DeviceFailureError.__init__(self, msg, failure_code, PIN_CANCELLED)

class PinInvalidError(DeviceFailureError):
    """
    :class:`DeviceFailureError` for :data:`PIN_INVALID`
    """
    def __init__(self, msg: str, failure_code: Optional[int] = None):
        DeviceFailureError.__init__(self, msg, failure_code, PIN_INVALID)

class ActionCanceledError(DeviceFailureError):
    """
    :class:`DeviceFailureError` for :data:`ACTION_CANCELED`
    """
    def __init__(self, msg: str, failure_code: Optional[int] = None):
        DeviceFailureError.__init__(self, msg, failure_code, ACTION_CANCELED)

class SecretAbandonedError(TzwireError):
    """
    Raised when the user answers a PIN or passphrase prompt with an empty string
    """

class NoPinError(SecretAbandonedError):
    """
    :class:`SecretAbandonedError` for :data:`NO_PIN`
    """
    def __init__(self, msg: str = "PIN needed"):
        SecretAbandonedError.__init__(self, msg, NO_PIN)

class NoPasswordError(SecretAbandonedError):
    """
    :class:`SecretAbandonedError` for :data:`NO_PASSWORD`
    """
    def __init__(self, msg: str = "Passphrase needed"):
        SecretAbandonedError.__init__(self, msg, NO_PASSWORD)

class InvalidPathError(TzwireError):
    """
    :class:`TzwireError` for :data:`INVALID_PATH`
    """
    def __init__(self, msg: str):
        TzwireError.__init__(self, msg, INVALID_PATH)

class MalformedSegmentError(InvalidPathError):
    """
    A single segment of a derivation path is not a valid index
    """
    def __init__(self, segment: str):
        self.segment = segment
        InvalidPathError.__init__(self, "Malformed path segment '{}'".format(segment))

class BadArgumentError(TzwireError):
    """
    :class:`TzwireError` for :data:`BAD_ARGUMENT`
    """
    def __init__(self, msg: str):
        TzwireError.__init__(self, msg, BAD_ARGUMENT)

class UnknownCoinError(BadArgumentError):
    """
    Raised for a ticker symbol that is not in the coin table
    """
    def __init__(self, ticker: str):
        self.ticker = ticker
        BadArgumentError.__init__(self, "Unknown coin '{}'".format(ticker))

@contextmanager
def handle_errors(
    msg: Optional[str] = None,
    result: Optional[Dict[str, Any]] = None,
    code: int = UNKNOWN_ERROR,
    debug: bool = False,
) -> Iterator[None]:
    """
    Context manager to catch all Exceptions and TzwireErrors to return them as dictionaries containing the error message and code.

    :param msg: Error message prefix. Attached to the beginning of each error message
    :param result: The dictionary to put the resulting error in
    :param code: The default error code to use for Exceptions
    :param debug: Whether to also print out the traceback for debugging purposes
    """
    if result is None:
        result = {}

    if msg is None:
        msg = ""
    else:
        msg = msg + " "

    try:
        yield

    except TzwireError as e:
        result['error'] = msg + e.get_msg()
        result['code'] = e.get_code()
    except Exception as e:
        result['error'] = msg + str(e)
        result['code'] = code
        if debug:
            import traceback
            traceback.print_exc()
