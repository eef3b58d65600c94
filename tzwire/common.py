"""
Common Classes
**************
"""

from enum import Enum

from typing import (
    NamedTuple,
    Optional,
)

from google.protobuf.message import Message


class Signal(Enum):
    """
    Tells the caller of an exchange that the device wants a secret before it will answer
    """
    NONE = 0 #: The exchange completed
    PIN_REQUIRED = 1 #: The device asked for the PIN
    PASSWORD_REQUIRED = 2 #: The device asked for the passphrase

    def __str__(self) -> str:
        return str(self.name).lower()


class ExchangeResult(NamedTuple):
    """
    The outcome of one request/reply exchange
    """
    index: Optional[int] #: Position of the matched reply type in the expected types, None if a signal was raised
    signal: Signal #: The signal raised by the device
    message: Optional[Message] #: The parsed reply, None if a signal was raised
