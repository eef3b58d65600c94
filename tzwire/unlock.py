# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Unlocking
*********

A locked device answers a request with a PIN request, and possibly a passphrase request,
before it answers the request itself. :class:`UnlockMachine` collects the secrets from the
session's :class:`~tzwire.ui.SecretEntry`, sends them, and re-sends the original request
when the device merely acknowledges a secret.

::

    AWAITING_REQUEST  -> AWAITING_PIN        the device asked for the PIN
    AWAITING_REQUEST  -> AWAITING_PASSWORD   the device asked for the passphrase
    AWAITING_PIN      -> AWAITING_PASSWORD   PIN accepted, passphrase asked for
    AWAITING_PIN      -> AWAITING_REQUEST    PIN acknowledged with Success, send the request again
    AWAITING_PASSWORD -> AWAITING_REQUEST    passphrase acknowledged with Success, send the request again
    any of the above  -> DONE                the device answered the request

An empty secret ends in PIN_ABANDONED or PASSWORD_ABANDONED, a PIN refused by the device
ends in PIN_REJECTED. Every secret is asked for at most once.
"""

import logging

from enum import Enum
from typing import (
    TYPE_CHECKING,
    Optional,
    Sequence,
    Tuple,
    Type,
)

from google.protobuf.message import Message
from mnemonic import Mnemonic

from . import messages
from .common import ExchangeResult, Signal
from .errors import (
    BadArgumentError,
    NoPasswordError,
    NoPinError,
    PinCancelledError,
    PinInvalidError,
    UnexpectedReplyError,
)
from .ui import PASSPHRASE_ENTRY, PIN_ENTRY

if TYPE_CHECKING:
    from .client import TrezorSession

LOG = logging.getLogger(__name__)

MAX_PASSPHRASE_LENGTH = 50


class State(Enum):
    AWAITING_REQUEST = 0
    AWAITING_PIN = 1
    AWAITING_PASSWORD = 2
    DONE = 3
    PIN_ABANDONED = 4
    PASSWORD_ABANDONED = 5
    PIN_REJECTED = 6


class UnlockMachine(object):
    """
    Runs one request through the unlock handshake. Create one per request.
    """

    def __init__(self, session: "TrezorSession", request: Message, expected: Sequence[Type[Message]]) -> None:
        self.session = session
        self.request = request
        self.expected: Tuple[Type[Message], ...] = tuple(expected)
        self.state = State.AWAITING_REQUEST
        self.result: Optional[ExchangeResult] = None
        self.pin_sent = False
        self.passphrase_sent = False

    def _transition(self, state: State) -> None:
        LOG.debug("Unlock: {} -> {}".format(self.state.name, state.name))
        self.state = state

    def _finish(self, result: ExchangeResult, offset: int) -> None:
        # indices are relative to the original expected types
        self.result = result._replace(index=result.index - offset)
        self._transition(State.DONE)

    def _expected_names(self) -> Sequence[str]:
        return [cls.DESCRIPTOR.name for cls in self.expected]

    def run(self) -> ExchangeResult:
        """
        Drive the handshake until the device answers the original request.

        :return: The reply to the original request, indexed into its expected types
        :raises: NoPinError: if the secret entry returned an empty PIN
        :raises: NoPasswordError: if the secret entry returned an empty passphrase
        :raises: PinInvalidError: if the device refused the PIN
        """
        steps = {
            State.AWAITING_REQUEST: self.send_request,
            State.AWAITING_PIN: self.send_pin,
            State.AWAITING_PASSWORD: self.send_passphrase,
        }
        while self.state is not State.DONE:
            steps[self.state]()
        assert self.result is not None
        return self.result

    def send_request(self) -> None:
        result = self.session.exchange(self.request, *self.expected)
        if result.signal is Signal.PIN_REQUIRED:
            if self.pin_sent:
                self._transition(State.PIN_REJECTED)
                raise PinInvalidError("Device asked for the PIN again")
            self._transition(State.AWAITING_PIN)
        elif result.signal is Signal.PASSWORD_REQUIRED:
            if self.passphrase_sent:
                raise UnexpectedReplyError(self._expected_names(), "PassphraseRequest")
            self._transition(State.AWAITING_PASSWORD)
        else:
            self._finish(result, 0)

    def send_pin(self) -> None:
        pin = self.session.entry.ask(PIN_ENTRY)
        if not pin:
            self._transition(State.PIN_ABANDONED)
            raise NoPinError()
        self.pin_sent = True

        # The device may answer the ack with the reply to the pending request right away
        replies = (messages.Success, messages.PassphraseRequest) + self.expected
        try:
            result = self.session.exchange(messages.PinMatrixAck(pin=pin), *replies)
        except (PinInvalidError, PinCancelledError):
            self._transition(State.PIN_REJECTED)
            raise

        if result.signal is Signal.PIN_REQUIRED:
            self._transition(State.PIN_REJECTED)
            raise PinInvalidError("Device asked for the PIN again")
        elif result.signal is Signal.PASSWORD_REQUIRED or result.index == 1:
            self._transition(State.AWAITING_PASSWORD)
        elif result.index == 0:
            self._transition(State.AWAITING_REQUEST)
        else:
            self._finish(result, 2)

    def send_passphrase(self) -> None:
        passphrase = self.session.entry.ask(PASSPHRASE_ENTRY)
        if not passphrase:
            self._transition(State.PASSWORD_ABANDONED)
            raise NoPasswordError()

        passphrase = Mnemonic.normalize_string(passphrase)
        if len(passphrase) > MAX_PASSPHRASE_LENGTH:
            self.session.cancel()
            raise BadArgumentError("Passphrase too long")
        self.passphrase_sent = True

        replies = (messages.Success,) + self.expected
        result = self.session.exchange(messages.PassphraseAck(passphrase=passphrase), *replies)
        if result.signal is Signal.PIN_REQUIRED:
            raise UnexpectedReplyError(self._expected_names(), "PinMatrixRequest")
        elif result.signal is Signal.PASSWORD_REQUIRED:
            raise UnexpectedReplyError(self._expected_names(), "PassphraseRequest")
        elif result.index == 0:
            self._transition(State.AWAITING_REQUEST)
        else:
            self._finish(result, 1)
