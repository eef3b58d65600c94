# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Sessions
********

A :class:`TrezorSession` owns the transport of the one connected device and runs the
request/reply exchanges with it. Use :func:`open_session` to get one.
"""

import logging

from typing import (
    Any,
    Optional,
    Tuple,
    Type,
)

from google.protobuf.message import Message
from semver import Version

from . import framing, messages
from .common import ExchangeResult, Signal
from .errors import (
    ActionCanceledError,
    DeviceConnectionError,
    DeviceFailureError,
    PinCancelledError,
    PinInvalidError,
    UnexpectedReplyError,
)
from .messages import FailureType, MessageType
from .transport import Transport, get_transport
from .ui import SecretEntry, StaticEntry
from .unlock import UnlockMachine

LOG = logging.getLogger(__name__)

PIN_CANCELLED_MESSAGE = "PIN cancelled"
PIN_INVALID_MESSAGE = "PIN invalid"


def failure_to_error(failure: Message) -> DeviceFailureError:
    """
    Convert a ``Failure`` message into the matching exception.
    """
    code = failure.code if failure.HasField("code") else None
    msg = failure.message or "Device failure"
    if code == FailureType.PinCancelled or msg == PIN_CANCELLED_MESSAGE:
        return PinCancelledError(msg, code)
    if code == FailureType.PinInvalid or msg == PIN_INVALID_MESSAGE:
        return PinInvalidError(msg, code)
    if code == FailureType.ActionCancelled:
        return ActionCanceledError(msg, code)
    return DeviceFailureError(msg, code)


class TrezorSession(object):
    """Session with a single connected device.

    The session exclusively owns its transport from :func:`open_session` until :meth:`close`.
    Exchanges are strictly request/reply: one request is written, then reports are read
    until its reply is complete. There is no timeout; a pending button confirmation
    blocks until the user acts on the device.
    """

    def __init__(self, transport: Transport, entry: Optional[SecretEntry] = None) -> None:
        """
        :param transport: An opened transport
        :param entry: Where PINs and passphrases come from. Without one, every secret request is abandoned.
        """
        self.transport = transport
        self.entry: SecretEntry = entry if entry is not None else StaticEntry()
        self.features: Optional[Message] = None
        self.firmware: Optional[Version] = None
        self.label = ""
        self.closed = False

    def init_device(self) -> None:
        """
        Read the device features. No PIN or passphrase is needed for this.
        """
        result = self.exchange(messages.Initialize(), messages.Features)
        if result.signal is not Signal.NONE:
            raise UnexpectedReplyError(["Features"], str(result.signal))
        self.features = result.message
        self.firmware = Version(
            self.features.major_version,
            self.features.minor_version,
            self.features.patch_version,
        )
        self.label = self.features.label
        LOG.info("Connected to '{}' with firmware {}".format(self.label, self.firmware))

    def close(self) -> None:
        if self.closed:
            return
        LOG.info("Closing session on {}".format(self.transport.get_path()))
        self.closed = True
        self.transport.close()

    def __enter__(self) -> "TrezorSession":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _check_open(self) -> None:
        if self.closed:
            raise DeviceConnectionError("Session is closed")

    def _write(self, msg: Message) -> None:
        payload = messages.serialize(msg)
        LOG.debug("Sending {} ({} bytes)".format(msg.DESCRIPTOR.name, len(payload)))
        for chunk in framing.encode(messages.message_type(msg), payload):
            self.transport.write_chunk(chunk)

    def _read(self) -> Tuple[int, bytes]:
        msg_type, payload = framing.decode(self.transport.iter_chunks())
        LOG.debug("Received {} ({} bytes)".format(messages.message_name(msg_type), len(payload)))
        return msg_type, payload

    def exchange(self, request: Message, *expected: Type[Message]) -> ExchangeResult:
        """
        Send a request and wait for its reply.

        Button confirmations are acknowledged here and do not end the exchange.
        A PIN request, or a passphrase request that is not one of ``expected``, ends it with a signal.

        :param request: The message to send
        :param expected: The message types that are acceptable as reply
        :return: The index of the matched type in ``expected`` and the parsed reply, or a signal
        :raises: DeviceFailureError: if the device replied with a ``Failure``
        :raises: UnexpectedReplyError: if the reply type is not in ``expected``
        """
        self._check_open()
        self._write(request)
        while True:
            msg_type, payload = self._read()

            if msg_type == MessageType.Failure:
                raise failure_to_error(messages.parse(messages.Failure, payload))

            if msg_type == MessageType.ButtonRequest:
                button = messages.parse(messages.ButtonRequest, payload)
                # send ButtonAck first, notify UI later
                self._write(messages.ButtonAck())
                self.entry.button_request(button.code)
                LOG.info("Waiting for confirmation on the device")
                continue

            if msg_type == MessageType.PinMatrixRequest:
                return ExchangeResult(None, Signal.PIN_REQUIRED, None)

            for i, cls in enumerate(expected):
                if messages.message_type(cls) == msg_type:
                    return ExchangeResult(i, Signal.NONE, messages.parse(cls, payload))

            if msg_type == MessageType.PassphraseRequest:
                return ExchangeResult(None, Signal.PASSWORD_REQUIRED, None)

            raise UnexpectedReplyError([cls.DESCRIPTOR.name for cls in expected], messages.message_name(msg_type))

    def call(self, request: Message, *expected: Type[Message]) -> ExchangeResult:
        """
        Like :meth:`exchange`, but PIN and passphrase requests are answered from the secret entry
        and the request is sent again, so the result is always a reply to ``request``.
        """
        return UnlockMachine(self, request, expected).run()

    def cancel(self) -> None:
        """
        Abort whatever the device is waiting for. The device answers with a failure, which is discarded.
        """
        self._check_open()
        self._write(messages.Cancel())
        self._read()

    def ping(self, message: str = "", button_protection: bool = False) -> str:
        """
        Check that the device is responsive.

        :return: The message, echoed by the device
        """
        result = self.call(messages.Ping(message=message, button_protection=button_protection), messages.Success)
        return result.message.message

    def unlock(self) -> None:
        """
        Have the device ask for its PIN and passphrase, if it is protected by them.
        """
        self.call(
            messages.Ping(pin_protection=True, passphrase_protection=True),
            messages.Success,
        )

    def get_device_id(self) -> str:
        self._check_open()
        return self.features.device_id


def open_session(entry: Optional[SecretEntry] = None, transport: Optional[Transport] = None) -> TrezorSession:
    """
    Open a session with the one connected device.

    :param entry: Where PINs and passphrases come from
    :param transport: The transport to use, instead of looking for the device
    :return: The session, with features, firmware and label read from the device
    :raises: NoDeviceError: if no device is connected
    :raises: TooManyDevicesError: if more than one device is connected
    """
    if transport is None:
        transport = get_transport()
    LOG.info("Creating session for device: {}".format(transport.get_path()))
    transport.open()
    session = TrezorSession(transport, entry)
    try:
        session.init_device()
    except BaseException:
        session.close()
        raise
    return session
