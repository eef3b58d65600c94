# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Transports
**********

A transport moves raw 64 byte reports to and from one device. It knows nothing about
message framing, see :mod:`tzwire.framing` for that.
"""

import logging

from typing import (
    Iterable,
    Iterator,
    List,
    Type,
)

from ..errors import NoDeviceError, TooManyDevicesError

LOG = logging.getLogger(__name__)

TREZOR_VENDOR = 0x1209
TREZOR_PRODUCT = 0x53C1
DEV_TREZOR = (TREZOR_VENDOR, TREZOR_PRODUCT)


class Transport(object):
    """Raw connection to a single device.

    Subclasses implement :meth:`enumerate` to list the connected devices they can talk to,
    and the chunk level read and write functions. ``read_chunk`` blocks until a report arrives.
    """

    PATH_PREFIX = ""

    def get_path(self) -> str:
        raise NotImplementedError

    def open(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def write_chunk(self, chunk: bytes) -> None:
        raise NotImplementedError

    def read_chunk(self) -> bytes:
        raise NotImplementedError

    def iter_chunks(self) -> Iterator[bytes]:
        """
        Yield reports as they are read from the device, forever.
        """
        while True:
            yield self.read_chunk()

    @classmethod
    def enumerate(cls) -> Iterable["Transport"]:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.get_path()


def all_transports() -> List[Type[Transport]]:
    from .webusb import WebUsbTransport
    from .hid import HidTransport

    return [WebUsbTransport, HidTransport]


def enumerate_devices() -> List[Transport]:
    """
    List every connected device on every available transport, without opening any of them.
    """
    devices: List[Transport] = []
    for transport in all_transports():
        name = transport.__name__
        try:
            found = list(transport.enumerate())
        except Exception as e:
            LOG.warning("Failed to enumerate {}: {}".format(name, e))
            continue
        LOG.debug("Enumerating {}: found {} devices".format(name, len(found)))
        devices.extend(found)
    return devices


def get_transport() -> Transport:
    """
    Get the transport of the one and only connected device. The transport is not opened.

    :return: The transport
    :raises: NoDeviceError: if no device is connected
    :raises: TooManyDevicesError: if more than one device is connected
    """
    devices = enumerate_devices()
    if not devices:
        raise NoDeviceError()
    if len(devices) > 1:
        raise TooManyDevicesError("Too many devices: {}".format(", ".join(d.get_path() for d in devices)))
    return devices[0]
