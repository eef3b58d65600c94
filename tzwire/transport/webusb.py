# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

import atexit
import logging

from typing import Iterable, Optional

import usb1

from . import DEV_TREZOR, Transport
from ..errors import TransportError
from ..framing import REPORT_SIZE

LOG = logging.getLogger(__name__)

INTERFACE = 0
ENDPOINT = 1
USB_CLASS_VENDOR_SPECIFIC = 0xFF

_context: Optional[usb1.USBContext] = None


def _get_context() -> usb1.USBContext:
    global _context
    if _context is None:
        _context = usb1.USBContext()
        atexit.register(_context.close)
    return _context


def _dev_to_str(dev: usb1.USBDevice) -> str:
    return ":".join(str(x) for x in ["%03i" % (dev.getBusNumber(),)] + dev.getPortNumberList())


def _is_vendor_class(dev: usb1.USBDevice) -> bool:
    # WebUSB devices expose the wire interface with a vendor specific class,
    # devices running HID firmware are left to the hid transport
    try:
        return dev[0][INTERFACE][0].getClass() == USB_CLASS_VENDOR_SPECIFIC
    except IndexError:
        return False


class WebUsbTransport(Transport):
    """
    Transport over WebUSB (libusb interrupt endpoints).
    """

    PATH_PREFIX = "webusb"

    def __init__(self, device: usb1.USBDevice) -> None:
        self.device = device
        self.handle: Optional[usb1.USBDeviceHandle] = None

    def get_path(self) -> str:
        return "%s:%s" % (self.PATH_PREFIX, _dev_to_str(self.device))

    def open(self) -> None:
        LOG.debug("Opening {}".format(self.get_path()))
        try:
            self.handle = self.device.open()
            self.handle.claimInterface(INTERFACE)
        except usb1.USBError as e:
            if self.handle is not None:
                self.handle.close()
                self.handle = None
            raise TransportError("Cannot open device {}: {}".format(self.get_path(), e))

    def close(self) -> None:
        if self.handle is None:
            return
        LOG.debug("Closing {}".format(self.get_path()))
        try:
            self.handle.releaseInterface(INTERFACE)
        except usb1.USBError as e:
            LOG.warning("Failed to release interface: {}".format(e))
        finally:
            self.handle.close()
            self.handle = None

    def write_chunk(self, chunk: bytes) -> None:
        assert len(chunk) == REPORT_SIZE
        if self.handle is None:
            raise TransportError("Device {} is not open".format(self.get_path()))
        try:
            self.handle.interruptWrite(ENDPOINT, chunk)
        except usb1.USBError as e:
            raise TransportError("Write failed: {}".format(e))

    def read_chunk(self) -> bytes:
        if self.handle is None:
            raise TransportError("Device {} is not open".format(self.get_path()))
        endpoint = 0x80 | ENDPOINT
        while True:
            try:
                # timeout 0 waits forever
                chunk = self.handle.interruptRead(endpoint, REPORT_SIZE, timeout=0)
            except usb1.USBError as e:
                raise TransportError("Read failed: {}".format(e))
            if chunk:
                return bytes(chunk)

    @classmethod
    def enumerate(cls) -> Iterable["WebUsbTransport"]:
        devices = []
        for dev in _get_context().getDeviceIterator(skip_on_error=True):
            if (dev.getVendorID(), dev.getProductID()) != DEV_TREZOR:
                continue
            if not _is_vendor_class(dev):
                continue
            devices.append(WebUsbTransport(dev))
        return devices
