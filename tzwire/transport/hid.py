# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

import logging

from typing import Any, Dict, Iterable, Optional

import hid

from . import TREZOR_PRODUCT, TREZOR_VENDOR, Transport
from ..errors import TransportError
from ..framing import REPORT_SIZE

LOG = logging.getLogger(__name__)

WIRE_USAGE_PAGE = 0xFF00
WIRE_INTERFACE = 0


def _is_wirelink(info: Dict[str, Any]) -> bool:
    # interface 1 / usage page 0xFF01 is the debug link
    return info["usage_page"] == WIRE_USAGE_PAGE or info["interface_number"] == WIRE_INTERFACE


class HidTransport(Transport):
    """
    Transport over USB HID, used by devices running older firmware.
    """

    PATH_PREFIX = "hid"

    def __init__(self, info: Dict[str, Any]) -> None:
        self.info = info
        self.device: Optional[hid.device] = None

    def get_path(self) -> str:
        path = self.info["path"]
        if isinstance(path, bytes):
            path = path.decode()
        return "%s:%s" % (self.PATH_PREFIX, path)

    def open(self) -> None:
        LOG.debug("Opening {}".format(self.get_path()))
        self.device = hid.device()
        try:
            self.device.open_path(self.info["path"])
        except (IOError, OSError) as e:
            self.device = None
            raise TransportError("Cannot open device {}: {}".format(self.get_path(), e))
        self.device.set_nonblocking(False)

    def close(self) -> None:
        if self.device is None:
            return
        LOG.debug("Closing {}".format(self.get_path()))
        self.device.close()
        self.device = None

    def write_chunk(self, chunk: bytes) -> None:
        assert len(chunk) == REPORT_SIZE
        if self.device is None:
            raise TransportError("Device {} is not open".format(self.get_path()))
        # prefix with 0x00 for "report number"
        try:
            written = self.device.write(b"\x00" + chunk)
        except (IOError, OSError, ValueError) as e:
            raise TransportError("Write failed: {}".format(e))
        if written < 0:
            raise TransportError("Write failed: {}".format(self.device.error()))

    def read_chunk(self) -> bytes:
        if self.device is None:
            raise TransportError("Device {} is not open".format(self.get_path()))
        while True:
            try:
                chunk = self.device.read(REPORT_SIZE)
            except (IOError, OSError, ValueError) as e:
                raise TransportError("Read failed: {}".format(e))
            if chunk:
                return bytes(chunk)

    @classmethod
    def enumerate(cls) -> Iterable["HidTransport"]:
        return [HidTransport(info) for info in hid.enumerate(TREZOR_VENDOR, TREZOR_PRODUCT) if _is_wirelink(info)]
