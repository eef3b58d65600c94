# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Report Framing
**************

Splits a serialized message into 64 byte USB reports and reassembles reports into a message.

Every report starts with the report id ``0x3f``. The first report of a message carries an
8 byte header ``## <type: u16 BE> <length: u32 BE>`` in front of the message bytes, the
following reports carry raw continuation bytes. The last report is zero padded.
"""

import struct

from typing import (
    Iterable,
    List,
    Tuple,
)

from .errors import FramingError

REPORT_SIZE = 64
REPORT_ID = 0x3F
CHUNK_SIZE = REPORT_SIZE - 1
MAGIC = b"##"

HEADER_FMT = ">2sHL"
HEADER_LEN = struct.calcsize(HEADER_FMT)


def encode(msg_type: int, payload: bytes) -> List[bytes]:
    """
    Frame a message into USB reports.

    :param msg_type: The wire type tag of the message
    :param payload: The serialized message
    :return: The reports to write, in order
    """
    if not 0 <= msg_type <= 0xFFFF:
        raise FramingError("Message type {} out of range".format(msg_type))
    if len(payload) > 0xFFFFFFFF:
        raise FramingError("Message too large")

    data = struct.pack(HEADER_FMT, MAGIC, msg_type, len(payload)) + payload
    reports = []
    for i in range(0, len(data), CHUNK_SIZE):
        chunk = data[i:i + CHUNK_SIZE]
        reports.append(bytes([REPORT_ID]) + chunk.ljust(CHUNK_SIZE, b"\x00"))
    return reports


def _check_report(report: bytes) -> None:
    if len(report) != REPORT_SIZE:
        raise FramingError("Unexpected report size {}".format(len(report)))
    if report[0] != REPORT_ID:
        raise FramingError("Unexpected report id {:#04x}".format(report[0]))


def decode(reports: Iterable[bytes]) -> Tuple[int, bytes]:
    """
    Reassemble a message from USB reports.

    Reports are pulled from ``reports`` one at a time and no more are pulled once the
    declared length has been received, so a transport's read loop can be passed directly.

    :param reports: The reports as read from the device
    :return: The wire type tag and the serialized message
    :raises: FramingError: if a report is malformed or the reports end before the message does
    """
    it = iter(reports)
    try:
        first = next(it)
    except StopIteration:
        raise FramingError("No report received")
    _check_report(first)
    magic, msg_type, length = struct.unpack_from(HEADER_FMT, first, 1)
    if magic != MAGIC:
        raise FramingError("Invalid message header")

    body = first[1 + HEADER_LEN:1 + HEADER_LEN + length]
    while len(body) < length:
        try:
            report = next(it)
        except StopIteration:
            raise FramingError("Message truncated: got {} of {} bytes".format(len(body), length))
        _check_report(report)
        body += report[1:1 + length - len(body)]
    return msg_type, body
