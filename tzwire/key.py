#!/usr/bin/env python3
# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Derivation Paths
****************

Parsing and formatting of BIP 32 derivation paths such as ``m/49'/0'/0'/0/0``.
"""

from .errors import InvalidPathError, MalformedSegmentError

from typing import (
    List,
    Sequence,
)


HARDENED_FLAG = 1 << 31
HARDENED_MARKER = "'"
ROOT_MARKER = "m/"

def H_(x: int) -> int:
    """
    Shortcut function that "hardens" a number in a BIP44 path.
    """
    return x | HARDENED_FLAG

def is_hardened(i: int) -> bool:
    """
    Returns whether an index is hardened
    """
    return i & HARDENED_FLAG != 0


def _parse_segment(segment: str) -> int:
    hardened = segment.endswith(HARDENED_MARKER)
    digits = segment[:-1] if hardened else segment
    # str.isdigit() accepts things like superscripts, so compare against ascii digits
    if not digits or any(c not in "0123456789" for c in digits):
        raise MalformedSegmentError(segment)
    index = int(digits)
    # the top bit is reserved for the hardened marker
    if index >= HARDENED_FLAG:
        raise MalformedSegmentError(segment)
    if hardened:
        return index + HARDENED_FLAG
    return index


def parse_path(nstr: str) -> List[int]:
    """
    Convert BIP32 path string to list of uint32 integers with hardened flags.
    The path must start with ``m/``, hardened indices are marked with a trailing apostrophe.

    e.g.: "m/49'/0'/0'/0/0" -> [0x80000031, 0x80000000, 0x80000000, 0, 0]

    :param nstr: path string
    :return: list of integers
    :raises: InvalidPathError: if the path does not start with ``m/``
    :raises: MalformedSegmentError: if a segment is not a valid (hardened) index
    """
    if not nstr.startswith(ROOT_MARKER):
        raise InvalidPathError("Invalid path '{}': must start with '{}'".format(nstr, ROOT_MARKER))
    return [_parse_segment(x) for x in nstr[len(ROOT_MARKER):].split("/")]


def path_to_str(path: Sequence[int]) -> str:
    """
    Convert a list of integers back into a path string, the inverse of :func:`parse_path`.

    :param path: list of integers
    :return: path string
    """
    segments = []
    for i in path:
        if is_hardened(i):
            segments.append(str(i - HARDENED_FLAG) + HARDENED_MARKER)
        else:
            segments.append(str(i))
    return ROOT_MARKER + "/".join(segments)
