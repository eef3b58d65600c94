#! /usr/bin/env python3

import unittest

from tzwire.errors import INVALID_PATH, InvalidPathError, MalformedSegmentError
from tzwire.key import H_, HARDENED_FLAG, is_hardened, parse_path, path_to_str


class TestParsePath(unittest.TestCase):
    def test_hardened_and_plain(self):
        self.assertEqual(parse_path("m/49'/0'/0'/0/0"), [0x80000031, 0x80000000, 0x80000000, 0, 0])
        self.assertEqual(parse_path("m/44'/60'/0'/0/5"), [H_(44), H_(60), H_(0), 0, 5])

    def test_limits(self):
        self.assertEqual(parse_path("m/2147483647'"), [0xFFFFFFFF])
        self.assertEqual(parse_path("m/2147483647"), [HARDENED_FLAG - 1])

        # an unhardened index must not collide with a hardened one
        for path in ["m/2147483648'", "m/2147483648", "m/4294967295", "m/4294967296"]:
            with self.assertRaises(MalformedSegmentError):
                parse_path(path)

    def test_missing_root(self):
        for path in ["", "m", "44'/0'", "M/44'", "/44'"]:
            with self.assertRaises(InvalidPathError) as cm:
                parse_path(path)
            self.assertNotIsInstance(cm.exception, MalformedSegmentError)
            self.assertEqual(cm.exception.get_code(), INVALID_PATH)

    def test_malformed_segments(self):
        for path, segment in [
            ("m/", ""),
            ("m/44'/", ""),
            ("m/44''", "44''"),
            ("m/'", "'"),
            ("m/-1", "-1"),
            ("m/+1", "+1"),
            ("m/1h", "1h"),
            ("m/ 1", " 1"),
            ("m/²", "²"),
            ("m/0x10", "0x10"),
        ]:
            with self.assertRaises(MalformedSegmentError) as cm:
                parse_path(path)
            self.assertEqual(cm.exception.segment, segment)
            self.assertEqual(cm.exception.get_code(), INVALID_PATH)

    def test_leading_zeros(self):
        self.assertEqual(parse_path("m/007'/01"), [H_(7), 1])

    def test_to_str(self):
        for path in ["m/49'/0'/0'/0/0", "m/0", "m/2147483647'/2147483647", "m/0'/0"]:
            self.assertEqual(path_to_str(parse_path(path)), path)

    def test_is_hardened(self):
        self.assertTrue(is_hardened(H_(0)))
        self.assertFalse(is_hardened(0x7FFFFFFF))


if __name__ == "__main__":
    unittest.main()
