#! /usr/bin/env python3

import unittest
from unittest import mock

from scripted_device import ScriptedTransport, make_session

from tzwire import messages
from tzwire._cli import process_commands
from tzwire.errors import (
    DEVICE_CONN_ERROR,
    INVALID_PATH,
    NO_DEVICE,
    NO_PIN,
    NoDeviceError,
    TransportError,
)
from tzwire.ui import ConsoleEntry, StaticEntry


class TestCLI(unittest.TestCase):
    def run_with(self, replies, args):
        session, transport = make_session(replies)
        with mock.patch("tzwire._cli.open_session", return_value=session) as opener:
            result = process_commands(args)
        self.assertTrue(session.closed)
        return result, transport, opener

    def test_getaddress(self):
        result, transport, _ = self.run_with([messages.Address(address="1abc")], ["getaddress", "m/44'/0'/0'/0/0", "--mode", "p2pkh"])
        self.assertEqual(result, {'address': '1abc'})
        self.assertEqual(transport.sent[0].coin_name, "Bitcoin")

    def test_coin_case(self):
        result, transport, _ = self.run_with([messages.Address(address="LaMT348")], ["getaddress", "m/44'/2'/0'/0/0", "--coin", "LTC"])
        self.assertEqual(result, {'address': 'LaMT348'})
        self.assertEqual(transport.sent[0].coin_name, "Litecoin")

    def test_getxpub_eth(self):
        result, transport, _ = self.run_with([messages.EthereumPublicKey(xpub="xpub6")], ["getxpub", "m/44'/60'/0'", "--coin", "eth"])
        self.assertEqual(result, {'xpub': 'xpub6'})
        self.assertEqual(transport.sent_names(), ["EthereumGetPublicKey"])

    def test_ping(self):
        result, _, _ = self.run_with([messages.Success(message="hello")], ["ping", "hello"])
        self.assertEqual(result, {'message': 'hello'})

    def test_invalid_path(self):
        result, transport, _ = self.run_with([], ["getaddress", "44'/0'"])
        self.assertEqual(result['code'], INVALID_PATH)
        self.assertEqual(transport.sent, [])

    def test_locked_without_pin(self):
        result, _, _ = self.run_with([messages.PinMatrixRequest(type=1)], ["unlock"])
        self.assertEqual(result, {'error': 'PIN needed', 'code': NO_PIN})

    def test_secret_entry(self):
        _, _, opener = self.run_with([messages.Success()], ["--pin", "1234", "--passphrase", "pass", "unlock"])
        entry = opener.call_args[0][0]
        self.assertIsInstance(entry, StaticEntry)
        self.assertEqual(entry.pin, "1234")
        self.assertEqual(entry.passphrase, "pass")

        _, _, opener = self.run_with([messages.Success()], ["-i", "unlock"])
        self.assertIsInstance(opener.call_args[0][0], ConsoleEntry)

    def test_no_device(self):
        with mock.patch("tzwire._cli.open_session", side_effect=NoDeviceError()):
            result = process_commands(["features"])
        self.assertEqual(result, {'error': 'No device found', 'code': NO_DEVICE})

    def test_open_failure(self):
        with mock.patch("tzwire._cli.open_session", side_effect=OSError("Access denied")):
            result = process_commands(["features"])
        self.assertEqual(result, {'error': 'Access denied', 'code': DEVICE_CONN_ERROR})


class TestEnumerate(unittest.TestCase):
    def test_enumerate(self):
        class Found(ScriptedTransport):
            PATH_PREFIX = "webusb"

            @classmethod
            def enumerate(cls):
                return [cls(path="webusb:001:4")]

        class Broken(ScriptedTransport):
            PATH_PREFIX = "hid"

            @classmethod
            def enumerate(cls):
                raise TransportError("hidapi failed")

        with mock.patch("tzwire.commands.all_transports", return_value=[Found, Broken]):
            result = process_commands(["enumerate"])
        self.assertEqual(result, [
            {'type': 'trezor', 'transport': 'webusb', 'path': 'webusb:001:4'},
            {'error': 'Could not enumerate hid: hidapi failed', 'code': DEVICE_CONN_ERROR},
        ])


if __name__ == "__main__":
    unittest.main()
