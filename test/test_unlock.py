#! /usr/bin/env python3

import unittest

from scripted_device import RecordingEntry, make_session

from tzwire import messages
from tzwire.errors import (
    BAD_ARGUMENT,
    NO_PASSWORD,
    NO_PIN,
    BadArgumentError,
    NoPasswordError,
    NoPinError,
    PinCancelledError,
    PinInvalidError,
    UnexpectedReplyError,
)
from tzwire.messages import FailureType
from tzwire.ui import PASSPHRASE_ENTRY, PIN_ENTRY
from tzwire.unlock import MAX_PASSPHRASE_LENGTH, State, UnlockMachine


ADDRESS = messages.Address(address="1BvBMSEYstWetqTFn5Au4m4GFg7xJaNVN2")


def get_address():
    return messages.GetAddress(address_n=[0x8000002C, 0x80000000, 0x80000000, 0, 0], coin_name="Bitcoin")


class TestUnlock(unittest.TestCase):
    def run_machine(self, replies, entry):
        session, transport = make_session(replies, entry)
        machine = UnlockMachine(session, get_address(), [messages.Address])
        return machine, transport

    def test_unlocked(self):
        machine, transport = self.run_machine([ADDRESS], RecordingEntry())
        result = machine.run()
        self.assertEqual(result.index, 0)
        self.assertEqual(result.message.address, ADDRESS.address)
        self.assertEqual(machine.state, State.DONE)
        self.assertEqual(transport.sent_names(), ["GetAddress"])

    def test_no_pin(self):
        entry = RecordingEntry()
        machine, transport = self.run_machine([messages.PinMatrixRequest(type=1)], entry)
        with self.assertRaises(NoPinError) as cm:
            machine.run()
        self.assertEqual(cm.exception.get_code(), NO_PIN)
        self.assertEqual(machine.state, State.PIN_ABANDONED)
        self.assertEqual(entry.asked, [PIN_ENTRY])
        self.assertEqual(transport.sent_names(), ["GetAddress"])

    def test_pin_then_resend(self):
        entry = RecordingEntry(pin="1234")
        machine, transport = self.run_machine([
            messages.PinMatrixRequest(type=1),
            messages.Success(message="PIN accepted"),
            ADDRESS,
        ], entry)
        result = machine.run()
        self.assertEqual(result.index, 0)
        self.assertEqual(result.message.address, ADDRESS.address)
        self.assertEqual(transport.sent_names(), ["GetAddress", "PinMatrixAck", "GetAddress"])
        self.assertEqual(transport.sent[1].pin, "1234")
        self.assertEqual(transport.sent[2], get_address())

    def test_pin_then_reply(self):
        machine, transport = self.run_machine([messages.PinMatrixRequest(type=1), ADDRESS], RecordingEntry(pin="1"))
        result = machine.run()
        self.assertEqual(result.index, 0)
        self.assertEqual(result.message.address, ADDRESS.address)
        self.assertEqual(transport.sent_names(), ["GetAddress", "PinMatrixAck"])

    def test_pin_then_passphrase(self):
        entry = RecordingEntry(pin="1", passphrase="secret")
        machine, transport = self.run_machine([
            messages.PinMatrixRequest(type=1),
            messages.PassphraseRequest(),
            ADDRESS,
        ], entry)
        result = machine.run()
        self.assertEqual(result.message.address, ADDRESS.address)
        self.assertEqual(entry.asked, [PIN_ENTRY, PASSPHRASE_ENTRY])
        self.assertEqual(transport.sent_names(), ["GetAddress", "PinMatrixAck", "PassphraseAck"])
        self.assertEqual(transport.sent[2].passphrase, "secret")

    def test_passphrase_then_resend(self):
        machine, transport = self.run_machine([
            messages.PassphraseRequest(),
            messages.Success(),
            ADDRESS,
        ], RecordingEntry(passphrase="secret"))
        result = machine.run()
        self.assertEqual(result.message.address, ADDRESS.address)
        self.assertEqual(transport.sent_names(), ["GetAddress", "PassphraseAck", "GetAddress"])

    def test_no_passphrase(self):
        machine, transport = self.run_machine([messages.PassphraseRequest()], RecordingEntry(pin="1"))
        with self.assertRaises(NoPasswordError) as cm:
            machine.run()
        self.assertEqual(cm.exception.get_code(), NO_PASSWORD)
        self.assertEqual(machine.state, State.PASSWORD_ABANDONED)
        self.assertEqual(transport.sent_names(), ["GetAddress"])

    def test_pin_rejected(self):
        for failure, exc in [
            (messages.Failure(code=FailureType.PinInvalid, message="PIN invalid"), PinInvalidError),
            (messages.Failure(code=FailureType.PinCancelled, message="PIN cancelled"), PinCancelledError),
        ]:
            machine, _ = self.run_machine([messages.PinMatrixRequest(type=1), failure], RecordingEntry(pin="1"))
            with self.assertRaises(exc):
                machine.run()
            self.assertEqual(machine.state, State.PIN_REJECTED)

    def test_pin_asked_again(self):
        entry = RecordingEntry(pin="1")
        machine, transport = self.run_machine([
            messages.PinMatrixRequest(type=1),
            messages.Success(),
            messages.PinMatrixRequest(type=1),
        ], entry)
        with self.assertRaises(PinInvalidError):
            machine.run()
        self.assertEqual(machine.state, State.PIN_REJECTED)
        self.assertEqual(entry.asked, [PIN_ENTRY])

    def test_passphrase_asked_again(self):
        machine, _ = self.run_machine([
            messages.PassphraseRequest(),
            messages.Success(),
            messages.PassphraseRequest(),
        ], RecordingEntry(passphrase="secret"))
        with self.assertRaises(UnexpectedReplyError):
            machine.run()

    def test_passphrase_normalized(self):
        machine, transport = self.run_machine([messages.PassphraseRequest(), ADDRESS], RecordingEntry(passphrase="ｐａｓｓ"))
        machine.run()
        self.assertEqual(transport.sent[1].passphrase, "pass")

    def test_passphrase_too_long(self):
        machine, transport = self.run_machine([
            messages.PassphraseRequest(),
            messages.Failure(code=FailureType.ActionCancelled, message="Cancelled"),
        ], RecordingEntry(passphrase="x" * (MAX_PASSPHRASE_LENGTH + 1)))
        with self.assertRaises(BadArgumentError) as cm:
            machine.run()
        self.assertEqual(cm.exception.get_code(), BAD_ARGUMENT)
        self.assertEqual(transport.sent_names(), ["GetAddress", "Cancel"])

    def test_passphrase_max_length(self):
        machine, transport = self.run_machine([messages.PassphraseRequest(), ADDRESS], RecordingEntry(passphrase="x" * MAX_PASSPHRASE_LENGTH))
        machine.run()
        self.assertEqual(transport.sent_names(), ["GetAddress", "PassphraseAck"])


class TestSessionUnlock(unittest.TestCase):
    def test_unlock(self):
        session, transport = make_session([
            messages.PinMatrixRequest(type=1),
            messages.PassphraseRequest(),
            messages.Success(),
            messages.Success(),
        ], RecordingEntry(pin="4321", passphrase="p"))
        session.unlock()
        # the passphrase is acknowledged, then the ping is sent again
        self.assertEqual(transport.sent_names(), ["Ping", "PinMatrixAck", "PassphraseAck", "Ping"])
        self.assertTrue(transport.sent[0].pin_protection)
        self.assertTrue(transport.sent[0].passphrase_protection)
        self.assertEqual(transport.replies, [])

    def test_unlock_without_entry(self):
        session, transport = make_session([messages.PinMatrixRequest(type=1)])
        with self.assertRaises(NoPinError):
            session.unlock()
        self.assertEqual(transport.sent_names(), ["Ping"])


if __name__ == "__main__":
    unittest.main()
