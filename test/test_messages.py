#! /usr/bin/env python3

import unittest

from tzwire import messages
from tzwire.errors import MARSHAL_ERROR, MarshalError
from tzwire.messages import InputScriptType, MessageType


class TestMessages(unittest.TestCase):
    def test_type_tags(self):
        self.assertEqual(messages.message_type(messages.Initialize), 0)
        self.assertEqual(messages.message_type(messages.Features()), 17)
        self.assertEqual(messages.message_type(messages.PassphraseAck), 42)
        self.assertEqual(messages.message_type(messages.EthereumGetPublicKey), 450)
        self.assertEqual(messages.message_type(messages.EthereumPublicKey), 451)

    def test_every_tag_has_a_class(self):
        for tag in MessageType:
            cls = messages.get_class(tag)
            self.assertEqual(messages.message_type(cls), tag)

    def test_unknown_tag(self):
        self.assertEqual(messages.message_name(1234), "Unknown(1234)")
        self.assertEqual(messages.message_name(26), "ButtonRequest")
        with self.assertRaises(ValueError):
            messages.get_class(1234)

    def test_fields(self):
        req = messages.GetAddress(address_n=[0x8000002C, 0], coin_name="Bitcoin", script_type=InputScriptType.SPENDP2SHWITNESS)
        parsed = messages.parse(messages.GetAddress, messages.serialize(req))
        self.assertEqual(list(parsed.address_n), [0x8000002C, 0])
        self.assertEqual(parsed.coin_name, "Bitcoin")
        self.assertEqual(parsed.script_type, 4)
        self.assertFalse(parsed.show_display)

    def test_unset_field(self):
        parsed = messages.parse(messages.GetAddress, messages.serialize(messages.GetAddress()))
        self.assertFalse(parsed.HasField("coin_name"))

    def test_parse_garbage(self):
        with self.assertRaises(MarshalError) as cm:
            messages.parse(messages.Features, b"\xff\xff\xff")
        self.assertEqual(cm.exception.get_code(), MARSHAL_ERROR)


if __name__ == "__main__":
    unittest.main()
