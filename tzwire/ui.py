# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Secret Entry
************

The device never learns the PIN digits directly: it shows a scrambled 3x3 keypad and the
host sends the *positions* the user picked, numbered like a numeric keypad.
A :class:`SecretEntry` is asked for those positions and for the passphrase.
Returning an empty string means the user gave up.
"""

import getpass
import sys

PIN_ENTRY = "PIN"
PASSPHRASE_ENTRY = "Passphrase"

PIN_MATRIX_DESCRIPTION = """
Use the numeric keypad to describe number positions. The layout is:
    7 8 9
    4 5 6
    1 2 3
""".strip()

PIN_MATRIX = """
+---+---+---+
| 7 | 8 | 9 |
+---+---+---+
| 4 | 5 | 6 |
+---+---+---+
| 1 | 2 | 3 |
+---+---+---+
""".strip()


def echo(msg: str) -> None:
    print(msg, file=sys.stderr)


def prompt(msg: str, hide_input: bool = False) -> str:
    if hide_input:
        return getpass.getpass(msg + ' :\n')
    else:
        return input(msg + ':\n')


class SecretEntry(object):
    """
    Interface for obtaining a PIN or a passphrase from the user.
    """

    def ask(self, kind: str) -> str:
        """
        Ask the user for a secret.

        :param kind: :data:`PIN_ENTRY` or :data:`PASSPHRASE_ENTRY`
        :return: The secret, or an empty string if the user abandoned the entry
        """
        raise NotImplementedError

    def button_request(self, code: int) -> None:
        """
        Called when the device waits for the user to press a button. Does nothing by default.
        """


class ConsoleEntry(SecretEntry):
    """
    Asks for secrets on the terminal, without echoing them.
    """

    def __init__(self) -> None:
        self.prompt_shown = False

    def ask(self, kind: str) -> str:
        if kind == PIN_ENTRY:
            echo(PIN_MATRIX_DESCRIPTION)
            echo(PIN_MATRIX)
            while True:
                pin = prompt("Please enter PIN", hide_input=True).strip()
                if not pin or pin.isdigit():
                    return pin
                echo("Non-numerical PIN provided, please try again")
        return prompt("Please enter passphrase", hide_input=True)

    def button_request(self, code: int) -> None:
        if not self.prompt_shown:
            echo("Please confirm action on your Trezor device")
        self.prompt_shown = True


class StaticEntry(SecretEntry):
    """
    Answers from fixed values, for non-interactive use.
    """

    def __init__(self, pin: str = "", passphrase: str = "") -> None:
        self.pin = pin
        self.passphrase = passphrase

    def ask(self, kind: str) -> str:
        if kind == PIN_ENTRY:
            return self.pin
        return self.passphrase
