#! /usr/bin/env python3

from .commands import (
    enumerate,
    getaddress,
    getfeatures,
    getxpub,
    ping,
    unlock,
)
from .client import TrezorSession, open_session
from .coins import COINS
from .errors import (
    handle_errors,
    DEVICE_CONN_ERROR,
    HELP_TEXT,
    MISSING_ARGUMENTS,
)
from .ui import ConsoleEntry, SecretEntry, StaticEntry
from . import __version__

import argparse
import logging
import json
import sys

from typing import (
    Any,
    Dict,
    IO,
    List,
    NoReturn,
    Optional,
)


def enumerate_handler(args: argparse.Namespace) -> List[Dict[str, Any]]:
    return enumerate()

def features_handler(args: argparse.Namespace, session: TrezorSession) -> Dict[str, Any]:
    return getfeatures(session)

def ping_handler(args: argparse.Namespace, session: TrezorSession) -> Dict[str, str]:
    return ping(session, message=args.message, button_protection=args.button)

def unlock_handler(args: argparse.Namespace, session: TrezorSession) -> Dict[str, bool]:
    return unlock(session)

def getaddress_handler(args: argparse.Namespace, session: TrezorSession) -> Dict[str, str]:
    return getaddress(session, path=args.path, coin=args.coin, mode=args.mode, show_display=args.show)

def getxpub_handler(args: argparse.Namespace, session: TrezorSession) -> Dict[str, str]:
    return getxpub(session, path=args.path, coin=args.coin, mode=args.mode)

class TzwireHelpFormatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter):
    pass

class TzwireArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.formatter_class = TzwireHelpFormatter

    def print_usage(self, file: Optional[IO[str]] = None) -> None:
        if file is None:
            file = sys.stderr
        super().print_usage(file)

    def print_help(self, file: Optional[IO[str]] = None) -> None:
        if file is None:
            file = sys.stderr
        super().print_help(file)
        error = {'error': 'Help text requested', 'code': HELP_TEXT}
        print(json.dumps(error))

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        args = {'prog': self.prog, 'message': message}
        error = {'error': '%(prog)s: error: %(message)s' % args, 'code': MISSING_ARGUMENTS}
        print(json.dumps(error))
        self.exit(2)

def _add_coin_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('path', help="The BIP 32 derivation path, e.g. m/49'/0'/0'/0/0")
    parser.add_argument('--coin', '-c', help='Ticker symbol of the coin', type=str.lower, choices=sorted(COINS), default='btc')
    parser.add_argument('--mode', '-m', help='Address mode: P2PKH, P2SH, or anything else for an external script. Ignored for Ethereum-like coins. Defaults to the coin\'s script type')

def get_parser() -> TzwireArgumentParser:
    parser = TzwireArgumentParser(description='tzwire, version {}.\nAccess and send commands to a Trezor device. Responses are in JSON format.'.format(__version__))
    parser.add_argument('--pin', help='The PIN as keypad positions, used when the device asks for it')
    parser.add_argument('--passphrase', '-p', help='The passphrase, used when the device asks for it')
    parser.add_argument('--interactive', '-i', help='Ask for the PIN and passphrase on the terminal', action='store_true')
    parser.add_argument('--debug', help='Print debug statements', action='store_true')
    parser.add_argument('--version', action='version', version='%(prog)s {}'.format(__version__))

    subparsers = parser.add_subparsers(description='Commands', dest='command')
    # work-around to make subparser required
    subparsers.required = True

    enumerate_parser = subparsers.add_parser('enumerate', help='List all available devices')
    enumerate_parser.set_defaults(func=enumerate_handler)

    features_parser = subparsers.add_parser('features', help='Show the firmware version, label and state of the device')
    features_parser.set_defaults(func=features_handler)

    ping_parser = subparsers.add_parser('ping', help='Check that the device responds')
    ping_parser.add_argument('message', help='The message to be echoed', nargs='?', default='')
    ping_parser.add_argument('--button', help='Require a button press on the device', action='store_true')
    ping_parser.set_defaults(func=ping_handler)

    unlock_parser = subparsers.add_parser('unlock', help='Enter the PIN and passphrase')
    unlock_parser.set_defaults(func=unlock_handler)

    getaddress_parser = subparsers.add_parser('getaddress', help='Derive an address')
    _add_coin_args(getaddress_parser)
    getaddress_parser.add_argument('--show', help='Also show the address on the device', action='store_true')
    getaddress_parser.set_defaults(func=getaddress_handler)

    getxpub_parser = subparsers.add_parser('getxpub', help='Get an extended public key')
    _add_coin_args(getxpub_parser)
    getxpub_parser.set_defaults(func=getxpub_handler)

    return parser

def get_entry(args: argparse.Namespace) -> SecretEntry:
    if args.interactive:
        return ConsoleEntry()
    return StaticEntry(pin=args.pin or "", passphrase=args.passphrase or "")

def process_commands(cli_args: List[str]) -> Any:
    parser = get_parser()
    args = parser.parse_args(cli_args)
    command = args.command
    result: Dict[str, Any] = {}

    # Setup debug logging
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    # List all available devices
    if command == 'enumerate':
        return args.func(args)

    with handle_errors(result=result, code=DEVICE_CONN_ERROR, debug=args.debug):
        session = open_session(get_entry(args))
    if 'error' in result:
        return result

    # Do the commands
    with handle_errors(result=result, debug=args.debug):
        result = args.func(args, session)

    with handle_errors(result=result, debug=args.debug):
        session.close()

    return result

def main() -> None:
    result = process_commands(sys.argv[1:])
    print(json.dumps(result))
