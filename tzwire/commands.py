#! /usr/bin/env python3

"""
Commands
********

The functions in this module are the primary way to use tzwire from other programs.
Each function that takes a ``session`` uses a :class:`~tzwire.client.TrezorSession`,
which can be obtained with :func:`~tzwire.client.open_session`.
All of them return dictionaries that can be serialized to JSON.
"""

from types import ModuleType
from typing import (
    Any,
    Dict,
    List,
    Optional,
)

from . import btc, ethereum
from .client import TrezorSession
from .coins import CoinFamily, get_coin_profile
from .errors import handle_errors
from .transport import all_transports


def _coin_module(coin: str) -> ModuleType:
    profile = get_coin_profile(coin)
    if profile.family is CoinFamily.ETHEREUM:
        return ethereum
    return btc


def enumerate() -> List[Dict[str, Any]]:
    """
    List the connected devices without opening them.

    :return: One dictionary per device with its ``type`` and ``path``, or an ``error`` for a transport that could not be enumerated
    """
    result: List[Dict[str, Any]] = []
    for transport in all_transports():
        d: Dict[str, Any] = {}
        with handle_errors(msg="Could not enumerate {}:".format(transport.PATH_PREFIX), result=d):
            for dev in transport.enumerate():
                result.append({'type': 'trezor', 'transport': transport.PATH_PREFIX, 'path': dev.get_path()})
        if 'error' in d:
            result.append(d)
    return result


def getfeatures(session: TrezorSession) -> Dict[str, Any]:
    """
    Get what the device reported about itself when the session was opened.
    """
    f = session.features
    return {
        'label': session.label,
        'firmware': str(session.firmware),
        'vendor': f.vendor,
        'model': f.model,
        'device_id': f.device_id,
        'initialized': f.initialized,
        'pin_protection': f.pin_protection,
        'passphrase_protection': f.passphrase_protection,
        'unlocked': f.unlocked,
    }


def ping(session: TrezorSession, message: str = "", button_protection: bool = False) -> Dict[str, str]:
    return {'message': session.ping(message, button_protection)}


def unlock(session: TrezorSession) -> Dict[str, bool]:
    """
    Enter the PIN and passphrase, if the device asks for them.
    """
    session.unlock()
    return {'success': True}


def getaddress(session: TrezorSession, path: str, coin: str = "btc", mode: Optional[str] = None, show_display: bool = False) -> Dict[str, str]:
    """
    Derive the address at a BIP 32 path.

    :param session: The session to use
    :param path: The derivation path
    :param coin: The ticker symbol of the coin, see :data:`~tzwire.coins.COINS`
    :param mode: The address mode (``P2PKH``, ``P2SH``), ignored for Ethereum-like coins
    :param show_display: Whether to also show the address on the device
    :return: A dictionary containing the ``address``
    """
    return {'address': _coin_module(coin).get_address(session, path, coin, mode, show_display)}


def getxpub(session: TrezorSession, path: str, coin: str = "btc", mode: Optional[str] = None) -> Dict[str, str]:
    """
    Get the extended public key at a BIP 32 path.

    :return: A dictionary containing the ``xpub``
    """
    return {'xpub': _coin_module(coin).get_xpub(session, path, coin, mode)}
