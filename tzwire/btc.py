# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Bitcoin and derivatives
***********************
"""

from typing import Optional

from . import messages
from .client import TrezorSession
from .coins import get_coin_profile, get_script_type
from .key import parse_path

CASHADDR_PREFIX = "bitcoincash:"


def _strip_prefix(address: str) -> str:
    if address.startswith(CASHADDR_PREFIX):
        return address[len(CASHADDR_PREFIX):]
    return address


def _request_fields(path: str, coin: str, mode: Optional[str]) -> dict:
    profile = get_coin_profile(coin)
    fields = {
        "address_n": parse_path(path),
        "script_type": get_script_type(mode, profile.script_type),
    }
    # an empty coin name leaves the choice to the device
    if profile.coin_name:
        fields["coin_name"] = profile.coin_name
    return fields


def get_address(session: TrezorSession, path: str, coin: str = "btc", mode: Optional[str] = None, show_display: bool = False) -> str:
    """
    Derive the address at a BIP 32 path.

    A leading ``bitcoincash:`` is removed from the address.

    :param session: The session to use
    :param path: The derivation path, e.g. ``m/44'/145'/0'/0/0``
    :param coin: The ticker symbol of the coin
    :param mode: ``P2PKH``, ``P2SH`` or another mode, ``None`` for the coin's default
    :param show_display: Whether the device should also show the address
    :return: The address
    """
    req = messages.GetAddress(show_display=show_display, **_request_fields(path, coin, mode))
    result = session.call(req, messages.Address)
    return _strip_prefix(result.message.address)


def get_xpub(session: TrezorSession, path: str, coin: str = "btc", mode: Optional[str] = None) -> str:
    """
    Get the extended public key at a BIP 32 path.

    Takes the same arguments as :func:`get_address`.
    """
    req = messages.GetPublicKey(**_request_fields(path, coin, mode))
    result = session.call(req, messages.PublicKey)
    return result.message.xpub
