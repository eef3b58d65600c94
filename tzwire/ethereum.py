# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Ethereum and derivatives
************************

The device has one set of Ethereum messages for all chains. The coin must still be known,
the mode is accepted for symmetry with :mod:`tzwire.btc` and ignored.
"""

from typing import Optional

from . import messages
from .client import TrezorSession
from .coins import get_coin_profile
from .key import parse_path


def get_address(session: TrezorSession, path: str, coin: str = "eth", mode: Optional[str] = None, show_display: bool = False) -> str:
    get_coin_profile(coin)
    req = messages.EthereumGetAddress(address_n=parse_path(path), show_display=show_display)
    result = session.call(req, messages.EthereumAddress)
    return result.message.address


def get_xpub(session: TrezorSession, path: str, coin: str = "eth", mode: Optional[str] = None) -> str:
    get_coin_profile(coin)
    req = messages.EthereumGetPublicKey(address_n=parse_path(path))
    result = session.call(req, messages.EthereumPublicKey)
    return result.message.xpub
