# Copyright (c) 2024 The tzwire developers
# Distributed under the MIT software license, see the accompanying
# file COPYING or http://www.opensource.org/licenses/mit-license.php.

"""
Coins
*****

Maps the ticker symbols accepted by tzwire to the coin names and script types the device expects.
"""

from enum import Enum

from typing import (
    Dict,
    NamedTuple,
    Optional,
)

from .errors import UnknownCoinError
from .messages import InputScriptType


class CoinFamily(Enum):
    """
    Which set of device messages a coin uses
    """
    BITCOIN = 0 #: Bitcoin and its derivatives
    ETHEREUM = 1 #: Ethereum and its derivatives

    def __str__(self) -> str:
        return str(self.name).lower()


class CoinProfile(NamedTuple):
    coin_name: str #: Coin name sent to the device, empty for the device default
    script_type: InputScriptType #: Script type used when no mode is given
    family: CoinFamily


COINS: Dict[str, CoinProfile] = {
    "btc": CoinProfile("Bitcoin", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "bch": CoinProfile("Bcash", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "btg": CoinProfile("Bgold", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "dash": CoinProfile("Dash", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "dgb": CoinProfile("DigiByte", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "doge": CoinProfile("Dogecoin", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "ltc": CoinProfile("Litecoin", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "nmc": CoinProfile("Namecoin", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "vtc": CoinProfile("Vertcoin", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "zec": CoinProfile("Zcash", InputScriptType.SPENDADDRESS, CoinFamily.BITCOIN),
    "eth": CoinProfile("Ethereum", InputScriptType.SPENDADDRESS, CoinFamily.ETHEREUM),
    "etc": CoinProfile("", InputScriptType.SPENDADDRESS, CoinFamily.ETHEREUM),
}

SCRIPT_TYPES: Dict[str, InputScriptType] = {
    "P2PKH": InputScriptType.SPENDADDRESS,
    "P2SH": InputScriptType.SPENDP2SHWITNESS,
}


def get_coin_profile(ticker: str) -> CoinProfile:
    """
    Look up a coin by its ticker symbol, ignoring case.

    :raises: UnknownCoinError: if the ticker is not in :data:`COINS`
    """
    try:
        return COINS[ticker.lower()]
    except KeyError:
        raise UnknownCoinError(ticker)


def get_script_type(mode: Optional[str], default: InputScriptType = InputScriptType.SPENDADDRESS) -> InputScriptType:
    """
    Resolve an address mode to a script type. ``None`` selects ``default``, unknown modes select ``EXTERNAL``.
    """
    if mode is None:
        return default
    return SCRIPT_TYPES.get(mode.upper(), InputScriptType.EXTERNAL)
