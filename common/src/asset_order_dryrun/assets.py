"""
Static asset metadata for the ordering probe.

Locations are XCM v4 shapes in the form substrate-interface expects
when encoding call params (enum variants as dict keys / plain strings).
"""

from decimal import Decimal
from typing import Dict

TOKEN_FIRST = "token-first"
DOT_FIRST = "dot-first"
ORDERS = (TOKEN_FIRST, DOT_FIRST)

# GAVUN WUD, bridged from Ethereum, lives in the Assets pallet (instance 50)
WUD_ASSET = {
    "token": "0x5fdcd48f09fb67de3d202cd854b372aec1100ed5",
    "name": "GAVUN WUD",
    "symbol": "WUD",
    "decimals": 10,
    "location": {
        "parents": 0,
        "interior": {
            "X2": [
                {"PalletInstance": 50},
                {"GeneralIndex": 31337},
            ]
        },
    },
    "asset_id": "31337",
    "default_fee": 29876830,
    # ordering that dry-runs cleanly on mainnet
    "working_order": TOKEN_FIRST,
}

KSM_ASSET = {
    "token": "0x12bbfdc9e813614eef8dc8a2560b0efbeaf7c2ab",
    "name": "Kusama",
    "symbol": "KSM",
    "decimals": 12,
    "location": {
        "parents": 2,
        "interior": {
            "X1": [
                {"GlobalConsensus": "Kusama"},
            ]
        },
    },
    "asset_id": None,
    "default_fee": 18718740000,
    "working_order": DOT_FIRST,
}

# Native DOT as seen from Polkadot Asset Hub
NATIVE_TOKEN_LOCATION = {
    "parents": 1,
    "interior": "Here",
}

DOT_DECIMALS = 10

KUSAMA_ASSET_HUB_PARA_ID = 1000

ASSETS: Dict[str, dict] = {
    WUD_ASSET["symbol"]: WUD_ASSET,
    KSM_ASSET["symbol"]: KSM_ASSET,
}


def get_asset(symbol: str) -> dict:
    """Look up an asset descriptor by symbol (case-insensitive)."""
    try:
        return ASSETS[symbol.strip().upper()]
    except KeyError:
        raise KeyError(f"unknown asset {symbol!r}; known: {', '.join(ASSETS)}") from None


def format_amount(raw: int, decimals: int) -> str:
    """
    Render a planck amount as a token amount, e.g. 50000000000 @ 10 -> "5".
    """
    value = Decimal(int(raw)).scaleb(-decimals)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
