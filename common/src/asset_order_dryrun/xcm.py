"""
Builders for the transfer_assets_using_type_and_then call params.

Everything here returns fresh nested dicts; nothing is cached, and the
asset metadata in `assets` is deep-copied before being embedded.
"""

import copy
from typing import Optional

from .assets import (
    DOT_FIRST,
    KSM_ASSET,
    KUSAMA_ASSET_HUB_PARA_ID,
    NATIVE_TOKEN_LOCATION,
    TOKEN_FIRST,
)

XCM_VERSION_KEY = "V4"
CALL_FUNCTION = "transfer_assets_using_type_and_then"
# Asset Hub exposes PolkadotXcm, relay chains expose XcmPallet
XCM_PALLETS = ("PolkadotXcm", "XcmPallet")


def build_destination() -> dict:
    return {
        XCM_VERSION_KEY: {
            "parents": 2,
            "interior": {
                "X2": [
                    {"GlobalConsensus": "Kusama"},
                    {"Parachain": KUSAMA_ASSET_HUB_PARA_ID},
                ]
            },
        }
    }


def _fungible(location: dict, amount: int) -> dict:
    return {"id": copy.deepcopy(location), "fun": {"Fungible": int(amount)}}


def build_assets(token_location: dict, amount: int, dest_fee: int, order: str) -> dict:
    """
    Versioned asset list holding the bridged token and the DOT fee.

    The two orders produce the same entries, only swapped:
      token-first -> [token, DOT]
      dot-first   -> [DOT, token]
    """
    token = _fungible(token_location, amount)
    dot = _fungible(NATIVE_TOKEN_LOCATION, dest_fee)

    if order == TOKEN_FIRST:
        entries = [token, dot]
    elif order == DOT_FIRST:
        entries = [dot, token]
    else:
        raise ValueError(f"order must be {TOKEN_FIRST!r} or {DOT_FIRST!r}, got {order!r}")

    return {XCM_VERSION_KEY: entries}


def reserve_type_for(token_location: dict) -> str:
    # KSM is reserved on Kusama; everything else here is local to Asset Hub
    if token_location == KSM_ASSET["location"]:
        return "DestinationReserve"
    return "LocalReserve"


def build_fee_asset() -> dict:
    return {XCM_VERSION_KEY: copy.deepcopy(NATIVE_TOKEN_LOCATION)}


def build_custom_xcm(beneficiary: str) -> dict:
    """Single DepositAsset of both counted assets to an AccountId32 beneficiary."""
    return {
        XCM_VERSION_KEY: [
            {
                "DepositAsset": {
                    "assets": {"Wild": {"AllCounted": 2}},
                    "beneficiary": {
                        "parents": 0,
                        "interior": {
                            "X1": [
                                {
                                    "AccountId32": {
                                        "network": None,
                                        "id": beneficiary,
                                    }
                                }
                            ]
                        },
                    },
                }
            }
        ]
    }


def build_transfer_params(
    asset: dict,
    beneficiary: str,
    amount: int,
    dest_fee: Optional[int] = None,
    order: str = TOKEN_FIRST,
) -> dict:
    """
    Full call_params for PolkadotXcm.transfer_assets_using_type_and_then.

    :param asset: descriptor from `assets` (WUD_ASSET, KSM_ASSET, ...)
    :param beneficiary: 32-byte account id as 0x-hex
    :param amount: token amount in planck
    :param dest_fee: DOT fee in planck (defaults to the asset's default_fee)
    :param order: TOKEN_FIRST or DOT_FIRST
    """
    if dest_fee is None:
        dest_fee = asset["default_fee"]
    location = asset["location"]
    return {
        "dest": build_destination(),
        "assets": build_assets(location, amount, dest_fee, order),
        "assets_transfer_type": reserve_type_for(location),
        "remote_fees_id": build_fee_asset(),
        "fees_transfer_type": "LocalReserve",
        "custom_xcm_on_dest": build_custom_xcm(beneficiary),
        "weight_limit": "Unlimited",
    }


def find_xcm_pallet(substrate) -> str:
    """Name of the pallet that carries transfer_assets_using_type_and_then."""
    for pallet in XCM_PALLETS:
        if substrate.get_metadata_call_function(pallet, CALL_FUNCTION) is not None:
            return pallet
    raise ValueError(f"{CALL_FUNCTION} not found in metadata (tried {', '.join(XCM_PALLETS)})")


def compose_transfer_call(substrate, asset: dict, beneficiary: str, amount: int,
                          dest_fee: Optional[int] = None, order: str = TOKEN_FIRST):
    params = build_transfer_params(asset, beneficiary, amount, dest_fee, order)
    return substrate.compose_call(
        call_module=find_xcm_pallet(substrate),
        call_function=CALL_FUNCTION,
        call_params=params,
    )
