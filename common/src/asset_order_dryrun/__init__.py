"""
Dry-run probe for asset ordering in PolkadotXcm.transfer_assets_using_type_and_then
on Polkadot Asset Hub.
"""

__version__ = "0.1.0"
