import os
from dotenv import load_dotenv

from .dryrun import DEFAULT_XCM_VERSION

# ----------------- setup -----------------
load_dotenv()

DEFAULT_ENDPOINT = "wss://polkadot-asset-hub-rpc.polkadot.io"
DEFAULT_ACCOUNT = "0x460411e07f93dc4bc2b3a6cb67dad89ca26e8a54054d13916f74c982595c2e0e"
DEFAULT_AMOUNT = 50000000000


def endpoint() -> str:
    return os.getenv("POLKADOT_ASSET_HUB_WSS", DEFAULT_ENDPOINT)


def account() -> str:
    return os.getenv("DRYRUN_ACCOUNT", DEFAULT_ACCOUNT)


def amount() -> int:
    return int(os.getenv("DRYRUN_AMOUNT", DEFAULT_AMOUNT))


def xcm_version() -> int:
    return int(os.getenv("XCM_VERSION", DEFAULT_XCM_VERSION))
