import pytest
from scalecodec.base import RuntimeConfigurationObject

from asset_order_dryrun.assets import NATIVE_TOKEN_LOCATION, KSM_ASSET, WUD_ASSET


class FakeScale:
    def __init__(self, value):
        self.value = value


class FakeMetadata:
    def __init__(self, types):
        self.portable_registry = FakeScale({"types": types})


def ok_effects():
    return {"Ok": {"execution_result": {"Ok": {"actual_weight": None, "pays_fee": "Yes"}},
                   "emitted_events": [], "local_xcm": None, "forwarded_xcms": []}}


def exec_failure(error=None):
    error = error or {"Module": {"index": 31, "error": "0x18000000"}}
    return {"Ok": {"execution_result": {"Err": {"post_info": {}, "error": error}},
                   "emitted_events": [], "local_xcm": None, "forwarded_xcms": []}}


def order_of(call):
    first = call["call_args"]["assets"]["V4"][0]["id"]
    return "dot-first" if first == NATIVE_TOKEN_LOCATION else "token-first"


def token_of(call):
    for entry in call["call_args"]["assets"]["V4"]:
        if entry["id"] == WUD_ASSET["location"]:
            return "WUD"
        if entry["id"] == KSM_ASSET["location"]:
            return "KSM"
    return None


def mainnet_like(call):
    """WUD executes only token-first, KSM only DOT-first."""
    working = {"WUD": "token-first", "KSM": "dot-first"}
    if working[token_of(call)] == order_of(call):
        return ok_effects()
    return exec_failure()


DRY_RUN_TYPES = [
    {"id": 7, "type": {"path": ["asset_hub_polkadot_runtime", "OriginCaller"]}},
    {"id": 8, "type": {"path": ["xcm_runtime_apis", "dry_run", "CallDryRunEffects"]}},
    {"id": 9, "type": {"path": ["xcm_runtime_apis", "dry_run", "Error"]}},
    {"id": 10, "type": {"path": ["sp_runtime", "DispatchError"]}},
]


class FakeSubstrate:
    """
    Stand-in for SubstrateInterface covering the calls the probe makes.

    Like the real client, metadata is only loaded by init_runtime(), which
    resets the type registry (dropping runtime_api) on every fresh load,
    and runtime_call refuses APIs missing from the registry.
    """

    def __init__(self, pallets=("PolkadotXcm",), responder=mainnet_like, types=DRY_RUN_TYPES):
        self.pallets = set(pallets)
        self.responder = responder
        self.types = list(types)
        self.runtime_config = RuntimeConfigurationObject(implements_scale_info=True)
        self.metadata = None
        self.runtime_loads = 0
        self.composed = []
        self.runtime_calls = []
        self.closed = False

    def init_runtime(self, block_hash=None, block_id=None):
        if self.metadata is not None:
            return
        self.metadata = FakeMetadata(self.types)
        self.runtime_config.clear_type_registry()
        self.runtime_loads += 1

    def upgrade_runtime(self):
        self.metadata = None
        self.init_runtime()

    def get_metadata_call_function(self, module_name, call_function_name, block_hash=None):
        self.init_runtime()
        if module_name in self.pallets:
            return {"module": module_name, "name": call_function_name}
        return None

    def compose_call(self, call_module, call_function, call_params=None, block_hash=None):
        self.init_runtime()
        call = {"call_module": call_module, "call_function": call_function, "call_args": call_params}
        self.composed.append(call)
        return call

    def runtime_call(self, api, method, params=None, block_hash=None):
        self.init_runtime()
        runtime_apis = self.runtime_config.type_registry.get("runtime_api") or {}
        if method not in runtime_apis.get(api, {}).get("methods", {}):
            raise ValueError(f"Runtime API Call '{api}.{method}' not found in registry")
        self.runtime_calls.append((api, method, params))
        value = self.responder(params["call"])
        if isinstance(value, Exception):
            raise value
        return FakeScale(value)

    def close(self):
        self.closed = True


@pytest.fixture
def substrate():
    return FakeSubstrate()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("POLKADOT_ASSET_HUB_WSS", "DRYRUN_ACCOUNT", "DRYRUN_AMOUNT", "XCM_VERSION"):
        monkeypatch.delenv(name, raising=False)
