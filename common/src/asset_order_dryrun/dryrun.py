"""
DryRunApi.dry_run_call through substrate-interface, plus a small
classification of what came back.

substrate-interface only knows the runtime APIs listed in its type
registry, so the DryRunApi signature is registered before use, the same
way custom signed extensions are pushed into the registry. The runtime
has to be initialised first: the types are resolved from its metadata,
and loading a runtime resets the registry.
"""

from typing import NamedTuple, Optional, Tuple

from substrateinterface.exceptions import SubstrateRequestException
from websocket import WebSocketException

from .xcm import compose_transfer_call

DEFAULT_XCM_VERSION = 4

SUCCESS = "success"
EXECUTION_ERROR = "execution_error"
CALL_ERROR = "call_error"
TRANSPORT_ERROR = "transport_error"
# raised locally: bad registry, encode failure, unexpected result shape
ERROR = "error"

TRANSPORT_EXCEPTIONS = (SubstrateRequestException, WebSocketException, OSError)

# path suffixes in the metadata portable registry
ORIGIN_TYPE = "OriginCaller"
EFFECTS_TYPE = "dry_run::CallDryRunEffects"
ERROR_TYPE = "dry_run::Error"


class DryRunOutcome(NamedTuple):
    symbol: str
    order: str
    status: str
    error: Optional[object] = None

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCESS

    def as_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "order": self.order,
            "status": self.status,
            "success": self.succeeded,
            "error": self.error,
        }


# ----------------- registry -----------------
def _portable_type(substrate, suffix: str) -> str:
    """Resolve a metadata type by the tail of its path, e.g. 'OriginCaller' -> 'scale_info::123'."""
    metadata = getattr(substrate, "metadata", None)
    if metadata is None:
        raise ValueError("runtime metadata not loaded; call init_runtime() before registering DryRunApi")
    for entry in metadata.portable_registry.value["types"]:
        path = "::".join(entry.get("type", {}).get("path") or [])
        if path == suffix or path.endswith("::" + suffix):
            return f"scale_info::{entry['id']}"
    raise ValueError(f"type {suffix!r} not found in runtime metadata")


def register_dry_run_api(substrate) -> dict:
    """
    Push the DryRunApi.dry_run_call signature into the client's type registry.
    Returns the definition that was registered.
    """
    origin_type = _portable_type(substrate, ORIGIN_TYPE)
    effects_type = _portable_type(substrate, EFFECTS_TYPE)
    error_type = _portable_type(substrate, ERROR_TYPE)

    definition = {
        "DryRunApi": {
            "methods": {
                "dry_run_call": {
                    "description": "Dry run call",
                    "params": [
                        {"name": "origin", "type": origin_type},
                        {"name": "call", "type": "Call"},
                        {"name": "result_xcms_version", "type": "u32"},
                    ],
                    "type": f"Result<{effects_type}, {error_type}>",
                }
            }
        }
    }
    substrate.runtime_config.update_type_registry({"runtime_api": definition})
    return definition


def is_dry_run_api_registered(substrate) -> bool:
    runtime_apis = substrate.runtime_config.type_registry.get("runtime_api") or {}
    return "dry_run_call" in runtime_apis.get("DryRunApi", {}).get("methods", {})


def dry_run_call(substrate, origin_account: str, call, xcm_version: int = DEFAULT_XCM_VERSION):
    """
    Dry-run `call` as a signed origin. Returns the decoded result value
    (a dict with a single Ok/Err key).
    """
    # a runtime (re)load clears runtime_api from the registry
    if not is_dry_run_api_registered(substrate):
        register_dry_run_api(substrate)
    result = substrate.runtime_call(
        "DryRunApi",
        "dry_run_call",
        {
            "origin": {"system": {"Signed": origin_account}},
            "call": call,
            "result_xcms_version": xcm_version,
        },
    )
    return getattr(result, "value", result)


# ----------------- classification -----------------
def _unwrap_result(value) -> Tuple[Optional[bool], object]:
    """(True, ok_payload) / (False, err_payload) / (None, value) for a decoded Result."""
    if isinstance(value, dict) and len(value) == 1:
        key, payload = next(iter(value.items()))
        if str(key).lower() == "ok":
            return True, payload
        if str(key).lower() == "err":
            return False, payload
    return None, value


def classify_dry_run(value) -> Tuple[str, Optional[object]]:
    """
    Map a decoded dry_run_call value to (status, error_details).

    outer Err                       -> call_error
    outer Ok, execution_result Err  -> execution_error
    outer Ok, execution_result Ok   -> success
    """
    ok, payload = _unwrap_result(value)
    if ok is None:
        raise ValueError(f"unexpected dry run result shape: {value!r}")
    if not ok:
        return CALL_ERROR, payload

    if not isinstance(payload, dict) or "execution_result" not in payload:
        raise ValueError(f"dry run effects without execution_result: {payload!r}")
    exec_ok, exec_payload = _unwrap_result(payload["execution_result"])
    if exec_ok is None:
        raise ValueError(f"unexpected execution_result shape: {payload['execution_result']!r}")
    if not exec_ok:
        return EXECUTION_ERROR, exec_payload
    return SUCCESS, None


# ----------------- one variant -----------------
def run_dry_run(substrate, asset: dict, order: str, account: str, amount: int,
                fee: Optional[int] = None, xcm_version: int = DEFAULT_XCM_VERSION) -> DryRunOutcome:
    """
    Compose one ordering variant, dry-run it and classify the result.

    Compose errors propagate (the call itself is wrong). Node and network
    failures become transport_error; anything else raised while running
    or reading the dry run becomes error, tagged with the exception type.
    """
    call = compose_transfer_call(substrate, asset, account, amount, fee, order)
    try:
        value = dry_run_call(substrate, account, call, xcm_version)
        status, error = classify_dry_run(value)
    except TRANSPORT_EXCEPTIONS as e:
        return DryRunOutcome(asset["symbol"], order, TRANSPORT_ERROR, f"{type(e).__name__}: {e}")
    except Exception as e:
        return DryRunOutcome(asset["symbol"], order, ERROR, f"{type(e).__name__}: {e}")
    return DryRunOutcome(asset["symbol"], order, status, error)
