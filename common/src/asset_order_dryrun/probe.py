#!/usr/bin/env python3
"""
probe.py

Dry-run PolkadotXcm.transfer_assets_using_type_and_then on Polkadot Asset Hub
twice per asset, once with the token first in `assets` and once with DOT
first, and report which ordering executes.

Observed on mainnet: WUD only dry-runs cleanly token-first, KSM only
DOT-first; the other ordering fails inside the runtime.

Dependencies:
    pip install substrate-interface python-dotenv

Examples:
    python3 protocol/Polkadot/asset_ordering_dryrun.py
    python3 protocol/Polkadot/asset_ordering_dryrun.py --asset KSM
    python3 protocol/Polkadot/asset_ordering_dryrun.py --endpoint ws://127.0.0.1:9944 --out report.json
"""

import argparse
import json
import sys
from datetime import datetime
from typing import List, Optional

from substrateinterface import SubstrateInterface

from . import config
from .assets import ASSETS, DOT_DECIMALS, ORDERS, TOKEN_FIRST, format_amount, get_asset
from .dryrun import (
    CALL_ERROR,
    DEFAULT_XCM_VERSION,
    ERROR,
    EXECUTION_ERROR,
    SUCCESS,
    TRANSPORT_ERROR,
    DryRunOutcome,
    register_dry_run_api,
    run_dry_run,
)

MARKS = {
    SUCCESS: ("✅", "SUCCESS"),
    EXECUTION_ERROR: ("❌", "FAILED"),
    CALL_ERROR: ("❌", "FAILED"),
    TRANSPORT_ERROR: ("❌", "EXCEPTION"),
    ERROR: ("❌", "EXCEPTION"),
}


def connect(url: str) -> SubstrateInterface:
    substrate = SubstrateInterface(url=url)
    # metadata must be loaded before DryRunApi types can be resolved
    substrate.init_runtime()
    register_dry_run_api(substrate)
    return substrate


def print_outcome(outcome: DryRunOutcome):
    mark, label = MARKS[outcome.status]
    order = "token-first" if outcome.order == TOKEN_FIRST else "DOT-first"
    if outcome.status in (TRANSPORT_ERROR, ERROR):
        print(f"   {mark} {outcome.symbol} {order}: {label} - {outcome.error}")
        return
    print(f"   {mark} {outcome.symbol} {order}: {label}")
    if not outcome.succeeded:
        print(f"   📋 Error details ({outcome.status}):")
        print(json.dumps(outcome.error, indent=2, default=str))


def probe_asset_ordering(substrate, asset: dict, account: str, amount: int,
                         fee: Optional[int] = None, xcm_version: int = DEFAULT_XCM_VERSION) -> List[DryRunOutcome]:
    """Run both orderings for one asset, in sequence."""
    fee = asset["default_fee"] if fee is None else fee
    print(f"\n{asset['symbol']} ({asset['name']}): amount {format_amount(amount, asset['decimals'])} "
          f"{asset['symbol']}, DOT fee {format_amount(fee, DOT_DECIMALS)}")

    outcomes = []
    for i, order in enumerate(ORDERS, start=1):
        label = "token-first" if order == TOKEN_FIRST else "DOT-first"
        print(f"{i}. Testing {asset['symbol']} with {label} ordering...")
        outcome = run_dry_run(substrate, asset, order, account, amount, fee, xcm_version)
        print_outcome(outcome)
        outcomes.append(outcome)
    return outcomes


def summarize(outcomes: List[DryRunOutcome]) -> dict:
    """
    Per-asset view: which orderings executed and whether that matches the
    ordering known to work.
    """
    summary = {}
    for o in outcomes:
        entry = summary.setdefault(o.symbol, {
            "working_order": ASSETS[o.symbol]["working_order"],
            "results": {},
        })
        entry["results"][o.order] = o.status
    for symbol, entry in summary.items():
        ok_orders = [k for k, v in entry["results"].items() if v == SUCCESS]
        entry["matches_known_behaviour"] = ok_orders == [entry["working_order"]]
    return summary


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Dry-run transfer_assets_using_type_and_then with both asset orderings.")
    ap.add_argument("--endpoint", default=None,
                    help=f"Asset Hub WS endpoint (default: $POLKADOT_ASSET_HUB_WSS or {config.DEFAULT_ENDPOINT})")
    ap.add_argument("--account", default=None, help="Origin / beneficiary account id (0x-hex)")
    ap.add_argument("--amount", type=int, default=None, help="Token amount in planck")
    ap.add_argument("--asset", action="append", default=None,
                    help=f"Asset symbol to test, repeatable (default: {', '.join(ASSETS)})")
    ap.add_argument("--xcm-version", type=int, default=None, help="result_xcms_version passed to the dry run")
    ap.add_argument("--out", default=None, help="Write the JSON report to this file")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    url = args.endpoint or config.endpoint()
    account = args.account or config.account()
    amount = args.amount if args.amount is not None else config.amount()
    xcm_version = args.xcm_version if args.xcm_version is not None else config.xcm_version()
    try:
        assets = [get_asset(s) for s in (args.asset or list(ASSETS))]
    except KeyError as e:
        print(f"❌ Error: {e.args[0]}", file=sys.stderr)
        return 2

    print("🔍 Asset ordering dry run: PolkadotXcm.transfer_assets_using_type_and_then")
    print("=" * 60)
    print(f"📡 Connecting to Polkadot Asset Hub: {url}")

    try:
        substrate = connect(url)
    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    outcomes = []
    try:
        for asset in assets:
            outcomes.extend(probe_asset_ordering(substrate, asset, account, amount, xcm_version=xcm_version))
    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    finally:
        substrate.close()

    summary = summarize(outcomes)
    print("\n=== Summary ===")
    for symbol, entry in summary.items():
        status = "✓" if entry["matches_known_behaviour"] else "✗"
        results = ", ".join(f"{k}={v}" for k, v in entry["results"].items())
        print(f"{symbol}: {results} (expected {entry['working_order']}) {status}")

    if args.out:
        report = {
            "timestamp": datetime.now().isoformat(),
            "endpoint": url,
            "account": account,
            "amount": amount,
            "xcm_version": xcm_version,
            "outcomes": [o.as_dict() for o in outcomes],
            "summary": summary,
        }
        try:
            with open(args.out, "w") as f:
                json.dump(report, f, indent=2, default=str)
            print(f"\nWrote report to {args.out}", file=sys.stderr)
        except OSError as e:
            print(f"Failed to write {args.out}: {e}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
