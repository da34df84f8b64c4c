#!/usr/bin/env python3
"""
Asset ordering dry run against Polkadot Asset Hub.

    pip install -e .
    python3 protocol/Polkadot/asset_ordering_dryrun.py --asset WUD
"""

import sys

from asset_order_dryrun.probe import main

if __name__ == "__main__":
    sys.exit(main())
