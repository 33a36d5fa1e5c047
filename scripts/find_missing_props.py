#!/usr/bin/env python3
"""
find_missing_props.py — run the audit from a checkout (after `pip install -e .`).

Usage:
    python3 scripts/find_missing_props.py <packages-dir> --output missingProperties.json
"""

import sys

from cdk_prop_audit.cli import main

if __name__ == "__main__":
    sys.exit(main())
