"""
cli.py — command-line entry point.

Usage:
    cdk-prop-audit <packages-dir> [--output missingProperties.json] [--verbose]

Exits 0 on success, 1 if the packages directory layout is missing or the run fails.
"""

import argparse
import logging
import sys
from pathlib import Path

from cdk_prop_audit.analyze import DEFAULT_OUTPUT_NAME, log_summary, run_analysis, write_results
from cdk_prop_audit.errors import MissingInputError

log = logging.getLogger(__name__)


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description="Report Cfn resource properties that CDK constructs do not forward.",
    )
    parser.add_argument("packages_dir", help="CDK packages directory containing @aws-cdk and aws-cdk-lib")
    parser.add_argument(
        "--output",
        help=f"Output JSON file path (default: ./{DEFAULT_OUTPUT_NAME})",
        default=None,
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    output_path = Path(args.output) if args.output else Path.cwd() / DEFAULT_OUTPUT_NAME

    try:
        log.info("Starting analysis...")
        reports = run_analysis(args.packages_dir)
        write_results(reports, output_path)
        log_summary(reports)
    except MissingInputError as e:
        log.error(f"{e}")
        return 1
    except Exception as e:
        log.error(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
