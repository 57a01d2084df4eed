#!/usr/bin/env python3
"""
Bill text spotcheck runner.

Usage:
    python spotcheck.py run
    python spotcheck.py ingest --config config.yaml
    python spotcheck.py compare --bill S1234-2015 --bill A5678-2015
"""
import argparse
import logging

from spotcheck_core.models import BaseBillId
from spotcheck_core.orchestrator import PHASES, run_spotcheck


def main():
    """Main entry point for script."""
    parser = argparse.ArgumentParser(description="Spot-check stored bill text against scraped LBDC pages")
    parser.add_argument("phase", nargs="?", default="run", choices=PHASES, help="Phase to run (default: run)")
    parser.add_argument("--config", default="config.yaml", help="Path to config file")
    parser.add_argument("--bill", action="append", default=None,
                        help="Bill to compare as <printNo>-<session> (e.g., S1234-2015); repeatable")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    base_bill_ids = [BaseBillId.parse(b) for b in args.bill] if args.bill else None
    run_spotcheck(args.phase, config_path=args.config, base_bill_ids=base_bill_ids)


if __name__ == "__main__":
    main()
