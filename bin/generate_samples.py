#!/usr/bin/env python3
"""
CLI script to generate the reference sample documents.

Writes sample.json, sample-big-array.json and sample-big-object.json with a
fixed seed so repeated runs benchmark identical payloads.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import argparse
import logging

from parsebench.benchmark.documents import generate_samples


def main() -> int:
    """Main entry point for sample generation CLI."""
    parser = argparse.ArgumentParser(
        description="Generate benchmark sample documents",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--output", "-o", default="samples", help="Output directory")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--records", type=int, default=5000, help="Records in the big array/object documents")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.records < 1:
        parser.error("--records must be positive")

    for path in generate_samples(Path(args.output), seed=args.seed, records=args.records):
        print(f"Generated {path} ({path.stat().st_size} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
