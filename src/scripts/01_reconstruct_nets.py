#!/usr/bin/env python3
"""
RECONSTRUCT PERIODIC GRAPHS OF A NET DATABASE
=============================================

Infers the bonds of every net from its vertex and edge-midpoint
positions and keeps the graphs reproducing the coordination sequences.

INPUTS
------

  - records.json: list of NetRecord dictionaries (NetRecord.to_dict)
  - --reference ref.json: {name: graph string} of known nets (optional)

OUTPUTS
-------

  - --output graphs.json: {name: graph string} of the reconstructed nets
  - summary table: strategy counts, failed and errored nets,
    symmetry issues reported by the parser

USAGE
-----

    python3 01_reconstruct_nets.py records.json --reference rcsr.json --output new.json
    python3 01_reconstruct_nets.py records.json --threads --workers 4 --all
"""

import argparse
import logging
import sys
from collections import Counter
from pathlib import Path


def _find_src():
    """Find src/ by looking for crystal_graphs/ subdirectory."""
    current = Path(__file__).resolve().parent
    for _ in range(10):  # max 10 levels up
        for candidate in (current, current / 'src'):
            if (candidate / 'crystal_graphs').is_dir():
                return candidate
        current = current.parent
    raise RuntimeError("Cannot find src/crystal_graphs directory")

sys.path.insert(0, str(_find_src()))

from crystal_graphs.pipeline import (
    dump_graphs,
    extract_graphs,
    find_deaugmentable,
    load_records,
    load_reference,
)


def print_summary(result, deaugmentable=None):
    print("=" * 70)
    print("RECONSTRUCTION SUMMARY")
    print("=" * 70)
    print(f"\n{'Strategy':<20} {'Nets':>8}")
    print("-" * 30)
    for strategy, count in sorted(Counter(result.strategies.values()).items()):
        print(f"{strategy:<20} {count:>8}")
    print("-" * 30)
    print(f"{'total':<20} {len(result.graphs):>8}")

    if result.failed:
        print(f"\nFailed ({len(result.failed)}): {', '.join(result.failed)}")
    if result.errored:
        print(f"\nErrored ({len(result.errored)}):")
        for name, message in result.errored.items():
            print(f"  {name}: {message}")
    if result.symmetry_issues:
        print(f"\nSymmetry issues ({len(result.symmetry_issues)}):")
        for name, symbol, spacegroup in result.symmetry_issues:
            print(f"  {name}: {symbol} (space group {spacegroup})")
    if result.mismatches:
        print(f"\nDisagreeing with reference: {', '.join(result.mismatches)}")
    if deaugmentable:
        print(f"\nRecoverable from reference augmentations: {', '.join(sorted(deaugmentable))}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reconstruct periodic graphs of crystal nets")
    parser.add_argument("records", help="JSON list of net records")
    parser.add_argument("--reference", help="JSON {name: graph string} of known nets")
    parser.add_argument("--output", help="Write {name: graph string} of the result here")
    parser.add_argument("--workers", type=int, default=None, help="Pool size (default: CPU count)")
    parser.add_argument("--threads", action="store_true", help="Use threads instead of processes")
    parser.add_argument("--all", action="store_true", help="Keep nets already in the reference")
    parser.add_argument("--verbose", action="store_true", help="Log per-net progress")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    records = load_records(args.records)
    reference = load_reference(args.reference) if args.reference else None

    result = extract_graphs(records, reference=reference, only_new=not args.all,
                            max_workers=args.workers, use_processes=not args.threads)
    deaugmentable = find_deaugmentable(reference, records) if reference is not None else None

    print_summary(result, deaugmentable)

    if args.output:
        dump_graphs(result.graphs, args.output)
        print(f"\nWrote {len(result.graphs)} graphs to {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
