"""OrderFlow snapshot management CLI.

Works on snapshot files so state can be prepared or inspected without a
running server.

Usage:
    python src/manage.py seed-demo snapshot.json   # Write the demo order book
    python src/manage.py check snapshot.json       # Report invariant violations
"""

import argparse
import sys


def seed_demo(path):
    """Write the demo order book to ``path``, keeping orders already there."""
    from pathlib import Path

    from lifecycle.demo import bootstrap_demo
    from lifecycle.domain import Lifecycle

    lifecycle = Lifecycle()
    if Path(path).exists():
        lifecycle.load(path)
    added = bootstrap_demo(lifecycle)
    lifecycle.save(path)
    print(f"Added {added} demo orders to {path}.")


def check(path):
    """Print invariant violations found in the snapshot at ``path``."""
    from lifecycle.domain import Lifecycle

    lifecycle = Lifecycle()
    lifecycle.load(path)
    violations = lifecycle.check_invariants()
    for violation in violations:
        print(f"  {violation}")
    print(f"{len(violations)} violation(s).")
    return 0 if not violations else 1


def main():
    parser = argparse.ArgumentParser(description="OrderFlow snapshot management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    seed_parser = subparsers.add_parser("seed-demo", help="Write the demo order book to a snapshot file")
    seed_parser.add_argument("path", help="Snapshot file to create or extend")

    check_parser = subparsers.add_parser("check", help="Check a snapshot file for inconsistencies")
    check_parser.add_argument("path", help="Snapshot file to check")

    args = parser.parse_args()

    from lifecycle.utils.logging import configure_logging

    configure_logging()

    if args.command == "seed-demo":
        seed_demo(args.path)
    elif args.command == "check":
        sys.exit(check(args.path))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
