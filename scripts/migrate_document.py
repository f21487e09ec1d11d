#!/usr/bin/env python3
"""
Upgrade a stored ledger document to the v2 multi-portfolio format.

Modes:
- Migrate: a v1 file becomes a v2 document with one portfolio.
- Merge: a v1 file is folded into one portfolio of an existing v2 file.
- Repair: a v2 file is re-validated and written back.

Usage:
    # Migrate or repair in place (prints a summary first)
    python scripts/migrate_document.py data/ledger.json [--dry-run] [--dump]

    # Write the result somewhere else
    python scripts/migrate_document.py data/ledger.json --output data/ledger.v2.json

    # Merge a legacy export into an existing portfolio
    python scripts/migrate_document.py old_export.json --merge-into data/ledger.json --portfolio-id <id>
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from ledgerdoc.logging import setup_logging
from ledgerdoc.pipeline.orchestrator import prepare_document


def load_json(path: Path):
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def save_json(path: Path, doc: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as fh:
        json.dump(doc, fh, ensure_ascii=False, indent=2)
    tmp.replace(path)


def print_summary(prepared):
    doc = prepared.document
    print(f"  Action: {prepared.action}")
    print(f"  Refresh: {doc['refreshMs']} ms")
    print(f"  Portfolios: {len(doc['portfolios'])}")
    for p in doc["portfolios"]:
        marker = "*" if p["id"] == prepared.portfolio_id else " "
        print(
            f"   {marker} {p['name']} ({p['id']}): {len(p['funds'])} funds, "
            f"{len(p['holdings'])} holdings, {len(p['pendingTrades'])} pending trades"
        )
    if prepared.problems:
        print(f"  Problems: {len(prepared.problems)}")
        for reason in prepared.problems:
            print(f"    - {reason}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("source", help="Stored document (v1 or v2 JSON)")
    parser.add_argument("--output", help="Write the result here instead of back to the target file")
    parser.add_argument("--merge-into", help="Existing v2 document to merge a v1 source into")
    parser.add_argument("--portfolio-id", help="Portfolio id in --merge-into that receives the merge")
    parser.add_argument("--name", help="Portfolio name for a migrated v1 source")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without writing")
    parser.add_argument("--dump", action="store_true", help="Dump the resulting JSON to stdout")
    args = parser.parse_args()

    setup_logging()

    if args.merge_into and not args.portfolio_id:
        print("ERROR: --portfolio-id is required with --merge-into")
        return 1

    source = Path(args.source)
    base_path = Path(args.merge_into) if args.merge_into else None
    try:
        raw = load_json(source)
        base = load_json(base_path) if base_path else None
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: could not read input: {e}")
        return 1

    prepared = prepare_document(
        raw,
        base=base,
        target_portfolio_id=args.portfolio_id,
        portfolio_name=args.name,
    )
    if base_path and prepared.action != "merged":
        print(f"ERROR: {args.source} was not merged into {args.merge_into} (action: {prepared.action})")
        return 1

    print(f"Source: {source}")
    print_summary(prepared)

    if args.dump:
        print(f"\n{'='*60}\nFull JSON:\n{'='*60}")
        print(json.dumps(prepared.document, ensure_ascii=False, indent=2))

    if args.dry_run:
        print("\n[DRY RUN] Not saving.")
        return 0

    target = Path(args.output) if args.output else (base_path or source)
    try:
        save_json(target, prepared.document)
    except OSError as e:
        print(f"ERROR saving: {e}")
        return 1
    print(f"\nSaved {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
