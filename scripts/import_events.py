#!/usr/bin/env python3
"""
One-off script to import exported event documents into the local database.

Reads a JSON array of event documents (as exported from the old event
store) and saves each one through the SQL gateway. Meeting details stored
as JSON inside the description are unpacked on the way in.

Usage:
    python scripts/import_events.py events.json [--dry-run]

Options:
    --dry-run    Show what would be imported without writing anything
"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cnnct.core.database import create_db_and_tables
from cnnct.core.exceptions import PersistenceError
from cnnct.core.logging import configure_logging
from cnnct.gateway.documents import event_from_document
from cnnct.gateway.sql import SqlEventGateway


async def import_events(path: Path, dry_run: bool = False) -> dict:
    """Import every document in ``path`` and return counts."""
    documents = json.loads(path.read_text(encoding="utf-8"))
    gateway = SqlEventGateway()
    stats = {"imported": 0, "skipped": 0, "failed": 0}

    for doc in documents:
        try:
            event = event_from_document(doc)
        except ValueError as e:
            print(f"  Skipping document: {e}")
            stats["skipped"] += 1
            continue

        print(
            f"  {event.id}: {event.display_title!r} "
            f"[{event.overall_status.value}, {len(event.participants)} participants]"
        )
        if dry_run:
            continue

        try:
            await gateway.save_event(event)
            stats["imported"] += 1
        except PersistenceError as e:
            print(f"  Error: {e}")
            stats["failed"] += 1

    return stats


def main():
    parser = argparse.ArgumentParser(description="Import exported event documents")
    parser.add_argument("path", type=Path, help="JSON file holding an array of events")
    parser.add_argument("--dry-run", action="store_true", help="Do not write anything")
    args = parser.parse_args()

    if not args.path.exists():
        print(f"Error: {args.path} does not exist.")
        sys.exit(1)

    configure_logging()
    create_db_and_tables()

    stats = asyncio.run(import_events(args.path, dry_run=args.dry_run))
    print()
    print("=" * 60)
    print(f"Imported: {stats['imported']}  Skipped: {stats['skipped']}  Failed: {stats['failed']}")
    print("=" * 60)


if __name__ == "__main__":
    main()
