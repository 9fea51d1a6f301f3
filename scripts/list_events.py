#!/usr/bin/env python3
"""
Print a user's dashboard tabs from the local database.

Usage:
    python scripts/list_events.py USER_ID [--timezone Europe/Paris]
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cnnct.core.config import settings
from cnnct.core.database import create_db_and_tables
from cnnct.core.logging import configure_logging
from cnnct.dashboard import Dashboard
from cnnct.gateway.sql import SqlEventGateway
from cnnct.models import SessionContext
from cnnct.status.availability import fits_availability
from cnnct.status.buckets import BUCKET_ORDER
from cnnct.status.dates import format_date, format_time_range


async def show(user_id: str, timezone: str) -> None:
    gateway = SqlEventGateway()
    dashboard = Dashboard(gateway, SessionContext(user_id=user_id, timezone=timezone))
    board = await dashboard.refresh()
    availability = await gateway.list_availability(user_id)

    for bucket in BUCKET_ORDER:
        events = board.events(bucket)
        print(f"{bucket.value} ({len(events)})")
        for event in events:
            details = event.scheduled_at
            people = board.participant_count(bucket, event.id)
            outside = availability and fits_availability(event, availability, timezone) is False
            print(
                f"  {format_date(details.date):<22} "
                f"{format_time_range(details.time, details.duration):<22} "
                f"{event.display_title} - {people} people"
                f"{' (outside availability)' if outside else ''}"
            )
        print()


def main():
    parser = argparse.ArgumentParser(description="List a user's events by tab")
    parser.add_argument("user_id", help="Owner id of the events")
    parser.add_argument("--timezone", default=settings.default_timezone)
    args = parser.parse_args()

    configure_logging()
    create_db_and_tables()
    asyncio.run(show(args.user_id, args.timezone))


if __name__ == "__main__":
    main()
