"""CLI script to recompute the daily activity cache from typing sessions.

Run during a maintenance window: rows are overwritten, so live verse
submissions for the same users must not be recorded concurrently.
"""
from __future__ import annotations

import argparse
from datetime import date

from verse_typing.tasks.daily_activity import (
    backfill_daily_activity,
    backfill_user_daily_activity,
)


def _iso_date(value: str) -> str:
    return date.fromisoformat(value).isoformat()


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Backfill the user daily activity table from stored typing sessions",
    )
    parser.add_argument(
        "--start",
        type=_iso_date,
        help="Only include sessions on or after this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--end",
        type=_iso_date,
        help="Only include sessions on or before this date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--user-id",
        type=str,
        help="Backfill a single user only",
    )
    parser.add_argument(
        "--async",
        action="store_true",
        dest="use_async",
        help="Queue task asynchronously instead of running immediately",
    )

    args = parser.parse_args()
    window = f"{args.start or 'beginning'} to {args.end or 'now'}"

    if args.user_id:
        print(f"Backfilling daily activity for user {args.user_id} ({window})")
        if args.use_async:
            task = backfill_user_daily_activity.apply_async(
                args=(args.user_id, args.start, args.end)
            )
            print(f"Task queued: {task.id}")
        else:
            result = backfill_user_daily_activity.run(args.user_id, args.start, args.end)
            print(f"Result: {result}")
    else:
        print(f"Backfilling daily activity for all users ({window})")
        if args.use_async:
            task = backfill_daily_activity.apply_async(args=(args.start, args.end))
            print(f"Task queued: {task.id}")
        else:
            result = backfill_daily_activity.run(args.start, args.end)
            print(f"Result: {result}")


if __name__ == "__main__":
    main()
