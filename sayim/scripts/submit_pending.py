"""
List or submit the count lines stored locally by the counting service.

Useful when the handheld lost connectivity and the pending list has to be
pushed from a workstation that shares the store:

  python -m sayim.scripts.submit_pending --list
  python -m sayim.scripts.submit_pending
"""

import argparse
import asyncio
import logging
import sys

from ..core.config import settings
from ..core.errors import CountError
from ..db.database import create_db_and_tables, make_engine, make_session_maker
from ..services.catalog_client import make_client_from_settings
from ..services.local_store import LocalStore, SqlKeyValueStore
from ..services.submission import SubmissionWorkflow


def _print_items(items) -> None:
    for i, it in enumerate(items):
        print(f"{i:>3}  {it.stock_code:<20} {it.depot_name:<20} {it.quantity:>10g}  {it.stock_name}")
    print(f"[submit_pending] {len(items)} pending items")


async def submit_pending(store: LocalStore, dry_run: bool) -> int:
    try:
        items = store.load()
    except CountError as e:
        print(f"[submit_pending] {e.message}")
        return 1

    if dry_run:
        _print_items(items)
        print("[submit_pending] DRY RUN: nothing sent")
        return 0

    workflow = SubmissionWorkflow(make_client_from_settings(), store)
    try:
        outcome = await workflow.submit(items)
    except CountError as e:
        print(f"[submit_pending] {e.message}")
        return 1

    print(f"[submit_pending] {outcome.state.value}: {outcome.message}")
    if outcome.warning:
        print(f"[submit_pending] WARNING: {outcome.warning}")
    return 0 if outcome.committed else 1


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--list", action="store_true", help="Print the pending items and exit")
    p.add_argument("--dry-run", action="store_true", help="Same as --list")
    p.add_argument("--store-url", default=settings.store_url)
    p.add_argument("--store-key", default=settings.store_key)
    args = p.parse_args()

    logging.basicConfig(level=settings.log_level)

    engine = make_engine(args.store_url)
    create_db_and_tables(engine)
    store = LocalStore(
        SqlKeyValueStore(make_session_maker(engine)),
        key=args.store_key,
        fail_loud=settings.persistence_fail_loud,
    )
    return asyncio.run(submit_pending(store, dry_run=args.list or args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
