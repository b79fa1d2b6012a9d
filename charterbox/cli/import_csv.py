"""Booking file import script for CharterBox.

Usage:
    charterbox-import FILE [--source SOURCE] [--dry-run] [--user USER_ID]

Sources:
    DEFAULT   Ticketing system booking export (default)
    MASTER    Operations master file
    RUZINN    RUZINN agency export
    RAYNA     Rayna Tours export
    GYG       GetYourGuide export
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from zipfile import BadZipFile

from charterbox.database import close_db, init_db
from charterbox.services.etl import IMPORT_SOURCES, SOURCE_DEFAULT, ETLModule, ReferenceData
from charterbox.services.etl.store import BeanieBookingStore


async def run_import(
    path: Path,
    source: str,
    dry_run: bool = False,
    acting_user_id: str | None = None,
    skip_db_init: bool = False,
) -> int:
    """Parse a booking file and reconcile it with the database."""
    content = path.read_bytes()

    if not skip_db_init:
        await init_db()
    try:
        reference = await ReferenceData.load()
        etl = ETLModule(reference=reference, acting_user_id=acting_user_id)
        rows = etl.load_file(content, path.name, source)

        print(f"Parsed {len(rows)} rows from {path.name} ({source}).")
        for issue in etl.quality_report:
            print(f"  row {issue.row}: {issue.field} = {issue.raw!r} ({issue.issue})")

        if dry_run:
            print("Dry run: nothing was saved.")
            return 0

        stats = await etl.upsert_to_db(rows, BeanieBookingStore())
        print(f"Inserted: {stats.inserted}  Updated: {stats.updated}  Failed: {stats.failed}")
        for error in stats.errors:
            print(f"  {error}")
        return 1 if stats.failed else 0
    finally:
        if not skip_db_init:
            await close_db()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Import a booking spreadsheet into CharterBox",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("file", type=Path, help="CSV, TSV or XLSX file to import")
    parser.add_argument(
        "--source",
        "-s",
        default=SOURCE_DEFAULT,
        type=str.upper,
        choices=IMPORT_SOURCES,
        help="Import source tag (default: DEFAULT)",
    )
    parser.add_argument("--dry-run", "-n", action="store_true", help="Parse only, do not save")
    parser.add_argument("--user", "-u", help="User id recorded as owner/modifier of new rows")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.file.is_file():
        print(f"Error: File '{args.file}' not found.")
        return 1

    try:
        return asyncio.run(run_import(args.file, args.source, args.dry_run, args.user))
    except (ValueError, BadZipFile) as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nAborted.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
