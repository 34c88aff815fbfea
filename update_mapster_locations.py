#!/usr/bin/env python3
"""
Mapster Popup Generator
Fills the popup of every published Mapster location from output_converted.json
and files each location under the "haendler" map category.

Usage:
    python3 update_mapster_locations.py --update-mapster yes [--dry-run] [--limit=N]

Example:
    # Preview what would be written
    python3 update_mapster_locations.py --update-mapster yes --dry-run

    # Update every published location
    python3 update_mapster_locations.py --update-mapster yes

    # Retry two locations only
    python3 update_mapster_locations.py --update-mapster yes --post-id 12 --post-id 40
"""

import argparse
import logging
import sys

from mapster_popups import (
    ConfigurationError,
    PopupUpdater,
    TRIGGER_VALUE,
    UpdateResult,
    WordPressClient,
    get_settings,
)
from mapster_popups.logging_config import setup_logging

logger = logging.getLogger("mapster_popups.cli")


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate Mapster location popups from a JSON file")
    parser.add_argument('--update-mapster', metavar='VALUE',
                        help=f"Trigger flag; the run starts only when VALUE is '{TRIGGER_VALUE}'")
    parser.add_argument('--data-file', help='Records JSON file (default: settings data_file)')
    parser.add_argument('--category', help='Map category slug to assign (default: settings category_slug)')
    parser.add_argument('--dry-run', action='store_true', help='Compose popups without writing')
    parser.add_argument('--limit', type=positive_int, help='Update at most N locations')
    parser.add_argument('--post-id', type=int, action='append', dest='post_ids',
                        help='Only update this post (repeatable)')
    return parser


def print_summary(result: UpdateResult):
    print("=" * 80)
    print("Mapster Popup Update" + (" (dry run)" if result.dry_run else ""))
    print("=" * 80)
    if result.aborted:
        print(f"❌ Aborted: {result.abort_reason}")
    print(f"Locations:   {result.total}")
    print(f"Records:     {result.records_loaded}")
    print(f"Matched:     {result.matched}")
    print(f"Unmatched:   {result.unmatched}")
    print(f"Updated:     {result.updated}")
    print(f"Categorized: {result.tagged}")
    print(f"Skipped:     {result.skipped}")
    print(f"Failed:      {result.failed}")
    if result.duration_seconds is not None:
        print(f"Duration:    {result.duration_seconds:.1f}s")
    for error in result.errors:
        print(f"  - post {error['post_id']} ({error['title']}): {error['error']}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.data_file:
        settings.data_file = args.data_file
    if args.category:
        settings.category_slug = args.category
    setup_logging(settings)

    if args.update_mapster is None:
        print(f"Nothing to do: pass --update-mapster {TRIGGER_VALUE} to start the update.")
        return 0

    logger.info("Mapster Popup Generator loaded, trigger flag is present.")
    if args.update_mapster != TRIGGER_VALUE:
        logger.warning(f"⚠️ Trigger flag is '{args.update_mapster}', not '{TRIGGER_VALUE}'; nothing updated.")
        return 0

    try:
        client = WordPressClient.from_settings(settings)
        updater = PopupUpdater(client, settings)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 1

    try:
        result = updater.run(dry_run=args.dry_run, limit=args.limit, post_ids=args.post_ids)
    finally:
        client.close()

    print_summary(result)
    return 1 if result.aborted else 0


if __name__ == "__main__":
    sys.exit(main())
