"""
Ensure Storage Buckets Script
Creates the receipts, dashboard-photos and documents buckets (or only the
ones passed with --bucket) and lists every bucket afterwards.
"""

import argparse
import logging
import sys

from wolthers_trips.config.roles_config import REQUIRED_BUCKETS
from wolthers_trips.database.supabase_client import get_service_supabase
from wolthers_trips.modules.storage.service import StorageService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the application storage buckets")
    parser.add_argument(
        "--bucket", action="append", choices=REQUIRED_BUCKETS,
        help="Bucket to create (repeatable); defaults to all",
    )
    args = parser.parse_args(argv)

    try:
        service = StorageService(get_service_supabase())
        logger.info("Creating storage buckets...")
        outcome = service.ensure_buckets(args.bucket)

        logger.info("Available buckets:")
        for bucket in service.list_buckets():
            logger.info(f"  - {bucket['name']} ({'public' if bucket['public'] else 'private'})")
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        sys.exit(1)

    failed = [name for name, result in outcome.items() if result == "error"]
    if failed:
        logger.error(f"Failed to create: {', '.join(failed)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
