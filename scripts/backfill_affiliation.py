"""
Backfill the LMU affiliation flag on users created before it existed.

Users with no flag get one derived from their email suffix
(@lmu.edu or @lion.lmu.edu).
"""

from __future__ import annotations

import argparse
import logging

from filmhub.config import get_settings
from filmhub.dependencies import get_db_client
from filmhub.types import AffiliationStatus
from filmhub.users import backfill_affiliation_flag

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Backfill the LMU affiliation flag on existing users"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report how many users are missing the flag without patching",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().log_level.upper(), format="%(levelname)s:%(message)s"
    )
    db = get_db_client()

    if args.dry_run:
        missing = db.list_users(AffiliationStatus.UNKNOWN)
        logger.info("%d users are missing the affiliation flag", len(missing))
        return 0

    scanned = backfill_affiliation_flag(db)
    logger.info("Updated affiliation flags, scanned %d users", scanned)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
