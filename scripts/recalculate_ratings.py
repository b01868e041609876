#!/usr/bin/env python3
"""
Rating Repair Script

Recomputes average_rating and ratings_count for every book from its
current reviews. Run after imports or manual database edits.

USAGE:
    python scripts/recalculate_ratings.py
"""

import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookreview.config import get_settings
from bookreview.database import SessionLocal
from bookreview.services.ratings import recalculate_all_book_ratings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("recalculate_ratings")


def main() -> int:
    db = SessionLocal()
    try:
        updated = recalculate_all_book_ratings(db)
    except Exception:
        db.rollback()
        logger.exception("Rating recalculation failed")
        return 1
    finally:
        db.close()

    logger.info(f"Recalculated ratings for {updated} books")
    return 0


if __name__ == "__main__":
    sys.exit(main())
