#!/usr/bin/env python3
"""Recompute stored excerpts from article content."""
import sys
from pathlib import Path

# Add parent directory to path to import omninews modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from omninews.database import SessionLocal
from omninews.services.articles import backfill_excerpts
from omninews.utils.logger import configure_logging, setup_script_logger

configure_logging()
logger = setup_script_logger("backfill_excerpts")

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description="Recompute article excerpts")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would change")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        count = backfill_excerpts(db, dry_run=args.dry_run)
    except Exception as e:
        logger.error(f"Error backfilling excerpts: {e}")
        sys.exit(1)
    finally:
        db.close()

    verb = "would be updated" if args.dry_run else "updated"
    logger.info(f"{count} article excerpts {verb}")
    sys.exit(0)
