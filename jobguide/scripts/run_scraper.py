"""Scrape job advertisements once, or forever on the configured interval.

Usage: python -m jobguide.scripts.run_scraper [--once] [--keyword KW ...]
"""
import argparse
import logging
import time

from jobguide.config import settings
from jobguide.database import SessionLocal, init_db
from jobguide.logging_config import setup_logging
from jobguide.services.job_scraper import configured_keywords, scrape_all_job_sites

logger = logging.getLogger(__name__)
INTERVAL_SECONDS = settings.scrape_interval_seconds


def run_once(keywords: list[str]) -> int:
    db = SessionLocal()
    try:
        jobs = scrape_all_job_sites(db, keywords)
        logger.info("Scrape run done: %d listings", len(jobs))
        return len(jobs)
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Job advertisement scraper (daily or once)")
    parser.add_argument("--once", action="store_true", help="Run once and exit (no schedule)")
    parser.add_argument("--keyword", action="append", help="Override the configured keywords")
    args = parser.parse_args()

    setup_logging()
    init_db()
    keywords = args.keyword or configured_keywords()

    if args.once:
        run_once(keywords)
        return

    while True:
        try:
            run_once(keywords)
        except Exception as e:
            logger.exception("Scrape run failed: %s", e)
        logger.info("Sleeping %d seconds until next run", INTERVAL_SECONDS)
        time.sleep(INTERVAL_SECONDS)


if __name__ == "__main__":
    main()
