import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from jobguide.config import settings
from jobguide.database import get_db
from jobguide.services.job_scraper import schedule_job_scraping

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/cron", tags=["cron"])


def _check_cron_secret(authorization: str | None) -> None:
    if not settings.cron_secret:
        return
    expected = f"Bearer {settings.cron_secret}"
    if not authorization or not secrets.compare_digest(authorization, expected):
        logger.info("Cron call rejected: bad or missing secret")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


@router.get("/scrape-jobs")
def scrape_jobs(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
):
    """Daily trigger for the advertisement scraper. Scrape failures are only logged."""
    _check_cron_secret(authorization)
    schedule_job_scraping(db)
    return {"success": True}
