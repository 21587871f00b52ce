"""Best-effort job advertisement scraper.

One GET per (site, keyword), fixed CSS selectors per site, every listing with
a title and a company goes into ``advertisements`` as active. A failing site
yields no rows and the run carries on; there is no retry or dedup.
"""
import logging
from typing import Callable
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup
from sqlalchemy.orm import Session

from jobguide.config import settings
from jobguide.repos.advertisement_repo import insert_listing

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


def _text(node, selector: str) -> str:
    found = node.select_one(selector)
    return found.get_text(strip=True) if found else ""


def _attr(node, selector: str, attr: str) -> str | None:
    found = node.select_one(selector)
    return found.get(attr) if found else None


def _fetch(url: str) -> str:
    resp = httpx.get(
        url,
        timeout=settings.scrape_timeout_seconds,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )
    resp.raise_for_status()
    return resp.text


def parse_indeed(html: str) -> list[dict]:
    soup = BeautifulSoup(html, "html.parser")
    jobs = []
    for card in soup.select(".job_seen_beacon"):
        title = _text(card, ".jobTitle")
        company = _text(card, ".company_location .companyName")
        if not (title and company):
            continue
        href = _attr(card, "a", "href")
        jobs.append({
            "title": title,
            "company_name": company,
            "location": _text(card, ".company_location .companyLocation"),
            "salary_range": _text(card, ".salary-snippet") or None,
            "description": _text(card, ".job-snippet"),
            "source_url": f"https://jp.indeed.com{href}" if href else "",
            "source_site": "Indeed",
        })
    return jobs


def parse_mynavi(html: str) -> list[dict]:
    soup = BeautifulSoup(html, "html.parser")
    jobs = []
    for card in soup.select(".cassetteRecruit"):
        title = _text(card, ".cassetteRecruit__name")
        company = _text(card, ".cassetteRecruit__company")
        if not (title and company):
            continue
        jobs.append({
            "title": title,
            "company_name": company,
            "description": _text(card, ".cassetteRecruit__description"),
            "source_url": _attr(card, ".cassetteRecruit__copy a", "href") or "",
            "source_site": "マイナビ転職",
            "image_url": _attr(card, ".cassetteRecruit__thumbnail img", "src"),
        })
    return jobs


def parse_wantedly(html: str) -> list[dict]:
    soup = BeautifulSoup(html, "html.parser")
    jobs = []
    for card in soup.select(".projects-index-single"):
        title = _text(card, ".project-title")
        company = _text(card, ".project-company-name")
        if not (title and company):
            continue
        href = _attr(card, "a", "href")
        jobs.append({
            "title": title,
            "company_name": company,
            "description": _text(card, ".project-excerpt"),
            "source_url": f"https://www.wantedly.com{href}" if href else "",
            "source_site": "Wantedly",
            "image_url": _attr(card, ".project-eyecatch img", "src"),
        })
    return jobs


def _indeed_url(keyword: str) -> str:
    return f"https://jp.indeed.com/jobs?q={quote(keyword)}&l={quote(settings.scrape_location)}"


def _mynavi_url(keyword: str) -> str:
    return f"https://tenshoku.mynavi.jp/list/{quote(keyword)}"


def _wantedly_url(keyword: str) -> str:
    return f"https://www.wantedly.com/projects?type=mixed&page=1&q={quote(keyword)}"


# (site name, url builder, parser)
SITES: list[tuple[str, Callable[[str], str], Callable[[str], list[dict]]]] = [
    ("indeed", _indeed_url, parse_indeed),
    ("mynavi", _mynavi_url, parse_mynavi),
    ("wantedly", _wantedly_url, parse_wantedly),
]


def scrape_site(site: str, url: str, parser: Callable[[str], list[dict]]) -> list[dict]:
    try:
        return parser(_fetch(url))
    except Exception as e:
        logger.error("Error scraping %s (%s): %s", site, url, e)
        return []


def save_job_listings(db: Session, jobs: list[dict]) -> int:
    saved = 0
    for job in jobs:
        try:
            insert_listing(db, job)
            saved += 1
        except Exception as e:
            db.rollback()
            logger.error("Error saving job listing %r: %s", job.get("title"), e)
    return saved


def scrape_all_job_sites(db: Session, keywords: list[str]) -> list[dict]:
    all_jobs: list[dict] = []
    for keyword in keywords:
        for site, build_url, parser in SITES:
            all_jobs.extend(scrape_site(site, build_url(keyword), parser))
    saved = save_job_listings(db, all_jobs)
    logger.info("Scraped %d listings for %d keywords, saved %d", len(all_jobs), len(keywords), saved)
    return all_jobs


def configured_keywords() -> list[str]:
    return [k.strip() for k in (settings.scrape_keywords or "").split(",") if k.strip()]


def schedule_job_scraping(db: Session) -> None:
    """Daily entry point; never raises."""
    try:
        jobs = scrape_all_job_sites(db, configured_keywords())
        logger.info("Successfully scraped %d jobs", len(jobs))
    except Exception as e:
        logger.exception("Error in job scraping schedule: %s", e)
