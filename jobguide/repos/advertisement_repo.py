from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.orm import Session

from jobguide.core.security import generate_id
from jobguide.models.advertisement import Advertisement


def _active(db: Session):
    return db.query(Advertisement).filter(Advertisement.is_active.is_(True))


def get_latest(db: Session, limit: int = 3) -> list[Advertisement]:
    return _active(db).order_by(Advertisement.posted_at.desc()).limit(limit).all()


def search(db: Session, keyword: str, limit: int = 10) -> list[Advertisement]:
    """Case-insensitive match on title or description."""
    term = f"%{keyword.strip()}%"
    return (
        _active(db)
        .filter(or_(Advertisement.title.ilike(term), Advertisement.description.ilike(term)))
        .order_by(Advertisement.posted_at.desc())
        .limit(limit)
        .all()
    )


def get_by_source(db: Session, source: str, limit: int = 10) -> list[Advertisement]:
    return (
        _active(db)
        .filter(Advertisement.source == source)
        .order_by(Advertisement.posted_at.desc())
        .limit(limit)
        .all()
    )


def insert_listing(db: Session, row: dict) -> Advertisement:
    ad = Advertisement(
        id=generate_id(),
        title=str(row.get("title", ""))[:500],
        company_name=(row.get("company_name") or None),
        description=row.get("description") or None,
        image_url=row.get("image_url") or None,
        link_url=row.get("source_url") or None,
        source=row.get("source_site"),
        location=row.get("location") or None,
        salary_range=row.get("salary_range") or None,
        employment_type=row.get("employment_type") or None,
        requirements=row.get("requirements") or None,
        benefits=row.get("benefits"),
        is_active=True,
        posted_at=row.get("posted_at") or datetime.now(timezone.utc),
    )
    db.add(ad)
    db.commit()
    return ad
