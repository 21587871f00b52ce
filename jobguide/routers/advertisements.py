from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobguide.database import get_db
from jobguide.repos.advertisement_repo import get_by_source, get_latest, search
from jobguide.schemas.advertisement import AdvertisementResponse

router = APIRouter(prefix="/advertisements", tags=["advertisements"])


@router.get("/latest", response_model=list[AdvertisementResponse])
def latest_advertisements(
    limit: int = Query(default=3, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return get_latest(db, limit=limit)


@router.get("/search", response_model=list[AdvertisementResponse])
def search_advertisements(
    keyword: str = Query(min_length=1, max_length=100),
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return search(db, keyword, limit=limit)


@router.get("/source/{source}", response_model=list[AdvertisementResponse])
def advertisements_by_source(
    source: str,
    limit: int = Query(default=10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return get_by_source(db, source, limit=limit)
