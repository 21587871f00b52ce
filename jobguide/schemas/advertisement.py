from datetime import datetime

from pydantic import BaseModel


class AdvertisementResponse(BaseModel):
    id: str
    title: str
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    company_name: str | None = None
    source: str | None = None
    location: str | None = None
    salary_range: str | None = None
    employment_type: str | None = None
    posted_at: datetime | None = None

    class Config:
        from_attributes = True
