from pydantic import BaseModel, Field

from jobguide.models.enums import UserRole


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    role: UserRole
    age: int | None = None
    university: str | None = None
    major: str | None = None
    graduation_year: int | None = None
    bio: str | None = None
    avatar_url: str | None = None
    resume_url: str | None = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    full_name: str | None = Field(default=None, max_length=100)
    age: int | None = Field(default=None, ge=15, le=100)
    university: str | None = Field(default=None, max_length=200)
    major: str | None = Field(default=None, max_length=200)
    graduation_year: int | None = Field(default=None, ge=1950, le=2100)
    bio: str | None = Field(default=None, max_length=2000)
    avatar_url: str | None = None
    resume_url: str | None = None
