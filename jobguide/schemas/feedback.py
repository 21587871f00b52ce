from pydantic import BaseModel, EmailStr, Field, field_validator


class FeedbackCreate(BaseModel):
    user_id: str | None = None
    name: str = Field(max_length=100)
    email: EmailStr
    category: str = Field(max_length=50)
    subject: str = Field(max_length=200)
    message: str = Field(max_length=5000)

    @field_validator("name", "category", "subject", "message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class FeedbackResponse(BaseModel):
    success: bool
    id: str
    email_sent: bool
