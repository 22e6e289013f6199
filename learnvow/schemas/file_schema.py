from pydantic import BaseModel, Field
from datetime import datetime


class SignedUrlRequest(BaseModel):
    book_id: int


class SignedUrlResponse(BaseModel):
    url: str = Field(..., description="Path that redirects to the book file while the signature is valid")
    expires_at: datetime
    expires_in_seconds: int
