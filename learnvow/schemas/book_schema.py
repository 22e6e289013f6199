from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from learnvow.core.config import settings
from learnvow.models.enums import ContentType

class BookBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Title of the book")
    author: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    content_type: ContentType = Field(..., description="ebook or audiobook")
    price: Decimal = Field(..., ge=0, description="Price in the catalog currency")
    currency: str = Field(default_factory=lambda: settings.PAYMENT_CURRENCY, max_length=10)
    cover_url: Optional[str] = Field(None, max_length=500)
    total_pages: Optional[int] = Field(None, gt=0, description="Page count for ebooks")
    duration_seconds: Optional[int] = Field(None, gt=0, description="Running time for audiobooks")
    is_published: bool = True

class BookCreate(BookBase):
    file_url: Optional[str] = Field(None, max_length=500, description="Storage location of the book file")

class BookUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    content_type: Optional[ContentType] = None
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, max_length=10)
    cover_url: Optional[str] = Field(None, max_length=500)
    file_url: Optional[str] = Field(None, max_length=500)
    total_pages: Optional[int] = Field(None, gt=0)
    duration_seconds: Optional[int] = Field(None, gt=0)
    is_published: Optional[bool] = None

class BookDisplay(BookBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PaginatedBookList(BaseModel):
    total: int
    items: List[BookDisplay]
    page: int
    size: int
