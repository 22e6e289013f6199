from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal

from .book_schema import BookDisplay

class PurchaseRequest(BaseModel):
    book_id: int


class PurchaseDisplay(BaseModel):
    id: int
    user_id: int
    book_id: int
    payment_id: Optional[int] = None
    price_paid: Decimal
    currency: str
    purchased_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PurchaseResponse(BaseModel):
    message: str
    purchase: PurchaseDisplay


class LibraryItem(BaseModel):
    """An owned book together with how far the user has got through it."""
    book: BookDisplay
    purchased_at: Optional[datetime] = None
    progress: float = 0.0
    last_accessed: Optional[datetime] = None
