from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from learnvow.core.config import settings
from learnvow.models.enums import PaymentStatus, PaymentGateway

# --- Payment Schemas ---
class PaymentBase(BaseModel):
    amount: Decimal = Field(..., ge=0, description="Amount charged")
    currency: str = Field(default_factory=lambda: settings.PAYMENT_CURRENCY, max_length=10, description="Currency code")
    status: PaymentStatus = Field(default=PaymentStatus.PENDING, description="Status of the payment")
    payment_gateway: PaymentGateway = Field(..., description="Payment gateway used")

    user_id: Optional[int] = None
    book_id: Optional[int] = None
    transaction_id: Optional[str] = Field(None, max_length=255, description="Transaction ID from the payment gateway")
    error_message: Optional[str] = Field(None, description="Error message if payment failed")
    paid_at: Optional[datetime] = Field(None, description="Timestamp when payment was confirmed succeeded")


class PaymentCreate(PaymentBase):
    user_id: int
    book_id: int
    order_id: str = Field(..., max_length=255)


class PaymentDisplay(PaymentBase):
    id: int
    order_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaginatedPayments(BaseModel):
    total: int
    payments: List[PaymentDisplay]
    page: int
    size: int

# --- Mocked hosted checkout ---

class PaymentInitiateRequest(BaseModel):
    book_id: int


class PaymentInitiateResponse(BaseModel):
    message: str
    order_id: str
    redirect_url: str
    amount: Decimal
    currency: str
    status: PaymentStatus


class PaymentVerifyRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    transaction_id: str = Field(..., min_length=1)
