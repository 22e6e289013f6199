# This file makes the 'models' directory a Python package.

from learnvow.core.database import Base # Base must be imported before models that use it

from .enums import ContentType, UserRole, PaymentStatus, PaymentGateway

from .user_model import User
from .book_model import Book
from .reading_progress_model import ReadingProgress
from .payment_model import Payment
from .purchase_model import Purchase


__all__ = [
    "Base",
    # Models
    "User",
    "Book",
    "ReadingProgress",
    "Payment",
    "Purchase",
    # Enums
    "ContentType",
    "UserRole",
    "PaymentStatus",
    "PaymentGateway",
]
