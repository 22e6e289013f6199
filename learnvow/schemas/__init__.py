# This file makes the 'schemas' directory a Python package.

from .user_schema import (
    UserBase, UserCreateInternal, UserDisplay, TokenData,
    UserRegisterRequest, UserLoginRequest, AuthResponse, AdminUserUpdate
)

from .book_schema import (
    BookBase, BookCreate, BookUpdate, BookDisplay, PaginatedBookList
)

from .progress_schema import (
    ProgressUpdate, PositionUpdate, ProgressValue, ProgressDisplay
)

from .payment_schema import (
    PaymentBase, PaymentCreate, PaymentDisplay, PaginatedPayments,
    PaymentInitiateRequest, PaymentInitiateResponse, PaymentVerifyRequest
)

from .purchase_schema import (
    PurchaseRequest, PurchaseDisplay, PurchaseResponse, LibraryItem
)

from .admin_schema import PaginatedUsersAdmin


__all__ = [
    # User Schemas
    "UserBase", "UserCreateInternal", "UserDisplay", "TokenData",
    "UserRegisterRequest", "UserLoginRequest", "AuthResponse", "AdminUserUpdate",

    # Book Schemas
    "BookBase", "BookCreate", "BookUpdate", "BookDisplay", "PaginatedBookList",

    # Progress Schemas
    "ProgressUpdate", "PositionUpdate", "ProgressValue", "ProgressDisplay",

    # Payment Schemas
    "PaymentBase", "PaymentCreate", "PaymentDisplay", "PaginatedPayments",
    "PaymentInitiateRequest", "PaymentInitiateResponse", "PaymentVerifyRequest",

    # Purchase / Library Schemas
    "PurchaseRequest", "PurchaseDisplay", "PurchaseResponse", "LibraryItem",

    # Admin Schemas
    "PaginatedUsersAdmin",
]
