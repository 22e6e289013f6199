from fastapi import APIRouter, Depends, status, Query, Response
from sqlalchemy.orm import Session
from typing import Optional
import logging

from learnvow.core.database import get_db
from learnvow.core.dependencies import get_current_admin_user, get_book_or_404, get_user_or_404
from learnvow.models.user_model import User
from learnvow.models.book_model import Book
from learnvow.models.enums import PaymentGateway, PaymentStatus, UserRole
from learnvow.schemas import user_schema, book_schema, payment_schema
from learnvow.schemas.admin_schema import PaginatedUsersAdmin
from learnvow.crud import (
    user_crud,
    book_crud,
    payment_crud,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin Panel"])

# --- User Management by Admin ---

@router.get("/users", response_model=PaginatedUsersAdmin)
def admin_list_users(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200),
    email_contains: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
):
    """
    Admin: Get a list of all users with pagination and optional filters.
    """
    logger.info(f"Admin {current_admin.email} listing users. Skip: {skip}, Limit: {limit}")

    filters = {
        "email_contains": email_contains,
        "role": role.value if role else None,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}

    total_users = user_crud.count_users(db, filters=active_filters)
    users_db = user_crud.get_users(db, skip=skip, limit=limit, filters=active_filters)

    return PaginatedUsersAdmin(
        total=total_users,
        users=[user_schema.UserDisplay.model_validate(user) for user in users_db],
        page=(skip // limit) + 1,
        size=limit
    )


@router.get("/users/{user_id}", response_model=user_schema.UserDisplay)
def admin_get_user(
    current_admin: User = Depends(get_current_admin_user),
    db_user: User = Depends(get_user_or_404),
):
    logger.info(f"Admin {current_admin.email} fetching user ID: {db_user.id}")
    return db_user


@router.put("/users/{user_id}", response_model=user_schema.UserDisplay)
def admin_update_user(
    user_id: int,
    data_in: user_schema.AdminUserUpdate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user)
):
    """
    Admin: Change a user's display name or role.
    """
    get_user_or_404(user_id, db)
    logger.info(f"Admin {current_admin.email} updating user ID: {user_id}")
    return user_crud.update_user_by_admin(db, user_id=user_id, data_in=data_in)


# --- Catalog Management by Admin ---

@router.post("/books", response_model=book_schema.BookDisplay, status_code=status.HTTP_201_CREATED)
def admin_create_book(
    book_in: book_schema.BookCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user)
):
    """
    Admin: Add a title to the catalog.
    """
    logger.info(f"Admin {current_admin.email} creating book: {book_in.title}")
    return book_crud.create_book(db, book_in=book_in)


@router.put("/books/{book_id}", response_model=book_schema.BookDisplay)
def admin_update_book(
    book_in: book_schema.BookUpdate,
    current_admin: User = Depends(get_current_admin_user),
    book: Book = Depends(get_book_or_404),
    db: Session = Depends(get_db),
):
    logger.info(f"Admin {current_admin.email} updating book ID {book.id} (Title: {book.title})")
    return book_crud.update_book(db, book_id=book.id, book_in=book_in)


@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_book(
    current_admin: User = Depends(get_current_admin_user),
    book: Book = Depends(get_book_or_404),
    db: Session = Depends(get_db),
):
    """
    Admin: Remove a title. Progress rows and purchases for it go with it.
    """
    logger.info(f"Admin {current_admin.email} deleting book ID {book.id}")
    book_crud.delete_book(db, book_id=book.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Payment Oversight ---

@router.get("/payments", response_model=payment_schema.PaginatedPayments)
def admin_list_payments(
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200),
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    payment_gateway: Optional[PaymentGateway] = Query(None),
    user_id: Optional[int] = Query(None),
):
    """
    Admin: List payments across all users, most recent first.
    """
    logger.info(f"Admin {current_admin.email} listing payments. Skip: {skip}, Limit: {limit}, Status: {status_filter}, Gateway: {payment_gateway}")
    filters = {
        "status": status_filter.value if status_filter else None,
        "payment_gateway": payment_gateway.value if payment_gateway else None,
        "user_id": user_id,
    }
    total = payment_crud.count_all_payments(db, filters=filters)
    payments = payment_crud.get_all_payments(db, skip=skip, limit=limit, filters=filters)
    return payment_schema.PaginatedPayments(
        total=total,
        payments=[payment_schema.PaymentDisplay.model_validate(p) for p in payments],
        page=(skip // limit) + 1,
        size=limit,
    )
