# This file makes the 'crud' directory a Python package.

from .user_crud import (
    get_user_by_id,
    get_user_by_email,
    get_user_by_firebase_uid,
    create_user,
    get_users,
    count_users,
    update_user_by_admin
)

from .book_crud import (
    create_book, get_book, get_books, count_books, update_book, delete_book
)

from .progress_crud import (
    get_progress_record,
    upsert_progress,
    get_recent_progress_for_user,
    get_progress_map_for_user
)

from .purchase_crud import (
    get_purchase, get_purchases_for_user, create_purchase
)

from .payment_crud import (
    create_payment_record, get_payment_by_order_id,
    get_payments_for_user, update_payment_status,
    get_all_payments, count_all_payments
)


__all__ = [
    # User CRUD
    "get_user_by_id", "get_user_by_email", "get_user_by_firebase_uid", "create_user",
    "get_users", "count_users", "update_user_by_admin",

    # Book CRUD
    "create_book", "get_book", "get_books", "count_books", "update_book", "delete_book",

    # Reading Progress CRUD
    "get_progress_record", "upsert_progress", "get_recent_progress_for_user", "get_progress_map_for_user",

    # Purchase CRUD
    "get_purchase", "get_purchases_for_user", "create_purchase",

    # Payment CRUD
    "create_payment_record", "get_payment_by_order_id",
    "get_payments_for_user", "update_payment_status",
    "get_all_payments", "count_all_payments",
]
