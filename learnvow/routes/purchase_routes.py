from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
from typing import List
import logging

from learnvow.core.database import get_db
from learnvow.core.dependencies import get_current_active_user
from learnvow.core.exceptions import ConflictError, ResourceNotFoundError
from learnvow.crud import book_crud, payment_crud, purchase_crud, progress_crud
from learnvow.models.user_model import User
from learnvow.models.enums import PaymentStatus, PaymentGateway
from learnvow.schemas import purchase_schema as schemas
from learnvow.schemas.payment_schema import PaymentCreate
from learnvow.schemas.book_schema import BookDisplay
from learnvow.services.payment_service import build_order_id

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Purchases & Library"])


@router.post("/purchases", response_model=schemas.PurchaseResponse, status_code=status.HTTP_201_CREATED)
def purchase_book(
    payload: schemas.PurchaseRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Buy a book outright at its current catalog price.
    The charge is recorded as a settled manual payment.
    """
    book = book_crud.get_book(db, payload.book_id)
    if not book or not book.is_published:
        raise ResourceNotFoundError("Book", payload.book_id)
    if purchase_crud.get_purchase(db, current_user.id, book.id):
        logger.warning(f"User {current_user.id} already owns book {book.id}.")
        raise ConflictError("You already own this book.")

    payment = payment_crud.create_payment_record(db, PaymentCreate(
        user_id=current_user.id,
        book_id=book.id,
        order_id=build_order_id(current_user.id, book.id),
        amount=book.price,
        currency=book.currency,
        status=PaymentStatus.SUCCEEDED,
        payment_gateway=PaymentGateway.MANUAL,
        paid_at=datetime.now(timezone.utc),
    ))

    try:
        purchase = purchase_crud.create_purchase(db, user_id=current_user.id, book=book, payment=payment)
    except IntegrityError:
        # A concurrent request recorded the purchase first
        payment_crud.update_payment_status(
            db, payment, PaymentStatus.REFUNDED, error_message="Duplicate purchase of an owned book."
        )
        raise ConflictError("You already own this book.")

    return schemas.PurchaseResponse(
        message="Purchase completed.",
        purchase=schemas.PurchaseDisplay.model_validate(purchase),
    )


@router.get("/library", response_model=List[schemas.LibraryItem])
def read_library(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Every book the user owns with their reading/listening progress for it.
    """
    purchases = purchase_crud.get_purchases_for_user(db, current_user.id)
    progress_map = progress_crud.get_progress_map_for_user(
        db, current_user.id, [p.book_id for p in purchases]
    )
    logger.debug(f"Library for user {current_user.id}: {len(purchases)} books, {len(progress_map)} with progress")

    library = []
    for purchase in purchases:
        record = progress_map.get(purchase.book_id)
        library.append(schemas.LibraryItem(
            book=BookDisplay.model_validate(purchase.book),
            purchased_at=purchase.purchased_at,
            progress=record.progress if record else 0.0,
            last_accessed=record.last_accessed if record else None,
        ))
    return library
