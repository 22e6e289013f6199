from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timezone
from typing import List
import logging

from learnvow.core.database import get_db
from learnvow.core.dependencies import get_current_active_user
from learnvow.core.exceptions import ConflictError, DependencyError, ResourceNotFoundError
from learnvow.crud import book_crud, payment_crud, purchase_crud
from learnvow.models.user_model import User
from learnvow.models.enums import PaymentStatus, PaymentGateway
from learnvow.schemas import payment_schema as schemas
from learnvow.schemas.purchase_schema import PurchaseDisplay, PurchaseResponse
from learnvow.services import payment_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post("/initiate", response_model=schemas.PaymentInitiateResponse, status_code=status.HTTP_201_CREATED)
async def initiate_book_payment(
    payload: schemas.PaymentInitiateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Start a hosted-checkout payment for a book.
    Returns the order reference and where to redirect the customer.
    """
    book = book_crud.get_book(db, payload.book_id)
    if not book or not book.is_published:
        raise ResourceNotFoundError("Book", payload.book_id)
    if purchase_crud.get_purchase(db, current_user.id, book.id):
        raise ConflictError("You already own this book.")

    order_id = payment_service.build_order_id(current_user.id, book.id)
    payment = payment_crud.create_payment_record(db, schemas.PaymentCreate(
        user_id=current_user.id,
        book_id=book.id,
        order_id=order_id,
        amount=book.price,
        currency=book.currency,
        status=PaymentStatus.PENDING,
        payment_gateway=PaymentGateway.MOCK,
    ))

    gateway_response = await payment_service.initiate_payment(
        order_id=order_id,
        amount=payment.amount,
        currency=payment.currency,
        product_name=book.title,
    )
    if gateway_response.get("status") != payment_service.GATEWAY_SUCCESS:
        logger.error(f"Gateway refused order {order_id}: {gateway_response}")
        payment_crud.update_payment_status(
            db, payment, PaymentStatus.FAILED, error_message="Gateway refused the checkout session."
        )
        raise DependencyError("Payment gateway could not start the checkout.")

    logger.info(f"Payment {order_id} initiated for user {current_user.id}, book {book.id}")
    return schemas.PaymentInitiateResponse(
        message="Payment initiated.",
        order_id=order_id,
        redirect_url=gateway_response["gateway_url"],
        amount=payment.amount,
        currency=payment.currency,
        status=payment.status,
    )


@router.post("/verify", response_model=PurchaseResponse)
async def verify_book_payment(
    payload: schemas.PaymentVerifyRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Confirm a gateway transaction and add the book to the user's library.
    Verifying an already settled order returns the existing purchase.
    """
    payment = payment_crud.get_payment_by_order_id(db, payload.order_id)
    if not payment or payment.user_id != current_user.id:
        logger.warning(f"User {current_user.id} tried to verify unknown order {payload.order_id}")
        raise ResourceNotFoundError("Payment order", payload.order_id)

    existing = purchase_crud.get_purchase(db, current_user.id, payment.book_id)
    if payment.status == PaymentStatus.SUCCEEDED and existing:
        return PurchaseResponse(
            message="Payment already verified.",
            purchase=PurchaseDisplay.model_validate(existing),
        )

    gateway_response = await payment_service.verify_payment(payload.order_id, payload.transaction_id)
    if gateway_response.get("status") != payment_service.GATEWAY_SUCCESS:
        payment_crud.update_payment_status(
            db, payment, PaymentStatus.FAILED,
            transaction_id=payload.transaction_id,
            error_message="Gateway did not confirm the transaction.",
        )
        raise ConflictError("Payment was not confirmed by the gateway.")

    try:
        payment = payment_crud.update_payment_status(
            db, payment, PaymentStatus.SUCCEEDED,
            transaction_id=payload.transaction_id,
            paid_at=datetime.now(timezone.utc),
        )
    except IntegrityError:
        raise ConflictError("This transaction has already been used for another order.")

    if existing:
        # Owned through another order; keep that purchase
        return PurchaseResponse(
            message="Book already in your library.",
            purchase=PurchaseDisplay.model_validate(existing),
        )

    if payment.book is None:
        raise ResourceNotFoundError("Book", payment.book_id)

    try:
        purchase = purchase_crud.create_purchase(db, user_id=current_user.id, book=payment.book, payment=payment)
    except IntegrityError:
        purchase = purchase_crud.get_purchase(db, current_user.id, payment.book_id)

    logger.info(f"Order {payload.order_id} settled; purchase {purchase.id} recorded for user {current_user.id}")
    return PurchaseResponse(
        message="Payment verified. The book is now in your library.",
        purchase=PurchaseDisplay.model_validate(purchase),
    )


@router.get("/me", response_model=List[schemas.PaymentDisplay])
def read_my_payments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    The current user's payment history, most recent first.
    """
    return payment_crud.get_payments_for_user(db, current_user.id)
