from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
import logging

from learnvow.models.purchase_model import Purchase
from learnvow.models.book_model import Book
from learnvow.models.payment_model import Payment
from learnvow.services import email_service

logger = logging.getLogger(__name__)

def get_purchase(db: Session, user_id: int, book_id: int) -> Optional[Purchase]:
    logger.debug(f"Fetching purchase for user_id {user_id}, book_id {book_id}")
    return db.query(Purchase).filter(Purchase.user_id == user_id, Purchase.book_id == book_id).first()

def get_purchases_for_user(db: Session, user_id: int) -> List[Purchase]:
    """The user's library: every owned book, most recently purchased first."""
    logger.debug(f"Fetching purchases for user_id {user_id}")
    return (
        db.query(Purchase)
        .options(joinedload(Purchase.book))
        .filter(Purchase.user_id == user_id)
        .order_by(Purchase.purchased_at.desc(), Purchase.id.desc())
        .all()
    )

def create_purchase(db: Session, user_id: int, book: Book, payment: Optional[Payment] = None) -> Purchase:
    """
    Records ownership of `book` by the user at the book's current price.
    Raises IntegrityError if the user already owns the book.
    """
    logger.info(f"Creating purchase for user {user_id}, book {book.id} (payment: {payment.id if payment else None})")
    db_purchase = Purchase(
        user_id=user_id,
        book_id=book.id,
        payment_id=payment.id if payment else None,
        price_paid=payment.amount if payment else book.price,
        currency=payment.currency if payment else book.currency,
    )
    db.add(db_purchase)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Purchase rejected, user {user_id} already owns book {book.id}: {e}")
        raise
    db.refresh(db_purchase)
    logger.info(f"Purchase (ID: {db_purchase.id}) recorded for user {user_id}, book {book.id}.")

    email_service.send_purchase_receipt(db_purchase)

    return db_purchase
