from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional, Dict, Any
import logging
from datetime import datetime

from learnvow.models.payment_model import Payment
from learnvow.models.enums import PaymentStatus, PaymentGateway
from learnvow.schemas import payment_schema as schemas

logger = logging.getLogger(__name__)


# Helper for applying filters to Payment list queries
def _apply_payment_filters(query, filters: Optional[Dict[str, Any]] = None):
    if not filters:
        return query
    if "user_id" in filters and filters["user_id"] is not None:
        query = query.filter(Payment.user_id == filters["user_id"])
    if "status" in filters and filters["status"] is not None:
        try:
            status_enum = PaymentStatus(filters["status"])
            query = query.filter(Payment.status == status_enum)
        except ValueError:
            logger.warning(f"Invalid status value '{filters['status']}' for filtering Payments. Ignoring status filter.")
    if "payment_gateway" in filters and filters["payment_gateway"] is not None:
        try:
            gateway_enum = PaymentGateway(filters["payment_gateway"])
            query = query.filter(Payment.payment_gateway == gateway_enum)
        except ValueError:
            logger.warning(f"Invalid gateway value '{filters['payment_gateway']}' for filtering Payments. Ignoring gateway filter.")
    return query

def create_payment_record(db: Session, payment_in: schemas.PaymentCreate) -> Payment:
    """
    Creates a new payment record. Gateway payments start PENDING and are
    settled by verification; manual payments may be created SUCCEEDED.
    """
    logger.info(f"Creating payment record {payment_in.order_id} for user_id {payment_in.user_id}, amount {payment_in.amount} {payment_in.currency}")

    db_payment = Payment(
        user_id=payment_in.user_id,
        book_id=payment_in.book_id,
        order_id=payment_in.order_id,
        amount=payment_in.amount,
        currency=payment_in.currency,
        status=payment_in.status if payment_in.status else PaymentStatus.PENDING,
        payment_gateway=payment_in.payment_gateway,
        transaction_id=payment_in.transaction_id,
        paid_at=payment_in.paid_at,
    )
    db.add(db_payment)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating payment record {payment_in.order_id}: {e}", exc_info=True)
        raise
    db.refresh(db_payment)
    logger.info(f"Payment record (ID: {db_payment.id}) created for user {payment_in.user_id}.")
    return db_payment

def get_payment_by_order_id(db: Session, order_id: str) -> Optional[Payment]:
    logger.debug(f"Fetching payment by order_id: {order_id}")
    return db.query(Payment).filter(Payment.order_id == order_id).first()

def get_payments_for_user(db: Session, user_id: int, skip: int = 0, limit: int = 20) -> List[Payment]:
    """Fetches all payment records for a specific user, most recent first."""
    logger.debug(f"Fetching payments for user_id {user_id} with skip: {skip}, limit: {limit}")
    return db.query(Payment).filter(Payment.user_id == user_id).order_by(Payment.id.desc()).offset(skip).limit(limit).all()


def update_payment_status(
    db: Session,
    payment: Payment,
    new_status: PaymentStatus,
    transaction_id: Optional[str] = None,
    paid_at: Optional[datetime] = None,
    error_message: Optional[str] = None,
) -> Payment:
    """
    Updates a payment record's status and gateway information.
    """
    logger.info(f"Updating payment {payment.order_id} (ID: {payment.id}) status from {payment.status} to {new_status}")

    payment.status = new_status
    if paid_at is not None and new_status == PaymentStatus.SUCCEEDED:
        payment.paid_at = paid_at
    if error_message is not None:
        payment.error_message = error_message
    if transaction_id and not payment.transaction_id:
        payment.transaction_id = transaction_id

    try:
        db.commit()
        db.refresh(payment)
        logger.info(f"Payment record (ID: {payment.id}) status updated to {payment.status}.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating payment status for payment ID {payment.id}: {e}", exc_info=True)
        raise

    return payment


# --- Admin Payment Listing ---

def get_all_payments(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    filters: Optional[Dict[str, Any]] = None
) -> List[Payment]:
    """
    Admin: Retrieves a list of all payments with pagination and optional filtering.
    """
    logger.debug(f"Admin fetching all payments. Skip: {skip}, Limit: {limit}, Filters: {filters}")
    query = db.query(Payment)
    query = _apply_payment_filters(query, filters)
    return query.order_by(Payment.id.desc()).offset(skip).limit(limit).all()

def count_all_payments(db: Session, filters: Optional[Dict[str, Any]] = None) -> int:
    logger.debug(f"Admin counting all payments. Filters: {filters}")
    query = db.query(func.count(Payment.id))
    query = _apply_payment_filters(query, filters)
    return query.scalar() or 0
