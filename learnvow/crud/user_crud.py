from sqlalchemy.orm import Session
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
import logging
from typing import List, Optional, Dict, Any

from learnvow.models.user_model import User
from learnvow.schemas.user_schema import UserCreateInternal, AdminUserUpdate
from learnvow.services import email_service

logger = logging.getLogger(__name__)


# Helper function to apply filters to a query
def _apply_user_filters(query, filters: Optional[Dict[str, Any]] = None):
    if not filters:
        return query

    if "email_contains" in filters and filters["email_contains"]:
        query = query.filter(User.email.ilike(f"%{filters['email_contains']}%"))
    if "role" in filters and filters["role"]:
        query = query.filter(User.role == filters["role"])
    return query

def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Fetches a user by their internal database ID."""
    logger.debug(f"Fetching user by ID: {user_id}")
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> User | None:
    logger.debug(f"Fetching user by email: {email}")
    return db.query(User).filter(User.email == email).first()

def get_user_by_firebase_uid(db: Session, firebase_uid: str) -> User | None:
    """Fetches a user by their Firebase UID."""
    logger.debug(f"Fetching user by Firebase UID: {firebase_uid}")
    return db.query(User).filter(User.firebase_uid == firebase_uid).first()

def create_user(db: Session, user_data: UserCreateInternal) -> User | None:
    """
    Creates a new user in the database.
    Assumes firebase_uid and email come from a verified Firebase ID token.
    Returns None if the user already exists or the insert fails.
    """
    logger.info(f"Attempting to create user for email: {user_data.email}, Firebase UID: {user_data.firebase_uid}")

    if get_user_by_firebase_uid(db, user_data.firebase_uid):
        logger.warning(f"User creation failed: Firebase UID {user_data.firebase_uid} already exists.")
        return None
    if get_user_by_email(db, user_data.email):
        logger.warning(f"User creation failed: Email {user_data.email} already exists.")
        return None

    db_user = User(
        firebase_uid=user_data.firebase_uid,
        email=user_data.email,
        name=user_data.name,
        role=user_data.role or 'Customer',
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        logger.info(f"User created successfully: {db_user.email} (ID: {db_user.id}).")
    except IntegrityError as e:
        db.rollback()
        # A concurrent registration for the same identity got there first
        logger.error(f"Database integrity error during user creation for {user_data.email}: {e}", exc_info=True)
        return None

    email_service.send_welcome_email(db_user)

    return db_user


# --- Admin User Management CRUD ---

def get_users(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    filters: Optional[Dict[str, Any]] = None
) -> List[User]:
    """
    Retrieves a list of users with pagination and optional filtering.
    """
    logger.debug(f"Fetching users with skip: {skip}, limit: {limit}, filters: {filters}")
    query = db.query(User)
    query = _apply_user_filters(query, filters)
    return query.order_by(User.id.asc()).offset(skip).limit(limit).all()

def count_users(db: Session, filters: Optional[Dict[str, Any]] = None) -> int:
    logger.debug(f"Counting users with filters: {filters}")
    query = db.query(func.count(User.id))
    query = _apply_user_filters(query, filters)
    return query.scalar() or 0


def update_user_by_admin(db: Session, user_id: int, data_in: AdminUserUpdate) -> Optional[User]:
    """
    Updates a user's name or role on behalf of an admin.
    """
    db_user = get_user_by_id(db, user_id)
    if not db_user:
        logger.warning(f"User with ID {user_id} not found for admin update.")
        return None

    update_data = data_in.model_dump(exclude_unset=True, mode="json")
    logger.info(f"Admin updating user ID {user_id} with data: {update_data}")
    for field, value in update_data.items():
        setattr(db_user, field, value)

    try:
        db.commit()
        db.refresh(db_user)
        logger.info(f"User ID {user_id} updated successfully by admin.")
        return db_user
    except Exception as e:
        db.rollback()
        logger.error(f"Unexpected error during admin update for user {user_id}: {e}", exc_info=True)
        raise
