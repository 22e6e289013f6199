from fastapi import Depends, HTTPException, status, Request
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from learnvow.core.database import get_db
from learnvow.core.exceptions import UnauthenticatedError, ResourceNotFoundError, translate_db_error
from learnvow.core.security import verify_firebase_id_token
from learnvow.crud.user_crud import get_user_by_firebase_uid, get_user_by_id
from learnvow.crud.book_crud import get_book
from learnvow.models.user_model import User
from learnvow.models.book_model import Book
from learnvow.models.enums import UserRole
from learnvow.schemas.user_schema import TokenData
from learnvow.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)

def get_bearer_token(request: Request) -> str:
    """Extracts the raw bearer credential from the Authorization header."""
    authorization = request.headers.get("Authorization")
    scheme, param = get_authorization_scheme_param(authorization)

    if not authorization or scheme.lower() != "bearer" or not param:
        logger.warning("Missing or invalid Bearer token in Authorization header.")
        raise UnauthenticatedError("Not authenticated. Bearer token required.")
    return param


# Resolves the caller from a Firebase ID token
async def get_current_user(
    request: Request, db: Session = Depends(get_db)
) -> User:
    """
    Verifies the Firebase ID token from the Authorization header, then
    fetches the matching local user.
    """
    token_data: TokenData = verify_firebase_id_token(get_bearer_token(request))

    try:
        user = get_user_by_firebase_uid(db, firebase_uid=token_data.firebase_uid)
    except SQLAlchemyError as e:
        logger.error(f"User lookup failed for Firebase UID {token_data.firebase_uid}: {e}", exc_info=True)
        raise translate_db_error(e, "user lookup") from e

    if user is None:
        # Authenticated with Firebase but never completed /auth/register
        logger.warning(f"User not found in DB for Firebase UID: {token_data.firebase_uid} from token.")
        raise UnauthenticatedError("User account not found or not fully registered in the system.")

    logger.debug(f"Authenticated user retrieved: {user.email} (ID: {user.id})")
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    return current_user


async def get_current_admin_user(current_user: User = Depends(get_current_active_user)) -> User:
    """
    Checks that the current user has the 'Admin' role.
    """
    if current_user.role != UserRole.ADMIN.value:
        logger.warning(f"Admin access denied for user: {current_user.email} (Role: {current_user.role})")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Operation not permitted: Requires admin privileges.",
        )
    logger.info(f"Admin access granted for user: {current_user.email}")
    return current_user


# --- Resource Specific Fetching ---

def get_book_or_404(book_id: int, db: Session = Depends(get_db)) -> Book:
    book = get_book(db, book_id)
    if not book:
        logger.warning(f"Book with ID {book_id} not found.")
        raise ResourceNotFoundError("Book", book_id)
    return book


# Progress is keyed by content_id; the content is a catalog book
def get_content_or_404(content_id: int, db: Session = Depends(get_db)) -> Book:
    return get_book_or_404(content_id, db)


def get_user_or_404(user_id: int, db: Session = Depends(get_db)) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise ResourceNotFoundError("User", user_id)
    return user


def get_progress_store(db: Session = Depends(get_db)) -> ProgressStore:
    return ProgressStore(db)
