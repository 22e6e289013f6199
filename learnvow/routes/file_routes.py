from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
import logging

from learnvow.core.config import settings
from learnvow.core.database import get_db
from learnvow.core.dependencies import get_current_active_user
from learnvow.core.exceptions import FileAccessError, ResourceNotFoundError
from learnvow.crud import book_crud, purchase_crud
from learnvow.models.book_model import Book
from learnvow.models.user_model import User
from learnvow.schemas import file_schema as schemas
from learnvow.services import file_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/files", tags=["Book Files"])


def _owned_book_with_file(db: Session, user_id: int, book_id: int) -> Book:
    book = book_crud.get_book(db, book_id)
    if not book:
        raise ResourceNotFoundError("Book", book_id)
    if not purchase_crud.get_purchase(db, user_id, book.id):
        logger.warning(f"User {user_id} asked for the file of book {book.id} without owning it.")
        raise FileAccessError("You do not own this book.")
    if not book.file_url:
        raise ResourceNotFoundError("Book file", book.id)
    return book


@router.post("/signed-url", response_model=schemas.SignedUrlResponse)
def create_signed_url(
    payload: schemas.SignedUrlRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Issue a time-limited link to the file of a book the current user owns.
    """
    book = _owned_book_with_file(db, current_user.id, payload.book_id)
    signed = file_service.generate_signature(current_user.id, book.id)
    return schemas.SignedUrlResponse(
        url=f"{settings.API_V1_STR}/files/secure/{signed['signature']}",
        expires_at=signed["expires_at"],
        expires_in_seconds=signed["expires_in_seconds"],
    )


@router.get("/secure/{signature}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
def open_signed_url(signature: str, db: Session = Depends(get_db)):
    """
    Redirect to the book file. The signature stands in for the bearer token,
    so reader and player surfaces can use the link directly; ownership is
    checked again in case the purchase or the book is gone.
    """
    payload = file_service.verify_signature(signature)
    book = _owned_book_with_file(db, payload["uid"], payload["book_id"])
    logger.info(f"File access granted to user {payload['uid']} for book {book.id}.")
    return RedirectResponse(book.file_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
