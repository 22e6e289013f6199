from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from learnvow.core.database import get_db
from learnvow.core.dependencies import get_book_or_404
from learnvow.core.exceptions import ResourceNotFoundError
from learnvow.models.book_model import Book
from learnvow.models.enums import ContentType
from learnvow.schemas import book_schema as schemas
from learnvow.crud import book_crud as crud

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/books", tags=["Catalog"])


@router.get("", response_model=schemas.PaginatedBookList)
def read_books_list(
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    content_type: Optional[ContentType] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Matches title or author"),
    db: Session = Depends(get_db)
):
    """
    Browse the published catalog. Publicly accessible.
    """
    logger.debug(f"Listing books skip={skip} limit={limit} content_type={content_type} category={category} search={search}")
    filters = {
        "published_only": True,
        "content_type": content_type.value if content_type else None,
        "category": category,
        "search": search,
    }
    total = crud.count_books(db, filters=filters)
    books = crud.get_books(db, skip=skip, limit=limit, filters=filters)
    return schemas.PaginatedBookList(
        total=total,
        items=[schemas.BookDisplay.model_validate(b) for b in books],
        page=(skip // limit) + 1,
        size=limit,
    )


@router.get("/{book_id}", response_model=schemas.BookDisplay)
def read_single_book(book: Book = Depends(get_book_or_404)):
    """
    Get details of a single published book.
    """
    if not book.is_published:
        raise ResourceNotFoundError("Book", book.id)
    return book
