from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from typing import List, Optional, Dict, Any
import logging

from learnvow.models.book_model import Book
from learnvow.models.enums import ContentType
from learnvow.schemas import book_schema as schemas

logger = logging.getLogger(__name__)


# Helper function to apply catalog filters to a query
def _apply_book_filters(query, filters: Optional[Dict[str, Any]] = None):
    if not filters:
        return query
    if filters.get("published_only"):
        query = query.filter(Book.is_published == True)  # noqa: E712
    if filters.get("content_type"):
        try:
            query = query.filter(Book.content_type == ContentType(filters["content_type"]))
        except ValueError:
            logger.warning(f"Invalid content_type '{filters['content_type']}' for filtering books. Ignoring filter.")
    if filters.get("category"):
        query = query.filter(Book.category == filters["category"])
    if filters.get("search"):
        term = f"%{filters['search']}%"
        query = query.filter(or_(Book.title.ilike(term), Book.author.ilike(term)))
    return query

# --- Book CRUD ---
def create_book(db: Session, book_in: schemas.BookCreate) -> Book:
    logger.debug(f"Creating book titled '{book_in.title}'")
    db_book = Book(**book_in.model_dump())
    db.add(db_book)
    db.commit()
    db.refresh(db_book)
    logger.info(f"Book '{db_book.title}' (ID: {db_book.id}) created successfully.")
    return db_book

def get_book(db: Session, book_id: int) -> Optional[Book]:
    logger.debug(f"Fetching book with ID: {book_id}")
    return db.query(Book).filter(Book.id == book_id).first()

def get_books(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    filters: Optional[Dict[str, Any]] = None
) -> List[Book]:
    logger.debug(f"Fetching books with skip: {skip}, limit: {limit}, filters: {filters}")
    query = _apply_book_filters(db.query(Book), filters)
    return query.order_by(Book.id.asc()).offset(skip).limit(limit).all()

def count_books(db: Session, filters: Optional[Dict[str, Any]] = None) -> int:
    query = _apply_book_filters(db.query(func.count(Book.id)), filters)
    return query.scalar() or 0

def update_book(db: Session, book_id: int, book_in: schemas.BookUpdate) -> Optional[Book]:
    db_book = get_book(db, book_id)
    if not db_book:
        logger.warning(f"Book with ID {book_id} not found for update.")
        return None

    update_data = book_in.model_dump(exclude_unset=True)
    logger.debug(f"Updating book ID: {book_id} with data: {update_data}")
    for field, value in update_data.items():
        setattr(db_book, field, value)

    db.commit()
    db.refresh(db_book)
    logger.info(f"Book '{db_book.title}' (ID: {db_book.id}) updated successfully.")
    return db_book

def delete_book(db: Session, book_id: int) -> bool:
    db_book = get_book(db, book_id)
    if not db_book:
        logger.warning(f"Book with ID {book_id} not found for deletion.")
        return False

    db.delete(db_book)
    db.commit()
    logger.info(f"Book ID {book_id} deleted successfully.")
    return True
