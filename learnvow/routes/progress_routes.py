from fastapi import APIRouter, Depends, Query
from typing import List, Optional
import logging

from learnvow.core.dependencies import get_current_active_user, get_content_or_404, get_progress_store
from learnvow.models.user_model import User
from learnvow.models.book_model import Book
from learnvow.schemas import progress_schema as schemas
from learnvow.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/progress", tags=["Reading Progress"])


@router.get("/recent", response_model=List[schemas.ProgressDisplay])
def read_recent_progress(
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    store: ProgressStore = Depends(get_progress_store),
):
    """
    The user's most recently opened titles, newest first ("continue reading").
    """
    return store.get_recent(current_user.id, limit=limit)


@router.get("/{content_id}", response_model=schemas.ProgressValue)
def read_progress(
    content_id: int,
    current_user: User = Depends(get_current_active_user),
    store: ProgressStore = Depends(get_progress_store),
):
    """
    Get the current user's completion percentage for a title.
    Returns 0 when nothing has been recorded yet.
    """
    progress = store.get_progress(current_user.id, content_id)
    return schemas.ProgressValue(content_id=content_id, progress=progress)


@router.post("/{content_id}", response_model=schemas.ProgressDisplay)
def save_progress(
    payload: schemas.ProgressUpdate,
    current_user: User = Depends(get_current_active_user),
    book: Book = Depends(get_content_or_404),
    store: ProgressStore = Depends(get_progress_store),
):
    """
    Store the completion percentage (0 to 100) for a title.
    Values outside the range are rejected with a 400; nothing is written.
    """
    logger.info(f"User {current_user.id} saving progress {payload.progress} for book {book.id}")
    return store.update_progress(current_user.id, book.id, payload.progress)


@router.post("/{content_id}/position", response_model=schemas.ProgressDisplay)
def save_progress_from_position(
    payload: schemas.PositionUpdate,
    current_user: User = Depends(get_current_active_user),
    book: Book = Depends(get_content_or_404),
    store: ProgressStore = Depends(get_progress_store),
):
    """
    Store progress from a reader page or player position.
    """
    logger.info(f"User {current_user.id} at position {payload.position}/{payload.total} of book {book.id}")
    return store.update_from_position(current_user.id, book.id, payload.position, payload.total)
