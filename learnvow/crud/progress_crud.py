from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from typing import List, Optional
import logging
from datetime import datetime

from learnvow.core.exceptions import ResourceNotFoundError
from learnvow.models.reading_progress_model import ReadingProgress

logger = logging.getLogger(__name__)

# Dialects whose INSERT supports ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def _insert_construct(db: Session):
    dialect = db.get_bind().dialect.name
    try:
        return _UPSERT_INSERTS[dialect]
    except KeyError:
        raise NotImplementedError(f"Atomic progress upsert is not supported on the '{dialect}' dialect.") from None


def get_progress_record(db: Session, user_id: int, content_id: int) -> Optional[ReadingProgress]:
    """Fetches the progress row for a (user, content) pair, if one exists."""
    logger.debug(f"Fetching progress for user_id {user_id}, content_id {content_id}")
    return (
        db.query(ReadingProgress)
        .filter(ReadingProgress.user_id == user_id, ReadingProgress.content_id == content_id)
        .populate_existing()
        .first()
    )


def upsert_progress(
    db: Session,
    user_id: int,
    content_id: int,
    progress: float,
    accessed_at: datetime,
) -> ReadingProgress:
    """
    Writes the progress for a (user, content) pair in a single
    INSERT ... ON CONFLICT (user_id, content_id) DO UPDATE statement.

    Concurrent first writes for the same pair can no longer both insert: the
    unique constraint serializes them and the later commit wins. The value is
    written as given; range checks belong to the caller.
    """
    logger.debug(f"Upserting progress for user_id {user_id}, content_id {content_id}: {progress}")

    insert = _insert_construct(db)
    stmt = insert(ReadingProgress).values(
        user_id=user_id,
        content_id=content_id,
        progress=progress,
        last_accessed=accessed_at,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "content_id"],
        set_={
            "progress": stmt.excluded.progress,
            "last_accessed": stmt.excluded.last_accessed,
        },
    )

    try:
        db.execute(stmt)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving progress for user {user_id}, content {content_id}: {e}", exc_info=True)
        raise

    record = get_progress_record(db, user_id, content_id)
    if record is None:
        # Content (and its progress rows) deleted between the commit and the read-back
        logger.warning(f"Progress row for user {user_id}, content {content_id} vanished after upsert.")
        raise ResourceNotFoundError("Book", content_id)
    logger.info(f"Progress for user {user_id}, content {content_id} saved (ID: {record.id}, progress: {record.progress}).")
    return record


def get_recent_progress_for_user(db: Session, user_id: int, limit: int = 10) -> List[ReadingProgress]:
    """Most recently accessed progress rows for a user, newest first."""
    logger.debug(f"Fetching {limit} most recent progress entries for user_id {user_id}")
    return (
        db.query(ReadingProgress)
        .filter(ReadingProgress.user_id == user_id)
        .order_by(ReadingProgress.last_accessed.desc(), ReadingProgress.id.desc())
        .limit(limit)
        .all()
    )


def get_progress_map_for_user(db: Session, user_id: int, content_ids: List[int]) -> dict:
    """Maps content_id -> ReadingProgress for the given ids; ids without a row are absent."""
    if not content_ids:
        return {}
    rows = (
        db.query(ReadingProgress)
        .filter(ReadingProgress.user_id == user_id, ReadingProgress.content_id.in_(content_ids))
        .all()
    )
    return {row.content_id: row for row in rows}
