"""Reading/listening progress: one percentage in [0, 100] per (user, content)."""

import logging
import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from learnvow.core.config import settings
from learnvow.core.exceptions import ProgressValidationError, translate_db_error
from learnvow.crud import progress_crud
from learnvow.models.reading_progress_model import ReadingProgress

logger = logging.getLogger(__name__)

MIN_PROGRESS = 0.0
MAX_PROGRESS = 100.0


def validate_percentage(value) -> float:
    """
    Returns `value` as a float if it is a real number in [0, 100].

    Out-of-range values are rejected, never clamped.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ProgressValidationError("Progress must be a number between 0 and 100.")
    value = float(value)
    if math.isnan(value) or not MIN_PROGRESS <= value <= MAX_PROGRESS:
        raise ProgressValidationError(f"Progress must be between 0 and 100 (got {value}).")
    return value


def percentage_from_position(position, total) -> float:
    """
    Converts a reader/player position (page or second) into a percentage.

    A position past `total` is rejected before rounding, however small the
    overshoot.
    """
    for name, number in (("position", position), ("total", total)):
        if isinstance(number, bool) or not isinstance(number, (int, float, Decimal)) or not math.isfinite(number):
            raise ProgressValidationError(f"{name.capitalize()} must be a finite number.")
    if total <= 0:
        raise ProgressValidationError("Total must be greater than zero.")
    if position < 0:
        raise ProgressValidationError("Position cannot be negative.")
    if position > total:
        raise ProgressValidationError(f"Position {position} is past the end ({total}).")
    return round(float(position) / float(total) * 100, 2)


class ProgressStore:
    """
    Reads and writes the completion percentage for (user, content) pairs.

    Built per request around a session; row-store faults are re-raised as
    DependencyError / DependencyTimeoutError.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_record(self, user_id: int, content_id: int) -> Optional[ReadingProgress]:
        try:
            return progress_crud.get_progress_record(self.db, user_id, content_id)
        except SQLAlchemyError as e:
            logger.error(f"Progress lookup failed for user {user_id}, content {content_id}: {e}", exc_info=True)
            raise translate_db_error(e, "progress lookup") from e

    def get_progress(self, user_id: int, content_id: int) -> float:
        """Stored percentage, or 0.0 when nothing has been recorded for the pair."""
        record = self.get_record(user_id, content_id)
        if record is None:
            logger.debug(f"No progress recorded for user {user_id}, content {content_id}; defaulting to 0.")
            return 0.0
        return record.progress

    def update_progress(self, user_id: int, content_id: int, new_percentage) -> ReadingProgress:
        """
        Validates and stores `new_percentage` for the pair, creating the row on
        first write. Returns the stored row.
        """
        value = validate_percentage(new_percentage)
        try:
            return progress_crud.upsert_progress(
                self.db,
                user_id=user_id,
                content_id=content_id,
                progress=value,
                accessed_at=datetime.now(timezone.utc),
            )
        except SQLAlchemyError as e:
            raise translate_db_error(e, "progress update") from e

    def update_from_position(self, user_id: int, content_id: int, position, total) -> ReadingProgress:
        return self.update_progress(user_id, content_id, percentage_from_position(position, total))

    def get_recent(self, user_id: int, limit: Optional[int] = None) -> List[ReadingProgress]:
        limit = limit or settings.PROGRESS_RECENT_LIMIT
        try:
            return progress_crud.get_recent_progress_for_user(self.db, user_id, limit=limit)
        except SQLAlchemyError as e:
            logger.error(f"Recent progress lookup failed for user {user_id}: {e}", exc_info=True)
            raise translate_db_error(e, "recent progress lookup") from e
