"""Time-limited signed links to purchased book files."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from learnvow.core.config import settings
from learnvow.core.exceptions import FileAccessError

logger = logging.getLogger(__name__)

SIGNING_SALT = "book-file"


def _serializer() -> URLSafeTimedSerializer:
    # Built per call so a rotated FILE_URL_SECRET_KEY takes effect without a restart
    return URLSafeTimedSerializer(settings.FILE_URL_SECRET_KEY, salt=SIGNING_SALT)


def generate_signature(user_id: int, book_id: int) -> Dict[str, Any]:
    """
    Signs a (user, book) pair. The signature is only good for that user and
    that book, and only for FILE_URL_TTL_SECONDS.
    """
    ttl = settings.FILE_URL_TTL_SECONDS
    signature = _serializer().dumps({"uid": user_id, "book_id": book_id})
    logger.info(f"Signed file link issued for user {user_id}, book {book_id} (valid {ttl}s).")
    return {
        "signature": signature,
        "expires_at": datetime.now(timezone.utc) + timedelta(seconds=ttl),
        "expires_in_seconds": ttl,
    }


def verify_signature(signature: str) -> Dict[str, int]:
    """Returns the signed {"uid", "book_id"} payload, or raises FileAccessError."""
    try:
        payload = _serializer().loads(signature, max_age=settings.FILE_URL_TTL_SECONDS)
    except SignatureExpired:
        logger.info("Rejected expired file link.")
        raise FileAccessError("File link has expired.") from None
    except BadSignature:
        logger.warning("Rejected file link with an invalid signature.")
        raise FileAccessError("Invalid file link.") from None

    if not isinstance(payload, dict) or "uid" not in payload or "book_id" not in payload:
        logger.warning(f"Rejected file link with malformed payload: {payload!r}")
        raise FileAccessError("Invalid file link.")
    return payload
