import logging
from firebase_admin import auth
from firebase_admin.auth import InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError

from learnvow.core.exceptions import DependencyError, UnauthenticatedError
from learnvow.core.firebase_config import get_firebase_app
from learnvow.schemas.user_schema import TokenData

logger = logging.getLogger(__name__)

def verify_firebase_id_token(id_token: str) -> TokenData:
    """
    Verifies a Firebase ID token and extracts the caller identity.

    The identity is trusted verbatim; passwords and token issuance belong to
    Firebase.

    Args:
        id_token: The Firebase ID token string.

    Returns:
        TokenData: firebase_uid and email from the verified token.

    Raises:
        UnauthenticatedError: the token is invalid, expired, revoked or lacks
            the uid/email claims.
        DependencyError: Firebase could not be reached or initialized.
    """
    try:
        get_firebase_app()
        decoded_token = auth.verify_id_token(id_token)
    except (InvalidIdTokenError, ExpiredIdTokenError, RevokedIdTokenError) as e:
        logger.warning(f"Firebase ID token verification failed: {e}")
        detail_message = "Invalid or expired authentication token."
        if isinstance(e, ExpiredIdTokenError):
            detail_message = "Authentication token has expired. Please log in again."
        elif isinstance(e, RevokedIdTokenError):
            detail_message = "Authentication token has been revoked. Please log in again."
        raise UnauthenticatedError(detail_message) from e
    except Exception as e:
        logger.error(f"An unexpected error occurred during Firebase ID token verification: {e}", exc_info=True)
        raise DependencyError("Could not verify authentication token due to an identity provider error.") from e

    firebase_uid = decoded_token.get("uid")
    email = decoded_token.get("email")

    if not firebase_uid or not email:
        logger.warning("Firebase ID token is missing 'uid' or 'email' claims.")
        raise UnauthenticatedError("Invalid authentication credentials: Missing essential token claims.")

    logger.info(f"Firebase ID token verified successfully for UID: {firebase_uid}")
    return TokenData(firebase_uid=firebase_uid, email=email, name=decoded_token.get("name"))
