import os
import logging

import firebase_admin
from firebase_admin import credentials

from learnvow.core.config import settings

logger = logging.getLogger(__name__)


def _load_credentials() -> credentials.Certificate:
    cred_path = settings.GOOGLE_APPLICATION_CREDENTIALS
    if not cred_path:
        raise ValueError("GOOGLE_APPLICATION_CREDENTIALS environment variable is not set.")
    if not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase service account key file not found at path: {cred_path}")
    return credentials.Certificate(cred_path)


def initialize_firebase_app() -> firebase_admin.App:
    """
    Returns the default Firebase app, creating it from the service account
    key at GOOGLE_APPLICATION_CREDENTIALS on first call.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass  # not initialized yet

    try:
        app = firebase_admin.initialize_app(_load_credentials())
    except Exception as e:
        logger.error(f"Error initializing Firebase Admin SDK: {e}", exc_info=True)
        raise
    logger.info(f"Firebase Admin SDK initialized for project {app.project_id}.")
    return app


# Token verification calls this so a failed startup init is retried per request
get_firebase_app = initialize_firebase_app
