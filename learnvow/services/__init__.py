# This package contains business logic services.

from . import email_service # Imported first: crud modules depend on it
from . import payment_service
from . import file_service
from . import progress_store

__all__ = [
    "email_service",
    "payment_service",
    "file_service",
    "progress_store",
]
