from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError

# Driver messages that mean "we waited too long" rather than "the store is broken"
_TIMEOUT_MARKERS = (
    "statement timeout",
    "canceling statement due to",
    "database is locked",
    "lock timeout",
)


class LearnVowError(Exception):
    """Base class for failures that are surfaced to API callers with a kind tag."""

    kind = "error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class UnauthenticatedError(LearnVowError):
    """No caller identity could be resolved from the bearer credential."""

    kind = "unauthenticated"


class ProgressValidationError(LearnVowError):
    """A progress value outside [0, 100] (or not a number at all)."""

    kind = "validation"


class ResourceNotFoundError(LearnVowError):
    kind = "not_found"

    def __init__(self, resource_type: str, resource_id) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} with ID {resource_id} not found.")


class ConflictError(LearnVowError):
    kind = "conflict"


class FileAccessError(LearnVowError):
    """A book-file link that is tampered, expired, or for a book the caller does not own."""

    kind = "forbidden"


class DependencyError(LearnVowError):
    """The row-store or the identity provider failed or is unreachable."""

    kind = "dependency"


class DependencyTimeoutError(DependencyError):
    kind = "timeout"


def translate_db_error(exc: SQLAlchemyError, operation: str) -> DependencyError:
    """Maps a SQLAlchemy failure onto the dependency branch of the taxonomy."""
    if isinstance(exc, PoolTimeoutError):
        return DependencyTimeoutError(f"Timed out waiting for a row-store connection during {operation}.")
    if isinstance(exc, (OperationalError, DBAPIError)):
        text = str(getattr(exc, "orig", exc)).lower()
        if any(marker in text for marker in _TIMEOUT_MARKERS):
            return DependencyTimeoutError(f"Row-store call timed out during {operation}.")
    return DependencyError(f"Row-store failure during {operation}.")
