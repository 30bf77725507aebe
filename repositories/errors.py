"""
Errors raised by the transaction repositories.
"""


class RepositoryError(Exception):
    """Base class for every repository failure."""


class ValidationError(RepositoryError):
    """Input rejected before anything was written (negative amount, bad date, category/type mismatch)."""


class NotFoundError(RepositoryError):
    """The targeted transaction id does not exist."""


class IntegrityError(RepositoryError):
    """A stored row holds a type, category or date this layer cannot represent."""


class InternalError(RepositoryError):
    """A row written moments ago could not be read back."""


class StorageError(RepositoryError):
    """The database rejected or failed a write."""


def with_operation(operation: str, error: RepositoryError) -> RepositoryError:
    """
    Re-create an error with the failing operation prefixed to its message.
    The returned error has the same class, so callers can still tell kinds apart.
    """
    return type(error)(f"Failed to {operation}: {error}")
