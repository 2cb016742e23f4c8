import logging
from typing import Any, Dict, Optional
import psycopg

logger = logging.getLogger(__name__)


class XPollError(Exception):
    """Base class for all errors raised by the xpoll storage core."""
    pass


class ValidationError(XPollError):
    """Raised when input is malformed or violates a poll rule."""
    pass


class UnknownPollError(ValidationError):
    """Raised when a response references a poll that does not exist."""
    pass


class PollClosedError(ValidationError):
    """Raised when attempting to respond to a closed poll."""
    pass


class InvalidChoiceError(ValidationError):
    """Raised when the selected choice doesn't belong to the poll."""
    pass


class ConflictError(XPollError):
    """Raised when a write would violate a uniqueness rule."""
    pass


class DuplicateUsernameError(ConflictError):
    """Raised when creating a user whose username is already taken."""
    pass


class DuplicateResponseError(ConflictError):
    """Raised when a user attempts to respond twice to the same poll."""
    pass


class StoreConnectionError(XPollError):
    """Raised when the store is unreachable or no connection is available in time."""
    pass


class PersistenceError(XPollError):
    """
    Raised when a store operation fails for any reason not covered above.

    Attributes:
        operation (str): Name of the repository operation that failed
        context (dict): Key identifiers involved in the operation
        cause (Exception): The original psycopg exception
    """

    def __init__(self, operation: str, cause: Exception, **context: Any) -> None:
        self.operation = operation
        self.cause = cause
        self.context: Dict[str, Any] = context
        details = ", ".join(f"{key}={value}" for key, value in context.items())
        super().__init__(f"{operation} failed ({details}): {cause}")


def constraint_name(error: psycopg.Error) -> str:
    """
    Best-effort name of the constraint an integrity error was raised for.

    Falls back to the error text when the server diagnostics are not available.
    """
    name: Optional[str] = error.diag.constraint_name
    return name or str(error)


def wrap_database_error(operation: str, error: psycopg.Error, **context: Any) -> XPollError:
    """
    Translate a psycopg exception into the matching xpoll error.

    Callers handle the integrity violations they can name (duplicate username,
    duplicate response) before delegating here.

    Args:
        operation (str): Repository operation name, used in logs and messages
        error (psycopg.Error): Exception raised by psycopg
        **context: Key identifiers of the failed operation

    Returns:
        XPollError: Exception to raise with ``raise ... from error``
    """
    if isinstance(error, psycopg.errors.ForeignKeyViolation):
        logger.warning(f"{operation} failed - referenced row does not exist: {str(error)}")
        return ValidationError(f"{operation} references a row that does not exist: {context}")
    if isinstance(error, psycopg.DataError):
        logger.error(f"{operation} failed - invalid data format: {str(error)}")
        return ValidationError(f"{operation} received invalid data: {error}")
    if isinstance(error, psycopg.OperationalError):
        logger.error(f"{operation} failed - database connection issue: {str(error)}")
        return StoreConnectionError(f"{operation} could not reach the database: {error}")
    logger.error(f"{operation} failed - database error: {str(error)}")
    return PersistenceError(operation, error, **context)
