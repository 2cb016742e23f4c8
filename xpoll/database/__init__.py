"""Storage gateway and error taxonomy."""

from .connection import DatabaseManager
from .errors import (
    XPollError,
    ValidationError,
    UnknownPollError,
    PollClosedError,
    InvalidChoiceError,
    ConflictError,
    DuplicateUsernameError,
    DuplicateResponseError,
    StoreConnectionError,
    PersistenceError,
)
