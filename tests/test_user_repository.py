"""
Tests for user repository.
"""

from datetime import datetime, timezone

import psycopg
import pytest

from xpoll.auth.password_utils import PasswordHash
from xpoll.database.errors import (
    DuplicateUsernameError,
    PersistenceError,
    StoreConnectionError,
    ValidationError,
)
from xpoll.repositories.user_repository import UserRepository


@pytest.fixture(scope="module")
def credential():
    return PasswordHash.from_password("StrongPass1!")


def test_create_user_returns_generated_id(mock_db, mock_cursor, credential):
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    mock_cursor.fetchone.return_value = (42, created)

    user = UserRepository(mock_db).create_user("alice", credential)

    assert user.user_id == 42
    assert user.username == "alice"
    assert user.password_hash == credential.value
    query, params = mock_cursor.execute.call_args.args
    assert "INSERT INTO users" in query
    assert params == ("alice", credential.value)
    mock_db.transaction.assert_called_once()


def test_create_user_rejects_plain_credential(mock_db):
    with pytest.raises(ValidationError):
        UserRepository(mock_db).create_user("alice", "StrongPass1!")
    mock_db.transaction.assert_not_called()


def test_create_user_rejects_empty_username(mock_db, credential):
    with pytest.raises(ValidationError):
        UserRepository(mock_db).create_user("", credential)
    mock_db.transaction.assert_not_called()


def test_create_user_rejects_whitespace_username(mock_db, credential):
    with pytest.raises(ValidationError):
        UserRepository(mock_db).create_user("   ", credential)
    mock_db.transaction.assert_not_called()


def test_create_user_duplicate_username_raises_conflict(mock_db, mock_cursor, credential):
    mock_cursor.execute.side_effect = psycopg.errors.UniqueViolation(
        'duplicate key value violates unique constraint "unique_username"'
    )

    with pytest.raises(DuplicateUsernameError):
        UserRepository(mock_db).create_user("alice", credential)


def test_create_user_wraps_other_database_errors(mock_db, mock_cursor, credential):
    error = psycopg.errors.InternalError("disk full")
    mock_cursor.execute.side_effect = error

    with pytest.raises(PersistenceError) as exc_info:
        UserRepository(mock_db).create_user("alice", credential)

    assert exc_info.value.operation == "create_user"
    assert exc_info.value.context == {"username": "alice"}
    assert exc_info.value.cause is error
    assert exc_info.value.__cause__ is error


def test_get_user_by_id_returns_user(mock_db, mock_cursor, credential):
    mock_cursor.fetchone.return_value = (7, "bob", credential.value, None)

    user = UserRepository(mock_db).get_user_by_id(7)

    assert user.user_id == 7
    assert user.username == "bob"
    mock_db.acquire.assert_called_once()


def test_get_user_by_id_returns_none_for_missing(mock_db, mock_cursor):
    mock_cursor.fetchone.return_value = None
    assert UserRepository(mock_db).get_user_by_id(999) is None


def test_get_user_by_id_connection_lost(mock_db, mock_cursor):
    mock_cursor.execute.side_effect = psycopg.OperationalError("server closed the connection")

    with pytest.raises(StoreConnectionError):
        UserRepository(mock_db).get_user_by_id(1)


def test_get_user_by_username(mock_db, mock_cursor, credential):
    mock_cursor.fetchone.return_value = (7, "bob", credential.value, None)

    user = UserRepository(mock_db).get_user_by_username("bob")

    assert user.user_id == 7
    assert mock_cursor.execute.call_args.args[1] == ("bob",)


def test_verify_credentials(mock_db, mock_cursor, credential):
    mock_cursor.fetchone.return_value = (7, "bob", credential.value, None)
    repo = UserRepository(mock_db)

    assert repo.verify_credentials("bob", "StrongPass1!").user_id == 7
    assert repo.verify_credentials("bob", "wrong-password") is None


def test_verify_credentials_unknown_user(mock_db, mock_cursor):
    mock_cursor.fetchone.return_value = None
    assert UserRepository(mock_db).verify_credentials("nobody", "StrongPass1!") is None
