import logging
from typing import Optional
import psycopg
import pydantic

from xpoll.auth.password_utils import PasswordHash
from xpoll.database.connection import DatabaseManager
from xpoll.database.errors import (
    DuplicateUsernameError,
    ValidationError,
    constraint_name,
    wrap_database_error,
)
from xpoll.models.User import User
from xpoll.models.auth_models import UserCreate, CredentialCheck

logger = logging.getLogger(__name__)


class UserRepository:
    """Creates and looks up the user identities polls and responses refer to."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    def create_user(self, username: str, password_hash: PasswordHash) -> User:
        """
        Create a new user.

        Args:
            username (str): Unique username
            password_hash (PasswordHash): Already-hashed credential; plaintext is rejected

        Returns:
            User: Created user with its database-generated id

        Raises:
            ValidationError: If username is empty/too long or password_hash is not a PasswordHash
            DuplicateUsernameError: If username already exists
            StoreConnectionError: If the database is unreachable
            PersistenceError: For other database errors
        """
        if not isinstance(password_hash, PasswordHash):
            raise ValidationError("create_user requires a PasswordHash, not a plain credential")
        try:
            UserCreate(username=username)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid username: {e}") from e

        try:
            with self.db.transaction() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(
                        """INSERT INTO users (username, password_hash)
                        VALUES (%s, %s) RETURNING id, created_at""",
                        (username, password_hash.value),
                    )
                    user_id, created_at = cursor.fetchone()
        except psycopg.errors.UniqueViolation as e:
            if "unique_username" not in constraint_name(e):
                raise wrap_database_error("create_user", e, username=username) from e
            logger.warning(f"User creation failed - username already exists: {username}")
            raise DuplicateUsernameError(f"Username '{username}' is already taken") from e
        except psycopg.Error as e:
            raise wrap_database_error("create_user", e, username=username) from e

        logger.info(f"User created: id={user_id}, username={username}")
        return User(user_id=user_id, username=username, password_hash=password_hash.value, created_at=created_at)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by their ID.

        Returns:
            Optional[User]: User object if found, None if not found
        """
        return self._fetch_one(
            "get_user_by_id",
            "SELECT id, username, password_hash, created_at FROM users WHERE id = %s",
            user_id,
        )

    def get_user_by_username(self, username: str) -> Optional[User]:
        """
        Retrieve a user by their username.

        Returns:
            Optional[User]: User object if found, None if not found
        """
        return self._fetch_one(
            "get_user_by_username",
            "SELECT id, username, password_hash, created_at FROM users WHERE username = %s",
            username,
        )

    def verify_credentials(self, username: str, password: str) -> Optional[User]:
        """
        Check a plaintext password against the stored hash for username.

        Returns:
            Optional[User]: The user when the password matches, None for an
            unknown username or a wrong password
        """
        try:
            CredentialCheck(username=username, password=password)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid credentials payload: {e}") from e

        user = self.get_user_by_username(username)
        if user is None:
            logger.info(f"Credential check failed - unknown username: {username}")
            return None
        if not PasswordHash.from_hash(user.password_hash).verify(password):
            logger.info(f"Credential check failed - password mismatch for user: {user.user_id}")
            return None
        return user

    def _fetch_one(self, operation: str, query: str, key) -> Optional[User]:
        try:
            with self.db.acquire() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(query, (key,))
                    row = cursor.fetchone()
        except psycopg.Error as e:
            raise wrap_database_error(operation, e, key=key) from e

        if not row:
            return None
        return User.from_db_row(row)
