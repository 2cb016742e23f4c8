import argon2
from argon2.exceptions import VerifyMismatchError, InvalidHash

hasher = argon2.PasswordHasher()

ARGON2_PREFIX = "$argon2"


def hash_password(password: str) -> str:
    """
    Hash a plain text password using Argon2 algorithm.

    Args:
        password (str): Plain text password to hash

    Returns:
        str: Argon2 encoded hash (algorithm, parameters and per-password salt included)

    Raises:
        TypeError: If password is empty or None
        argon2.exceptions.HashingError: If hashing fails
    """
    if not password:
        raise TypeError("Password should not be empty or None")
    return hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """
    Verify a plain text password against an Argon2 hash.

    Returns:
        bool: True if password matches hash, False otherwise
    """
    try:
        return hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHash):
        return False


def needs_rehash(password_hash: str) -> bool:
    """Check whether a stored hash was made with outdated Argon2 parameters."""
    return hasher.check_needs_rehash(password_hash)


class PasswordHash:
    """
    An Argon2 encoded password hash, safe to persist.

    Only constructible from a plaintext password (which is hashed) or from a
    string that already is an Argon2 hash, so plaintext never reaches storage.
    """

    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        if not isinstance(value, str) or not value.startswith(ARGON2_PREFIX):
            raise ValueError("PasswordHash requires an Argon2 encoded hash")
        self.value = value

    def __repr__(self) -> str:
        return "PasswordHash('***')"

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PasswordHash):
            return NotImplemented
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def verify(self, password: str) -> bool:
        return verify_password(self.value, password)

    @classmethod
    def from_password(cls, password: str) -> 'PasswordHash':
        """Hash a plaintext password. Raises TypeError for an empty password."""
        return cls(hash_password(password))

    @classmethod
    def from_hash(cls, encoded: str) -> 'PasswordHash':
        """Wrap a hash loaded from storage. Raises ValueError if it isn't an Argon2 hash."""
        return cls(encoded)
