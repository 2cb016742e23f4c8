from typing import Optional, Dict, Any
from datetime import datetime, timezone


class User:
    def __init__(
        self,
        user_id: int,
        username: str,
        password_hash: str,
        created_at: Optional[datetime] = None
    ) -> None:
        self.user_id = user_id
        self.username = username
        self.password_hash = password_hash
        self.created_at = created_at or datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"User(id={self.user_id}, username={self.username})"

    def __repr__(self) -> str:
        return (f"User(user_id={self.user_id}, username='{self.username}', "
                f"password_hash='***', created_at={self.created_at})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.user_id == other.user_id and self.username == other.username

    def __hash__(self) -> int:
        return hash((self.user_id, self.username))

    def to_api_dict(self) -> Dict[str, Any]:
        """
        Convert user to dictionary safe for API responses (excludes the password hash).

        Returns:
            Dict[str, Any]: User data without password_hash
        """
        return {
            "user_id": self.user_id,
            "username": self.username,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }

    @classmethod
    def from_db_row(cls, row: tuple) -> 'User':
        """
        Create a User object from database row tuple.

        Args:
            row (tuple): Database row as tuple (id, username, password_hash, created_at)

        Returns:
            User: New User instance created from database row
        """
        return cls(
            user_id=row[0],
            username=row[1],
            password_hash=row[2],
            created_at=row[3]
        )
