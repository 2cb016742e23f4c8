from typing import Optional, Dict, Any
from datetime import datetime, timezone


class Response:
    """
    One user's recorded vote for one choice in one poll.
    """

    def __init__(
        self,
        poll_id: int,
        choice_id: int,
        user_id: int,
        responded_at: Optional[datetime] = None
    ) -> None:
        self.poll_id = poll_id
        self.choice_id = choice_id
        self.user_id = user_id
        self.responded_at = responded_at or datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"Response(poll={self.poll_id}, choice={self.choice_id}, user={self.user_id})"

    def __repr__(self) -> str:
        return (f"Response(poll_id={self.poll_id}, choice_id={self.choice_id}, "
                f"user_id={self.user_id}, responded_at={self.responded_at})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Response):
            return NotImplemented
        return (self.poll_id == other.poll_id and
                self.choice_id == other.choice_id and
                self.user_id == other.user_id)

    def __hash__(self) -> int:
        return hash((self.poll_id, self.choice_id, self.user_id))

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "poll_id": self.poll_id,
            "choice_id": self.choice_id,
            "user_id": self.user_id,
            "responded_at": self.responded_at.isoformat() if self.responded_at else None
        }

    @classmethod
    def from_db_row(cls, row: tuple) -> 'Response':
        """
        Create a Response object from database row tuple.

        Args:
            row (tuple): Database row as tuple (poll_id, choice_id, user_id, responded_at)

        Returns:
            Response: New Response instance created from database row
        """
        responded_at = row[3]
        if responded_at and isinstance(responded_at, datetime):
            if responded_at.tzinfo is None:
                responded_at = responded_at.replace(tzinfo=timezone.utc)
            else:
                responded_at = responded_at.astimezone(timezone.utc)

        return cls(
            poll_id=row[0],
            choice_id=row[1],
            user_id=row[2],
            responded_at=responded_at
        )
