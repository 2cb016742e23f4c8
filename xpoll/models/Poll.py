from typing import Optional, Dict, Any, List
from datetime import datetime, timezone


class Choice:
    """One selectable option belonging to exactly one poll."""

    def __init__(self, choice_id: int, poll_id: int, text: str) -> None:
        self.choice_id = choice_id
        self.poll_id = poll_id
        self.text = text

    def __repr__(self) -> str:
        return f"Choice(choice_id={self.choice_id}, poll_id={self.poll_id}, text='{self.text}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Choice):
            return NotImplemented
        return (self.choice_id == other.choice_id and
                self.poll_id == other.poll_id and
                self.text == other.text)

    def __hash__(self) -> int:
        return hash((self.choice_id, self.poll_id))

    def to_api_dict(self) -> Dict[str, Any]:
        return {"id": self.choice_id, "poll_id": self.poll_id, "text": self.text}

    @classmethod
    def from_db_row(cls, row: tuple) -> 'Choice':
        """Create a Choice from a (id, poll_id, choice_text) row."""
        return cls(choice_id=row[0], poll_id=row[1], text=row[2])


class Poll:
    """
    Poll model for internal database operations.
    Represents a question with an ordered set of choices, open or closed for voting.
    """

    def __init__(
        self,
        poll_id: int,
        owner_id: int,
        question: str,
        choices: Optional[List[Choice]] = None,
        is_closed: bool = False,
        created_at: Optional[datetime] = None
    ) -> None:
        self.poll_id = poll_id
        self.owner_id = owner_id
        self.question = question
        self.choices = choices if choices is not None else []
        self.is_closed = is_closed
        self.created_at = created_at or datetime.now(timezone.utc)

    def __str__(self) -> str:
        return f"Poll(id={self.poll_id}, question='{self.question}', closed={self.is_closed})"

    def __repr__(self) -> str:
        return (f"Poll(poll_id={self.poll_id}, owner_id={self.owner_id}, "
                f"question='{self.question}', choices={self.choices!r}, "
                f"is_closed={self.is_closed}, created_at={self.created_at})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Poll):
            return NotImplemented
        return self.poll_id == other.poll_id and self.question == other.question

    def __hash__(self) -> int:
        return hash((self.poll_id, self.question))

    def can_vote(self) -> bool:
        """
        Check if poll is currently accepting responses.

        Returns:
            bool: True while the poll has not been closed
        """
        return not self.is_closed

    def get_choice(self, choice_id: int) -> Optional[Choice]:
        """Return the choice with the given id, or None if it isn't part of this poll."""
        for choice in self.choices:
            if choice.choice_id == choice_id:
                return choice
        return None

    def to_api_dict(self) -> Dict[str, Any]:
        """
        Convert poll to dictionary for API responses.

        Returns:
            Dict[str, Any]: Poll data with its choices in display order
        """
        return {
            "id": self.poll_id,
            "owner_id": self.owner_id,
            "question": self.question,
            "is_closed": self.is_closed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "choices": [choice.to_api_dict() for choice in self.choices]
        }

    @classmethod
    def from_db_row(cls, row: tuple, choices: Optional[List[Choice]] = None) -> 'Poll':
        """
        Create a Poll object from database row tuple.

        Args:
            row (tuple): Database row as tuple (id, user_id, question, is_closed, created_at)
            choices (List[Choice]): Choices already loaded for this poll

        Returns:
            Poll: New Poll instance created from database row
        """
        created_at = row[4]
        if created_at and isinstance(created_at, datetime) and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            poll_id=row[0],
            owner_id=row[1],
            question=row[2],
            choices=choices,
            is_closed=row[3],
            created_at=created_at
        )
