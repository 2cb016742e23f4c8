from typing import Dict, Any


class PollSummary:
    """Aggregated response count for one choice of a poll. Derived, never persisted."""

    def __init__(
        self,
        question: str,
        choice_text: str,
        response_count: int,
        choice_id: int = 0
    ) -> None:
        self.question = question
        self.choice_text = choice_text
        self.response_count = response_count
        self.choice_id = choice_id

    def __repr__(self) -> str:
        return (f"PollSummary(question='{self.question}', choice_text='{self.choice_text}', "
                f"response_count={self.response_count}, choice_id={self.choice_id})")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PollSummary):
            return NotImplemented
        return (self.question == other.question and
                self.choice_text == other.choice_text and
                self.response_count == other.response_count)

    def __hash__(self) -> int:
        return hash((self.question, self.choice_text, self.response_count))

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "choice_id": self.choice_id,
            "choice_text": self.choice_text,
            "response_count": self.response_count
        }

    @classmethod
    def from_db_row(cls, row: tuple) -> 'PollSummary':
        """
        Create a PollSummary from a (choice_id, question, choice_text, response_count) row.
        """
        return cls(
            question=row[1],
            choice_text=row[2],
            response_count=int(row[3]),
            choice_id=row[0]
        )
