from typing import List
from pydantic import BaseModel, Field, field_validator


class PollCreate(BaseModel):
    """Pydantic model for validating poll creation input."""
    owner_id: int = Field(..., gt=0, description="ID of the user creating the poll")
    question: str = Field(..., min_length=1, description="Question asked by the poll")
    choices: List[str] = Field(..., min_length=1, description="Choice texts in display order")

    @field_validator('question')
    @classmethod
    def validate_question(cls, v: str) -> str:
        """Ensure question is not empty or just whitespace."""
        if not v.strip():
            raise ValueError("Question cannot be empty or whitespace only")
        return v

    @field_validator('choices')
    @classmethod
    def validate_choices(cls, v: List[str]) -> List[str]:
        """Reject blank choice texts; texts are stored exactly as given."""
        for choice in v:
            if not choice.strip():
                raise ValueError("Poll choices cannot be empty or whitespace only")
        return v


class PollResultOption(BaseModel):
    """Poll choice with vote count and percentage"""
    choice_id: int
    choice_text: str
    vote_count: int
    percentage: float


class PollResults(BaseModel):
    """Poll results with vote counts and percentages"""
    poll_id: int
    question: str
    is_closed: bool
    total_votes: int
    options: List[PollResultOption]
