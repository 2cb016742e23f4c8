from pydantic import BaseModel, Field


class ResponseCreate(BaseModel):
    """Pydantic model for incoming response (vote) requests."""
    poll_id: int = Field(..., gt=0, description="ID of the poll being voted on")
    choice_id: int = Field(..., gt=0, description="ID of the selected choice")
    user_id: int = Field(..., gt=0, description="ID of the user casting the vote")
