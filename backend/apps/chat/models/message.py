"""Wire schemas for conversation turns."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    """One conversation turn as sent by the chat UI."""

    role: Literal["user", "assistant"] = Field(..., description="Who wrote the turn")
    content: str = Field(
        ..., description="Turn text; may be empty when only a file is attached"
    )
