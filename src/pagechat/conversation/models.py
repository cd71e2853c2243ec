"""Data models for the conversation.

These models define the turn records and stream outcomes, independent
of how a front end displays them.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """One turn of the visible conversation.

    Immutable: a streaming assistant turn is replaced by a new Message
    on every delta rather than edited.
    """

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Who produced the turn")
    content: str = Field(default="", description="Full text of the turn")

    def extended(self, delta: str) -> "Message":
        """Return a copy with delta appended to the content."""
        return self.model_copy(update={"content": self.content + delta})


class StreamStatus(str, Enum):
    """How a StreamSession ended."""

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class StreamOutcome(BaseModel):
    """Summary of one finished StreamSession."""

    model_config = ConfigDict(frozen=True)

    slot: int = Field(description="Conversation index the session wrote into")
    status: StreamStatus
    fragments: int = Field(default=0, description="Number of fragments applied")
    characters: int = Field(default=0, description="Characters received before the session ended")
    elapsed: float = Field(default=0.0, description="Wall time in seconds")
    usage: dict[str, Any] | None = Field(default=None, description="Token usage reported by the backend")
    error: str | None = Field(default=None, description="Transport error, for diagnostics only")
