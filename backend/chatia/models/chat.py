"""
Chat Models - Messages and conversation summaries as they are persisted.
Records are stored with camelCase field names.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(timezone.utc)


class Sender(str, Enum):
    """Who wrote a message."""
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single chat message. Immutable once created."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int  # unique within its conversation, strictly increasing
    text: str
    sender: Sender
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("sender", mode="before")
    @classmethod
    def _accept_legacy_sender(cls, value):
        # Older logs call the assistant "ai"
        if value == "ai":
            return Sender.ASSISTANT
        return value


class Conversation(BaseModel):
    """Conversation summary kept by the registry (metadata only)."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    last_message_preview: str = Field(
        default="",
        validation_alias=AliasChoices("lastMessagePreview", "lastMessage", "last_message_preview"),
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    message_count: int = 0


MessageLog = TypeAdapter(List[Message])
ConversationList = TypeAdapter(List[Conversation])
