"""
Session Models - Request bodies and views returned by the API.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .chat import Conversation, Message


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatStats(_CamelModel):
    """Message counts for one conversation."""
    total_messages: int = 0
    user_messages: int = 0
    assistant_messages: int = 0
    is_active: bool = False  # more than just the greeting


class SessionView(_CamelModel):
    """Everything a client needs to render the current view."""
    phase: str
    current_conversation_id: Optional[str] = None
    location: str = "/"
    conversations: List[Conversation] = []
    messages: List[Message] = []
    is_busy: bool = False
    error: Optional[str] = None
    sidebar_collapsed: bool = False
    stats: ChatStats = Field(default_factory=ChatStats)


class SendMessageRequest(BaseModel):
    """Message text typed by the user."""
    text: str


class RenameRequest(BaseModel):
    """New title for a conversation."""
    title: str


class ShareResult(_CamelModel):
    """Outcome of copying a conversation transcript."""
    copied: bool
    text: Optional[str] = None
