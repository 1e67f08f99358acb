"""Core module - conversation storage, session state and business logic."""

from .message_store import MessageStore
from .navigation import Navigator
from .registry import ConversationRegistry
from .session_manager import ConversationSessionManager
from .session_state import SessionPhase, SessionState

__all__ = [
    'MessageStore',
    'Navigator',
    'ConversationRegistry',
    'ConversationSessionManager',
    'SessionPhase',
    'SessionState',
]
