"""Models module."""

from .chat import Sender, Message, Conversation, MessageLog, ConversationList, utc_now
from .session import ChatStats, SessionView, SendMessageRequest, RenameRequest, ShareResult

__all__ = [
    'Sender', 'Message', 'Conversation', 'MessageLog', 'ConversationList', 'utc_now',
    'ChatStats', 'SessionView', 'SendMessageRequest', 'RenameRequest', 'ShareResult',
]
