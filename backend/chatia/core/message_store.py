"""
Message Store - Per-conversation message logs.
Each conversation's log is persisted as one JSON record keyed by its id.
"""

import logging
from typing import Dict, List, Tuple

from pydantic import ValidationError

from ..models import Message, MessageLog, Sender
from ..storage import KeyValueStorage
from .logging_config import truncate_text

logger = logging.getLogger(__name__)

MESSAGES_KEY_PREFIX = "messages_"
DEFAULT_GREETING = "Hello! I'm your AI assistant. How can I help you today?"


def messages_key(conversation_id: str) -> str:
    """Storage key of a conversation's message log."""
    return f"{MESSAGES_KEY_PREFIX}{conversation_id}"


class MessageStore:
    """
    Owns the ordered message log of every conversation.

    Logs are read lazily from storage and cached; every append writes the
    full log back synchronously.
    """

    def __init__(self, storage: KeyValueStorage, greeting: str = DEFAULT_GREETING):
        """
        Initialize the message store.

        Args:
            storage: Durable key-value storage
            greeting: Text of the assistant greeting used when a log can't be read
        """
        self.storage = storage
        self.greeting = greeting
        self._logs: Dict[str, Tuple[Message, ...]] = {}

    def default_log(self) -> List[Message]:
        """Log shown for a conversation whose record is missing or unreadable."""
        return [Message(id=1, text=self.greeting, sender=Sender.ASSISTANT)]

    def load(self, conversation_id: str) -> List[Message]:
        """
        Return a conversation's messages, oldest first.

        Corrupt or missing records fall back to the default greeting log;
        the failure is logged and never raised.

        Args:
            conversation_id: Conversation identifier

        Returns:
            List of messages
        """
        cached = self._logs.get(conversation_id)
        if cached is not None:
            return list(cached)

        raw = self.storage.load(messages_key(conversation_id))
        if raw is None:
            logger.warning(f"No message log for {conversation_id}, using default log")
            messages = self.default_log()
        else:
            try:
                messages = MessageLog.validate_json(raw)
            except ValidationError as e:
                logger.error(f"Corrupt message log for {conversation_id}, using default log: {e}")
                messages = self.default_log()

        self._logs[conversation_id] = tuple(messages)
        return list(messages)

    def initialize(self, conversation_id: str) -> None:
        """Start an empty log for a newly created conversation."""
        self._logs[conversation_id] = ()
        self._persist(conversation_id)

    def append(self, conversation_id: str, text: str, sender: Sender) -> Message:
        """
        Append a message to a conversation's log.

        The id is one more than the largest id present, so gaps left by
        older data never lead to a collision.

        Args:
            conversation_id: Conversation identifier
            text: Message text
            sender: Message author

        Returns:
            The stored message
        """
        messages = self.load(conversation_id)
        next_id = max((m.id for m in messages), default=0) + 1
        message = Message(id=next_id, text=text, sender=Sender(sender))

        self._logs[conversation_id] = tuple(messages) + (message,)
        self._persist(conversation_id)

        logger.debug(
            f"Appended message {next_id} ({message.sender.value}) to {conversation_id}: "
            f"{truncate_text(text)}"
        )
        return message

    def count(self, conversation_id: str) -> int:
        """Number of messages in a conversation's log."""
        return len(self.load(conversation_id))

    def discard(self, conversation_id: str) -> None:
        """Forget a conversation's log, in memory and on disk."""
        self._logs.pop(conversation_id, None)
        self.storage.delete(messages_key(conversation_id))

    def clear(self) -> None:
        """Discard every stored message log."""
        self._logs.clear()
        for key in self.storage.list(MESSAGES_KEY_PREFIX):
            self.storage.delete(key)

    def _persist(self, conversation_id: str) -> None:
        payload = MessageLog.dump_json(list(self._logs[conversation_id]), by_alias=True)
        if not self.storage.save(messages_key(conversation_id), payload.decode("utf-8")):
            logger.error(f"Failed to persist message log for {conversation_id}")
