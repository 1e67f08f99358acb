"""
Conversation Registry - Durable catalog of conversation summaries.
Owns the ordered conversation list (newest first), the current-conversation
pointer and the sidebar preference. Every mutation is written through to
storage immediately.
"""

import json
import logging
import random
import re
import string
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from pydantic import ValidationError

from ..models import Conversation, ConversationList, utc_now
from ..storage import KeyValueStorage
from .message_store import messages_key

logger = logging.getLogger(__name__)

CONVERSATIONS_KEY = "conversations"
CURRENT_CONVERSATION_KEY = "current_conversation"
SIDEBAR_COLLAPSED_KEY = "sidebar_collapsed"

DEFAULT_TITLE = "New conversation"
EMPTY_PREVIEW = "Empty conversation"
TITLE_MAX_LENGTH = 50
PREVIEW_MAX_LENGTH = 100
EXPORT_VERSION = "1.0"

_ID_ALPHABET = string.digits + string.ascii_lowercase
_WHITESPACE_RE = re.compile(r"\s+")


def derive_title(seed_text: Optional[str]) -> str:
    """
    Build a conversation title from its first message.

    Takes the first 50 characters, trims them, collapses whitespace runs to a
    single space and appends "..." when the seed was longer.

    Args:
        seed_text: First message of the conversation

    Returns:
        Title string, "New conversation" when nothing usable remains
    """
    if not seed_text:
        return DEFAULT_TITLE

    title = _WHITESPACE_RE.sub(" ", seed_text[:TITLE_MAX_LENGTH].strip())
    if len(seed_text) > TITLE_MAX_LENGTH:
        title += "..."

    return title or DEFAULT_TITLE


def preview_text(text: str) -> str:
    """Cut a message down to the length shown in the sidebar."""
    return text[:PREVIEW_MAX_LENGTH]


def generate_conversation_id(now: datetime, rng: random.Random) -> str:
    """Time-based id with a random suffix: conv_<epoch millis>_<9 base36 chars>."""
    millis = int(now.timestamp() * 1000)
    suffix = "".join(rng.choice(_ID_ALPHABET) for _ in range(9))
    return f"conv_{millis}_{suffix}"


class ConversationRegistry:
    """
    CRUD over conversation summaries with stable ordering.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the registry.

        Args:
            storage: Durable key-value storage
            clock: Source of timestamps (and of the time part of new ids)
            rng: Random source for id suffixes
        """
        self.storage = storage
        self.clock = clock
        self.rng = rng or random.SystemRandom()
        self._conversations: Tuple[Conversation, ...] = ()
        self._current_id: Optional[str] = None
        self._sidebar_collapsed = False

    # -- queries ----------------------------------------------------------

    @property
    def conversations(self) -> Tuple[Conversation, ...]:
        """Conversations, newest first."""
        return self._conversations

    @property
    def current_conversation_id(self) -> Optional[str]:
        return self._current_id

    @property
    def sidebar_collapsed(self) -> bool:
        return self._sidebar_collapsed

    def get(self, conversation_id: Optional[str]) -> Optional[Conversation]:
        """Find a conversation by id."""
        for conversation in self._conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    def exists(self, conversation_id: Optional[str]) -> bool:
        return self.get(conversation_id) is not None

    # -- loading ----------------------------------------------------------

    def load(self) -> None:
        """
        Read the conversation list, selection and sidebar state from storage.

        Unreadable records fall back to defaults and are logged. Conversations
        whose id cannot name a message log are dropped, along with a selection
        pointing at them. Any other stored selection is kept as-is even when
        it points at a conversation that no longer exists; resolving that is
        the session's job.
        """
        raw = self.storage.load(CONVERSATIONS_KEY)
        conversations: List[Conversation] = []
        if raw is not None:
            try:
                conversations = ConversationList.validate_json(raw)
            except ValidationError as e:
                logger.error(f"Error loading conversations, starting empty: {e}")

        # Ids that cannot name a message log record are unusable
        rejected = {c.id for c in conversations if not self.storage.is_valid_key(messages_key(c.id))}
        if rejected:
            logger.error(f"Dropping conversations with invalid ids: {sorted(rejected)}")
        self._conversations = tuple(c for c in conversations if c.id not in rejected)

        self._current_id = self.storage.load(CURRENT_CONVERSATION_KEY) or None
        if self._current_id in rejected:
            self._current_id = None
            self._persist_current()

        raw_sidebar = self.storage.load(SIDEBAR_COLLAPSED_KEY)
        self._sidebar_collapsed = False
        if raw_sidebar is not None:
            try:
                self._sidebar_collapsed = bool(json.loads(raw_sidebar))
            except json.JSONDecodeError as e:
                logger.error(f"Error loading sidebar state, using default: {e}")

        logger.info(
            f"Loaded {len(self._conversations)} conversations, "
            f"current={self._current_id or 'none'}"
        )

    # -- mutations --------------------------------------------------------

    def create(self, seed_text: Optional[str] = None) -> str:
        """
        Create a conversation, insert it at the head and make it current.

        Args:
            seed_text: Optional first message used for the title and preview

        Returns:
            str: Id of the new conversation
        """
        now = self.clock()
        conversation_id = generate_conversation_id(now, self.rng)
        while self.exists(conversation_id):
            conversation_id = generate_conversation_id(now, self.rng)

        conversation = Conversation(
            id=conversation_id,
            title=derive_title(seed_text) if seed_text else DEFAULT_TITLE,
            last_message_preview=preview_text(seed_text) if seed_text else EMPTY_PREVIEW,
            created_at=now,
            updated_at=now,
            message_count=1 if seed_text else 0,
        )

        self._conversations = (conversation,) + self._conversations
        self._current_id = conversation_id
        self._persist_conversations()
        self._persist_current()

        logger.info(f"Created conversation {conversation_id} ({conversation.title!r})")
        return conversation_id

    def select(self, conversation_id: Optional[str]) -> None:
        """Make a conversation current, or clear the selection with None."""
        self._current_id = conversation_id
        self._persist_current()

    def rename(self, conversation_id: str, new_title: str) -> None:
        """Rename a conversation. Titles that trim to nothing are ignored."""
        title = (new_title or "").strip()
        if not title:
            return
        if self._update(conversation_id, title=title):
            logger.info(f"Renamed conversation {conversation_id} to {title!r}")

    def record_message(self, conversation_id: str, last_message: str, message_count: int) -> None:
        """
        Update a conversation after a message exchange.

        Args:
            conversation_id: Conversation identifier
            last_message: Text shown as preview (truncated to 100 characters)
            message_count: Length of the conversation's message log
        """
        self._update(
            conversation_id,
            last_message_preview=preview_text(last_message),
            message_count=message_count,
        )

    def delete(self, conversation_id: str) -> Optional[str]:
        """
        Remove a conversation.

        Deleting the current conversation selects the first remaining one,
        or clears the selection when none remain.

        Args:
            conversation_id: Conversation identifier

        Returns:
            Optional[str]: The current conversation id after the deletion
        """
        remaining = tuple(c for c in self._conversations if c.id != conversation_id)
        if len(remaining) == len(self._conversations):
            logger.warning(f"Delete ignored, unknown conversation {conversation_id}")
            return self._current_id

        self._conversations = remaining
        self._persist_conversations()

        if conversation_id == self._current_id:
            self._current_id = remaining[0].id if remaining else None
            self._persist_current()

        logger.info(f"Deleted conversation {conversation_id}, current={self._current_id or 'none'}")
        return self._current_id

    def clear_all(self) -> None:
        """Remove every conversation and the selection."""
        self._conversations = ()
        self._current_id = None
        self.storage.delete(CONVERSATIONS_KEY)
        self.storage.delete(CURRENT_CONVERSATION_KEY)
        logger.info("Cleared all conversations")

    def toggle_sidebar(self) -> bool:
        """Flip the sidebar collapsed preference and return the new value."""
        self._sidebar_collapsed = not self._sidebar_collapsed
        self.storage.save(SIDEBAR_COLLAPSED_KEY, json.dumps(self._sidebar_collapsed))
        return self._sidebar_collapsed

    def export(self) -> str:
        """Serialize every conversation summary as a JSON document."""
        return json.dumps({
            "conversations": ConversationList.dump_python(
                list(self._conversations), mode="json", by_alias=True
            ),
            "exportedAt": self.clock().isoformat(),
            "version": EXPORT_VERSION,
        }, indent=2, ensure_ascii=False)

    # -- persistence ------------------------------------------------------

    def _update(self, conversation_id: str, **changes) -> bool:
        found = False
        updated = []
        for conversation in self._conversations:
            if conversation.id == conversation_id:
                conversation = conversation.model_copy(update={**changes, "updated_at": self.clock()})
                found = True
            updated.append(conversation)

        if not found:
            logger.warning(f"Update ignored, unknown conversation {conversation_id}")
            return False

        self._conversations = tuple(updated)
        self._persist_conversations()
        return True

    def _persist_conversations(self) -> None:
        payload = ConversationList.dump_json(list(self._conversations), by_alias=True)
        if not self.storage.save(CONVERSATIONS_KEY, payload.decode("utf-8")):
            logger.error("Failed to persist conversations")

    def _persist_current(self) -> None:
        if self._current_id is None:
            self.storage.delete(CURRENT_CONVERSATION_KEY)
        elif not self.storage.save(CURRENT_CONVERSATION_KEY, self._current_id):
            logger.error("Failed to persist current conversation")
