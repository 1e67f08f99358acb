"""
Conversation Session Manager - Keeps the registry, the message logs and the
address bar consistent.

Selection rules live in ``session_state.transition``; this class feeds it
events, applies the resulting effects, and runs the message exchange with the
responder. The responder call is the only suspension point.
"""

import logging
from typing import List, Optional, Set

from ..models import ChatStats, Conversation, Message, Sender, SessionView
from ..responder import Responder
from ..services import AutoInteraction, InteractionService
from .logging_config import ConversationLoggerAdapter, truncate_text
from .message_store import MessageStore
from .navigation import ROOT_PATH, Navigator, conversation_id_from_path
from .registry import ConversationRegistry
from .session_state import (
    Boot,
    ConversationCreated,
    ConversationDeleted,
    ConversationsUpdated,
    DiscardMessages,
    Effect,
    Event,
    LocationChanged,
    Navigate,
    NewChat,
    PersistSelection,
    SelectConversation,
    SessionPhase,
    SessionState,
    transition,
)

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, I encountered an error processing your message. Please try again."
DEFAULT_ERROR = "Failed to send message"
DELETE_PROMPT = "Are you sure you want to delete this conversation?"
CLEAR_ALL_PROMPT = "Are you sure you want to delete all conversations?"


def format_transcript(messages: List[Message]) -> str:
    """Render messages as shareable plain text."""
    lines = []
    for message in messages:
        speaker = "User" if message.sender == Sender.USER else "AI"
        lines.append(f"{speaker}: {message.text}")
    return "\n\n".join(lines)


class ConversationSessionManager:
    """
    Owns the session: which conversation is current, what the address says,
    and every mutation of conversations and their messages.
    """

    def __init__(
        self,
        registry: ConversationRegistry,
        message_store: MessageStore,
        responder: Responder,
        navigator: Optional[Navigator] = None,
        interaction: Optional[InteractionService] = None,
    ):
        """
        Initialize the session manager.

        Args:
            registry: Conversation registry (metadata and selection)
            message_store: Per-conversation message logs
            responder: Produces assistant replies
            navigator: Address bar; a fresh one at "/" if not given
            interaction: Confirmation and clipboard boundary
        """
        self.registry = registry
        self.message_store = message_store
        self.responder = responder
        self.navigator = navigator or Navigator()
        self.interaction = interaction or AutoInteraction()
        self.state = SessionState()
        self.error: Optional[str] = None
        self._busy: Set[str] = set()

    # -- state machine plumbing -------------------------------------------

    def dispatch(self, event: Event) -> SessionState:
        """Run an event through the state machine and apply its effects."""
        result = transition(self.state, event)
        self.state = result.state
        for effect in result.effects:
            self._apply(effect)
        return self.state

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, Navigate):
            if effect.replace:
                self.navigator.replace(effect.path)
            else:
                self.navigator.push(effect.path)
        elif isinstance(effect, PersistSelection):
            if self.registry.current_conversation_id != effect.conversation_id:
                self.registry.select(effect.conversation_id)
        elif isinstance(effect, DiscardMessages):
            self.message_store.discard(effect.conversation_id)
        else:
            raise TypeError(f"Unsupported session effect: {type(effect).__name__}")

    # -- queries ----------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def current_conversation_id(self) -> Optional[str]:
        return self.state.current_conversation_id

    @property
    def current_conversation(self) -> Optional[Conversation]:
        return self.state.current_conversation

    @property
    def conversations(self) -> List[Conversation]:
        return list(self.state.conversations)

    @property
    def location(self) -> str:
        return self.navigator.location

    @property
    def messages(self) -> List[Message]:
        """Messages of the conversation on screen; empty on the home view."""
        if self.current_conversation_id is None:
            return []
        return self.message_store.load(self.current_conversation_id)

    @property
    def is_busy(self) -> bool:
        """True while the conversation on screen waits for a reply."""
        return self.is_conversation_busy(self.current_conversation_id)

    def is_conversation_busy(self, conversation_id: Optional[str]) -> bool:
        return conversation_id in self._busy

    def chat_stats(self, conversation_id: Optional[str] = None) -> ChatStats:
        """Message counts for a conversation (the current one by default)."""
        conversation_id = conversation_id or self.current_conversation_id
        if conversation_id is None or not self.registry.exists(conversation_id):
            return ChatStats()
        messages = self.message_store.load(conversation_id)
        user_count = sum(1 for m in messages if m.sender == Sender.USER)
        return ChatStats(
            total_messages=len(messages),
            user_messages=user_count,
            assistant_messages=len(messages) - user_count,
            is_active=len(messages) > 1,
        )

    def view(self) -> SessionView:
        """Snapshot of everything needed to render the session."""
        return SessionView(
            phase=self.phase.value,
            current_conversation_id=self.current_conversation_id,
            location=self.location,
            conversations=self.conversations,
            messages=self.messages,
            is_busy=self.is_busy,
            error=self.error,
            sidebar_collapsed=self.registry.sidebar_collapsed,
            stats=self.chat_stats(),
        )

    # -- lifecycle and navigation -----------------------------------------

    def boot(self, location: Optional[str] = None) -> SessionState:
        """
        Load persisted conversations and restore the selection.

        Args:
            location: Address the session starts at. When given it decides
                the selection; otherwise the persisted selection is restored.

        Returns:
            The session state after booting
        """
        self.registry.load()
        requested_id = None
        if location is not None:
            self.navigator.replace(location)
            requested_id = conversation_id_from_path(location)

        state = self.dispatch(Boot(
            conversations=self.registry.conversations,
            persisted_id=self.registry.current_conversation_id,
            requested_id=requested_id,
            from_address=location is not None,
        ))
        logger.info(f"Session booted: phase={state.phase.value}, location={self.location}")
        return state

    def new_chat(self) -> SessionState:
        """Go to the home view. The conversation is created on first send."""
        return self.dispatch(NewChat())

    def select_conversation(self, conversation_id: str) -> SessionState:
        """Show a conversation picked from the list."""
        return self.dispatch(SelectConversation(conversation_id))

    def open(self, path: str) -> SessionState:
        """
        Handle an address entered from outside the session.

        Args:
            path: New address ("/" or "/c/<id>")

        Returns:
            The reconciled session state
        """
        conversation_id = conversation_id_from_path(path)
        self.navigator.push(path if conversation_id is not None else ROOT_PATH)
        return self._follow_location()

    def go_back(self) -> SessionState:
        self.navigator.back()
        return self._follow_location()

    def go_forward(self) -> SessionState:
        self.navigator.forward()
        return self._follow_location()

    def _follow_location(self) -> SessionState:
        conversation_id = conversation_id_from_path(self.navigator.location)
        state = self.dispatch(LocationChanged(conversation_id))
        if conversation_id is not None and state.current_conversation_id != conversation_id:
            logger.info(f"Unknown conversation {conversation_id} in address, redirected home")
        return state

    # -- messaging --------------------------------------------------------

    async def send_message(self, text: str) -> Optional[Message]:
        """
        Send a user message and wait for the assistant's reply.

        From the home view this first creates a conversation titled after
        the message and moves the address to it. Blank text is ignored.

        Args:
            text: Message typed by the user

        Returns:
            The assistant message that was stored (reply or error notice),
            or None when nothing was sent or the reply was dropped
        """
        if not isinstance(text, str) or not text.strip():
            return None
        text = text.strip()

        conversation_id = self.current_conversation_id
        if conversation_id is None:
            conversation_id = self._start_conversation(text)

        return await self._exchange(conversation_id, text)

    def _start_conversation(self, seed_text: str) -> str:
        conversation_id = self.registry.create(seed_text)
        self.message_store.initialize(conversation_id)
        self.dispatch(ConversationCreated(self.registry.conversations, conversation_id))
        return conversation_id

    async def _exchange(self, conversation_id: str, text: str) -> Optional[Message]:
        # conversation_id is fixed here; the reply goes to this conversation
        # even if the user navigates away while waiting.
        log = ConversationLoggerAdapter(logger, {"conversation_id": conversation_id})
        self.error = None
        self.message_store.append(conversation_id, text, Sender.USER)
        self._busy.add(conversation_id)
        log.info(f"User message stored: {truncate_text(text)}")

        try:
            try:
                reply_text = await self.responder.process_message(text)
            except Exception as e:
                log.error(f"Responder failed: {e}", exc_info=True)
                # The banner belongs to the view; other conversations only get the log entry
                if conversation_id == self.current_conversation_id:
                    self.error = str(e) or DEFAULT_ERROR
                return self._store_reply(conversation_id, ERROR_REPLY, preview=text, log=log)
            return self._store_reply(conversation_id, reply_text, preview=reply_text, log=log)
        finally:
            self._busy.discard(conversation_id)

    def _store_reply(
        self,
        conversation_id: str,
        text: str,
        preview: str,
        log: logging.LoggerAdapter,
    ) -> Optional[Message]:
        if not self.registry.exists(conversation_id):
            log.warning("Conversation deleted before the reply arrived, reply dropped")
            return None

        reply = self.message_store.append(conversation_id, text, Sender.ASSISTANT)
        self.registry.record_message(conversation_id, preview, self.message_store.count(conversation_id))
        self.dispatch(ConversationsUpdated(self.registry.conversations))
        log.info(f"Assistant message {reply.id} stored")
        return reply

    def clear_error(self) -> None:
        """Dismiss the error banner."""
        self.error = None

    # -- conversation management ------------------------------------------

    def delete_conversation(self, conversation_id: str, confirm: bool = False) -> bool:
        """
        Delete a conversation and its message log.

        Args:
            conversation_id: Conversation to delete
            confirm: Ask the user first

        Returns:
            bool: True if the conversation was deleted
        """
        if not self.registry.exists(conversation_id):
            return False
        if confirm and not self.interaction.confirm(DELETE_PROMPT):
            return False

        next_id = self.registry.delete(conversation_id)
        self.dispatch(ConversationDeleted(self.registry.conversations, conversation_id, next_id))
        return True

    def rename_conversation(self, conversation_id: str, title: str) -> None:
        """Rename a conversation; blank titles are ignored."""
        self.registry.rename(conversation_id, title)
        self.dispatch(ConversationsUpdated(self.registry.conversations))

    def clear_all_conversations(self, confirm: bool = True) -> bool:
        """
        Delete every conversation and message log.

        Args:
            confirm: Ask the user first

        Returns:
            bool: True if everything was deleted
        """
        if confirm and not self.interaction.confirm(CLEAR_ALL_PROMPT):
            return False

        self.registry.clear_all()
        self.message_store.clear()
        self.dispatch(ConversationsUpdated(self.registry.conversations))
        if self.location != ROOT_PATH:
            self.navigator.replace(ROOT_PATH)
        return True

    def share_conversation(self, conversation_id: Optional[str] = None) -> Optional[str]:
        """
        Copy a conversation transcript to the clipboard.

        Args:
            conversation_id: Conversation to share (the current one by default)

        Returns:
            The copied text, or None when there was nothing to share
        """
        conversation_id = conversation_id or self.current_conversation_id
        if conversation_id is None or not self.registry.exists(conversation_id):
            return None

        messages = self.message_store.load(conversation_id)
        if len(messages) <= 1:
            logger.info(f"Nothing to share in {conversation_id}")
            return None

        text = format_transcript(messages)
        if not self.interaction.copy_to_clipboard(text):
            logger.warning(f"Clipboard refused transcript of {conversation_id}")
            return None
        return text

    def export_conversations(self) -> str:
        return self.registry.export()

    def toggle_sidebar(self) -> bool:
        return self.registry.toggle_sidebar()
