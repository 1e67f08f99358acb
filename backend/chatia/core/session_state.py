"""
Session State - Pure state machine for conversation selection.

``transition(state, event)`` returns the next immutable ``SessionState``
together with the side effects (navigation, persistence, log disposal) the
caller must perform. Nothing in this module touches storage or the address
bar.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Type, Union

from ..models import Conversation
from .navigation import ROOT_PATH, path_for


class SessionPhase(str, Enum):
    """Observable phase of the session."""
    NO_SELECTION = "no_selection"
    SELECTED = "selected"
    RECONCILING = "reconciling"


@dataclass(frozen=True)
class SessionState:
    """
    Immutable snapshot of the session.

    Invariant: when ``current_conversation_id`` is set, a conversation with
    that id is present in ``conversations``.
    """
    conversations: Tuple[Conversation, ...] = ()
    current_conversation_id: Optional[str] = None
    pending_selection: Optional[str] = None  # address id awaiting reconciliation
    booted: bool = False

    @property
    def phase(self) -> SessionPhase:
        if self.pending_selection is not None:
            return SessionPhase.RECONCILING
        if self.current_conversation_id is not None:
            return SessionPhase.SELECTED
        return SessionPhase.NO_SELECTION

    @property
    def current_conversation(self) -> Optional[Conversation]:
        return self.find(self.current_conversation_id)

    def find(self, conversation_id: Optional[str]) -> Optional[Conversation]:
        for conversation in self.conversations:
            if conversation.id == conversation_id:
                return conversation
        return None

    def has_conversation(self, conversation_id: Optional[str]) -> bool:
        return self.find(conversation_id) is not None


# -- events ---------------------------------------------------------------

@dataclass(frozen=True)
class Boot:
    """
    Registry loaded.

    ``requested_id`` comes from the initial address. ``from_address`` says an
    address was given at all, so an explicit "/" clears the stored selection.
    """
    conversations: Tuple[Conversation, ...]
    persisted_id: Optional[str] = None
    requested_id: Optional[str] = None
    from_address: bool = False


@dataclass(frozen=True)
class NewChat:
    """User asked for the home view to start a new chat."""


@dataclass(frozen=True)
class SelectConversation:
    """User picked a conversation from the list."""
    conversation_id: str


@dataclass(frozen=True)
class LocationChanged:
    """Address changed outside the session (typed URL, back, forward)."""
    conversation_id: Optional[str]


@dataclass(frozen=True)
class ConversationCreated:
    conversations: Tuple[Conversation, ...]
    conversation_id: str


@dataclass(frozen=True)
class ConversationDeleted:
    conversations: Tuple[Conversation, ...]
    conversation_id: str
    next_id: Optional[str] = None


@dataclass(frozen=True)
class ConversationsUpdated:
    """Registry metadata changed (rename, new message, clear all)."""
    conversations: Tuple[Conversation, ...]


Event = Union[
    Boot, NewChat, SelectConversation, LocationChanged,
    ConversationCreated, ConversationDeleted, ConversationsUpdated,
]


# -- effects --------------------------------------------------------------

@dataclass(frozen=True)
class Navigate:
    path: str
    replace: bool = False


@dataclass(frozen=True)
class PersistSelection:
    conversation_id: Optional[str]


@dataclass(frozen=True)
class DiscardMessages:
    conversation_id: str


Effect = Union[Navigate, PersistSelection, DiscardMessages]


@dataclass(frozen=True)
class Transition:
    state: SessionState
    effects: Tuple[Effect, ...] = field(default_factory=tuple)


# -- transition function --------------------------------------------------

def _selection_effects(previous: Optional[str], current: Optional[str]) -> Tuple[Effect, ...]:
    if previous == current:
        return ()
    return (PersistSelection(current),)


def _reconcile(state: SessionState) -> Transition:
    """Resolve ``pending_selection`` against the known conversations."""
    target = state.pending_selection
    previous = state.current_conversation_id

    if state.has_conversation(target):
        resolved = replace(state, current_conversation_id=target, pending_selection=None)
        return Transition(resolved, _selection_effects(previous, target))

    # Unknown conversation: fall back to the home view
    resolved = replace(state, current_conversation_id=None, pending_selection=None)
    effects = (Navigate(ROOT_PATH, replace=True),) + _selection_effects(previous, None)
    return Transition(resolved, effects)


def _on_boot(state: SessionState, event: Boot) -> Transition:
    state = replace(
        state,
        conversations=tuple(event.conversations),
        current_conversation_id=event.persisted_id,
        booted=True,
    )

    requested = event.requested_id or state.pending_selection
    if requested is not None:
        return _reconcile(replace(state, pending_selection=requested))

    if event.persisted_id is None:
        return Transition(state)

    if event.from_address:
        cleared = replace(state, current_conversation_id=None)
        return Transition(cleared, (PersistSelection(None),))

    if state.has_conversation(event.persisted_id):
        return Transition(state, (Navigate(path_for(event.persisted_id), replace=True),))

    # Stored selection points at a conversation that is gone
    cleared = replace(state, current_conversation_id=None)
    return Transition(cleared, (PersistSelection(None), Navigate(ROOT_PATH, replace=True)))


def _on_new_chat(state: SessionState, event: NewChat) -> Transition:
    cleared = replace(state, current_conversation_id=None, pending_selection=None)
    effects = _selection_effects(state.current_conversation_id, None) + (Navigate(ROOT_PATH),)
    return Transition(cleared, effects)


def _on_select(state: SessionState, event: SelectConversation) -> Transition:
    if not state.has_conversation(event.conversation_id):
        return _reconcile(replace(state, pending_selection=event.conversation_id))

    selected = replace(state, current_conversation_id=event.conversation_id, pending_selection=None)
    effects = _selection_effects(state.current_conversation_id, event.conversation_id)
    return Transition(selected, effects + (Navigate(path_for(event.conversation_id)),))


def _on_location_changed(state: SessionState, event: LocationChanged) -> Transition:
    if not state.booted:
        return Transition(replace(state, pending_selection=event.conversation_id))

    if event.conversation_id is None:
        # Address removal always wins over the in-memory selection
        cleared = replace(state, current_conversation_id=None, pending_selection=None)
        return Transition(cleared, _selection_effects(state.current_conversation_id, None))

    return _reconcile(replace(state, pending_selection=event.conversation_id))


def _on_created(state: SessionState, event: ConversationCreated) -> Transition:
    created = replace(
        state,
        conversations=tuple(event.conversations),
        current_conversation_id=event.conversation_id,
        pending_selection=None,
    )
    effects = _selection_effects(state.current_conversation_id, event.conversation_id)
    return Transition(created, effects + (Navigate(path_for(event.conversation_id)),))


def _on_deleted(state: SessionState, event: ConversationDeleted) -> Transition:
    updated = replace(state, conversations=tuple(event.conversations))
    effects: Tuple[Effect, ...] = (DiscardMessages(event.conversation_id),)

    if state.current_conversation_id != event.conversation_id:
        return Transition(updated, effects)

    next_id = event.next_id if updated.has_conversation(event.next_id) else None
    updated = replace(updated, current_conversation_id=next_id)
    effects += _selection_effects(state.current_conversation_id, next_id)
    effects += (Navigate(path_for(next_id), replace=True),)
    return Transition(updated, effects)


def _on_updated(state: SessionState, event: ConversationsUpdated) -> Transition:
    updated = replace(state, conversations=tuple(event.conversations))
    if updated.current_conversation_id is None or updated.has_conversation(updated.current_conversation_id):
        return Transition(updated)

    cleared = replace(updated, current_conversation_id=None)
    effects = _selection_effects(state.current_conversation_id, None)
    return Transition(cleared, effects + (Navigate(ROOT_PATH, replace=True),))


_HANDLERS: Dict[Type, Callable[[SessionState, object], Transition]] = {
    Boot: _on_boot,
    NewChat: _on_new_chat,
    SelectConversation: _on_select,
    LocationChanged: _on_location_changed,
    ConversationCreated: _on_created,
    ConversationDeleted: _on_deleted,
    ConversationsUpdated: _on_updated,
}


def transition(state: SessionState, event: Event) -> Transition:
    """
    Compute the next session state for an event.

    Args:
        state: Current session state
        event: Event to apply

    Returns:
        Transition with the new state and the effects to perform, in order
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unsupported session event: {type(event).__name__}")
    return handler(state, event)
