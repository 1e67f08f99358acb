"""
Unit tests for the session state machine.
"""

import pytest

from chatia.core.session_state import (
    Boot,
    ConversationCreated,
    ConversationDeleted,
    ConversationsUpdated,
    DiscardMessages,
    LocationChanged,
    Navigate,
    NewChat,
    PersistSelection,
    SelectConversation,
    SessionPhase,
    SessionState,
    transition,
)
from chatia.models import Conversation


def _conversations(*ids):
    return tuple(Conversation(id=i, title=i) for i in ids)


def _booted(*ids, current=None):
    return SessionState(conversations=_conversations(*ids), current_conversation_id=current, booted=True)


class TestBoot:
    """Boot event."""

    def test_empty_registry(self):
        result = transition(SessionState(), Boot(conversations=()))

        assert result.state.booted
        assert result.state.phase == SessionPhase.NO_SELECTION
        assert result.effects == ()

    def test_restores_persisted_selection(self):
        result = transition(SessionState(), Boot(_conversations("a", "b"), persisted_id="b"))

        assert result.state.current_conversation_id == "b"
        assert result.effects == (Navigate("/c/b", replace=True),)

    def test_stale_persisted_selection(self):
        result = transition(SessionState(), Boot(_conversations("a"), persisted_id="gone"))

        assert result.state.current_conversation_id is None
        assert result.effects == (PersistSelection(None), Navigate("/", replace=True))

    def test_requested_id_wins(self):
        event = Boot(_conversations("a", "b"), persisted_id="b", requested_id="a", from_address=True)

        result = transition(SessionState(), event)

        assert result.state.current_conversation_id == "a"
        assert result.effects == (PersistSelection("a"),)

    def test_home_address_clears_persisted_selection(self):
        event = Boot(_conversations("a"), persisted_id="a", from_address=True)

        result = transition(SessionState(), event)

        assert result.state.phase == SessionPhase.NO_SELECTION
        assert result.effects == (PersistSelection(None),)

    def test_pending_location_is_reconciled(self):
        state = transition(SessionState(), LocationChanged("a")).state
        assert state.phase == SessionPhase.RECONCILING

        result = transition(state, Boot(_conversations("a")))

        assert result.state.phase == SessionPhase.SELECTED
        assert result.state.current_conversation_id == "a"
        assert result.state.pending_selection is None


class TestSelection:
    """Selecting conversations and address changes."""

    def test_new_chat(self):
        result = transition(_booted("a", current="a"), NewChat())

        assert result.state.current_conversation_id is None
        assert result.effects == (PersistSelection(None), Navigate("/"))

    def test_select_known(self):
        result = transition(_booted("a", "b", current="a"), SelectConversation("b"))

        assert result.state.current_conversation_id == "b"
        assert result.effects == (PersistSelection("b"), Navigate("/c/b"))

    def test_select_unknown_redirects_home(self):
        result = transition(_booted("a", current="a"), SelectConversation("zzz"))

        assert result.state.current_conversation_id is None
        assert result.state.pending_selection is None
        assert result.effects == (Navigate("/", replace=True), PersistSelection(None))

    def test_location_removed_clears_selection(self):
        result = transition(_booted("a", current="a"), LocationChanged(None))

        assert result.state.phase == SessionPhase.NO_SELECTION
        assert result.effects == (PersistSelection(None),)

    def test_location_same_conversation_has_no_effects(self):
        result = transition(_booted("a", current="a"), LocationChanged("a"))

        assert result.state.current_conversation_id == "a"
        assert result.effects == ()


class TestRegistryEvents:
    """Created, deleted and updated conversations."""

    def test_created(self):
        result = transition(_booted(), ConversationCreated(_conversations("new"), "new"))

        assert result.state.current_conversation_id == "new"
        assert result.effects == (PersistSelection("new"), Navigate("/c/new"))

    def test_deleted_current_reassigns(self):
        state = _booted("a", "b", current="a")

        result = transition(state, ConversationDeleted(_conversations("b"), "a", next_id="b"))

        assert result.state.current_conversation_id == "b"
        assert result.effects == (
            DiscardMessages("a"),
            PersistSelection("b"),
            Navigate("/c/b", replace=True),
        )

    def test_deleted_last(self):
        result = transition(_booted("a", current="a"), ConversationDeleted((), "a"))

        assert result.state.phase == SessionPhase.NO_SELECTION
        assert result.effects[-1] == Navigate("/", replace=True)

    def test_deleted_other(self):
        state = _booted("a", "b", current="a")

        result = transition(state, ConversationDeleted(_conversations("a"), "b", next_id="a"))

        assert result.state.current_conversation_id == "a"
        assert result.effects == (DiscardMessages("b"),)

    def test_updated_keeps_selection(self):
        state = _booted("a", current="a")
        renamed = (Conversation(id="a", title="renamed"),)

        result = transition(state, ConversationsUpdated(renamed))

        assert result.state.current_conversation.title == "renamed"
        assert result.effects == ()

    def test_updated_without_current_goes_home(self):
        result = transition(_booted("a", current="a"), ConversationsUpdated(()))

        assert result.state.current_conversation_id is None
        assert result.effects == (PersistSelection(None), Navigate("/", replace=True))


def test_unknown_event():
    with pytest.raises(TypeError):
        transition(SessionState(), object())


def test_state_is_immutable():
    state = SessionState()
    with pytest.raises(Exception):
        state.current_conversation_id = "a"
