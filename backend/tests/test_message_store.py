"""
Unit tests for the message store.
"""

import json

from chatia.core.message_store import DEFAULT_GREETING, MessageStore, messages_key
from chatia.models import Sender


class TestMessageStore:

    def test_missing_log_falls_back_to_greeting(self, message_store):
        messages = message_store.load("conv_1")

        assert len(messages) == 1
        assert messages[0].id == 1
        assert messages[0].sender == Sender.ASSISTANT
        assert messages[0].text == DEFAULT_GREETING

    def test_initialized_log_is_empty(self, message_store, storage):
        message_store.initialize("conv_1")

        assert message_store.load("conv_1") == []
        assert json.loads(storage.load(messages_key("conv_1"))) == []

    def test_append_assigns_increasing_ids(self, message_store):
        message_store.initialize("conv_1")

        first = message_store.append("conv_1", "Hello", Sender.USER)
        second = message_store.append("conv_1", "Hi there", Sender.ASSISTANT)

        assert (first.id, second.id) == (1, 2)
        assert message_store.count("conv_1") == 2

    def test_append_after_greeting(self, message_store):
        message = message_store.append("conv_1", "Hello", "user")

        assert message.id == 2
        assert message.sender == Sender.USER

    def test_append_skips_past_gaps(self, storage):
        storage.save(messages_key("conv_1"), json.dumps([
            {"id": 1, "text": "a", "sender": "user", "createdAt": "2024-01-01T00:00:00Z"},
            {"id": 7, "text": "b", "sender": "assistant", "createdAt": "2024-01-01T00:00:01Z"},
        ]))

        message = MessageStore(storage).append("conv_1", "c", Sender.USER)

        assert message.id == 8

    def test_persisted_and_reloaded(self, message_store, storage):
        message_store.initialize("conv_1")
        message_store.append("conv_1", "Hello", Sender.USER)

        reloaded = MessageStore(storage).load("conv_1")

        assert [m.text for m in reloaded] == ["Hello"]
        record = json.loads(storage.load(messages_key("conv_1")))
        assert set(record[0]) == {"id", "text", "sender", "createdAt"}

    def test_corrupt_log_falls_back(self, storage):
        storage.save(messages_key("conv_1"), "[{\"id\": \"nope\"}]")

        messages = MessageStore(storage).load("conv_1")

        assert [m.text for m in messages] == [DEFAULT_GREETING]

    def test_legacy_ai_sender(self, storage):
        storage.save(messages_key("conv_1"), json.dumps([
            {"id": 1, "text": "hi", "sender": "ai", "createdAt": "2024-01-01T00:00:00Z"},
        ]))

        messages = MessageStore(storage).load("conv_1")

        assert messages[0].sender == Sender.ASSISTANT

    def test_load_returns_copy(self, message_store):
        message_store.initialize("conv_1")

        message_store.load("conv_1").append("junk")

        assert message_store.load("conv_1") == []

    def test_discard(self, message_store, storage):
        message_store.initialize("conv_1")

        message_store.discard("conv_1")

        assert not storage.exists(messages_key("conv_1"))
        assert message_store.load("conv_1")[0].text == DEFAULT_GREETING

    def test_clear(self, message_store, storage):
        storage.save("conversations", "[]")
        message_store.initialize("conv_1")
        message_store.initialize("conv_2")

        message_store.clear()

        assert storage.list("messages_") == []
        assert storage.exists("conversations")

    def test_custom_greeting(self, storage):
        store = MessageStore(storage, greeting="Welcome")

        assert store.load("conv_1")[0].text == "Welcome"
