"""
Shared test fixtures and configuration.
"""

import asyncio
import random
from datetime import datetime, timedelta, timezone

import pytest
import os

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_TYPE", "memory")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/chatia_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ.setdefault("RESPONDER_DELAY_SECONDS", "0")

from chatia.core import ConversationRegistry, ConversationSessionManager, MessageStore
from chatia.responder import Responder
from chatia.services import AutoInteraction
from chatia.storage import InMemoryStorage


class FakeClock:
    """Deterministic clock; every call advances one second."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class ScriptedResponder(Responder):
    """Replies "reply to <text>" immediately, or fails when told to."""

    def __init__(self):
        super().__init__()
        self.calls = []
        self.fail_with = None

    async def generate_reply(self, text: str) -> str:
        self.calls.append(text)
        if self.fail_with is not None:
            raise self.fail_with
        return f"reply to {text}"


class GatedResponder(Responder):
    """Holds every reply until ``release`` is called for it, then answers or fails."""

    def __init__(self):
        super().__init__()
        self.gates = {}
        self.failures = {}

    async def generate_reply(self, text: str) -> str:
        gate = self.gates.setdefault(text, asyncio.Event())
        await gate.wait()
        if text in self.failures:
            raise self.failures[text]
        return f"reply to {text}"

    def release(self, text: str, error: Exception = None) -> None:
        if error is not None:
            self.failures[text] = error
        self.gates.setdefault(text, asyncio.Event()).set()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(storage, clock):
    return ConversationRegistry(storage, clock=clock, rng=random.Random(42))


@pytest.fixture
def message_store(storage):
    return MessageStore(storage)


@pytest.fixture
def responder():
    return ScriptedResponder()


@pytest.fixture
def interaction():
    return AutoInteraction()


@pytest.fixture
def manager(registry, message_store, responder, interaction):
    session = ConversationSessionManager(registry, message_store, responder, interaction=interaction)
    session.boot()
    return session


@pytest.fixture
def make_manager(storage, clock, interaction):
    """Build a fresh session over the same storage, as after a restart."""

    def _make(responder=None, location=None):
        session = ConversationSessionManager(
            ConversationRegistry(storage, clock=clock, rng=random.Random()),
            MessageStore(storage),
            responder or ScriptedResponder(),
            interaction=interaction,
        )
        session.boot(location)
        return session

    return _make


@pytest.fixture
def gated_responder():
    return GatedResponder()
