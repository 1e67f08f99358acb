"""
Tests for the responders.
"""

import asyncio
import random

import pytest

from chatia.responder import ResponderError, SimulatedResponder
from chatia.responder.simulated import CANNED_REPLIES, HELP_REPLY, THANKS_REPLY


class TestSimulatedResponder:

    @pytest.mark.asyncio
    async def test_reply_after_delay(self):
        responder = SimulatedResponder(response_delay=0)

        reply = await responder.process_message("Hello")

        assert reply in CANNED_REPLIES

    @pytest.mark.asyncio
    async def test_keyword_replies(self):
        responder = SimulatedResponder(response_delay=0)

        assert await responder.process_message("Can you HELP me?") == HELP_REPLY
        assert await responder.process_message("thanks a lot") == THANKS_REPLY

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_invalid_message(self, text):
        responder = SimulatedResponder(response_delay=0)

        with pytest.raises(ResponderError):
            await responder.process_message(text)

    def test_seeded_rng_is_deterministic(self):
        first = SimulatedResponder(rng=random.Random(7))
        second = SimulatedResponder(rng=random.Random(7))

        assert first.compose_reply("Hello") == second.compose_reply("Hello")

    @pytest.mark.parametrize("delay", [-1, "fast", True, None])
    def test_invalid_delay(self, delay):
        with pytest.raises(ValueError):
            SimulatedResponder(response_delay=delay)

    def test_set_response_delay(self):
        responder = SimulatedResponder()

        responder.set_response_delay(0.25)

        assert responder.response_delay == 0.25

    @pytest.mark.asyncio
    async def test_is_processing_while_pending(self):
        responder = SimulatedResponder(response_delay=0.05)
        assert not responder.is_processing

        task = asyncio.create_task(responder.process_message("Hello"))
        await asyncio.sleep(0)
        assert responder.is_processing

        await task
        assert not responder.is_processing
