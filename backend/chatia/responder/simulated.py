"""
Simulated Responder - Canned assistant replies after an artificial delay.
"""

import asyncio
import logging
import random
from typing import Optional

from .base import Responder

logger = logging.getLogger(__name__)

CANNED_REPLIES = (
    "I understand your message. How can I help you further?",
    "That's an interesting point. Let me think about that.",
    "I'm here to assist you. What would you like to know?",
    "Thank you for sharing that with me. Is there anything specific you'd like help with?",
    "I appreciate your input. How can I best support you today?",
)
HELP_REPLY = "I'm here to help! What specific assistance do you need?"
THANKS_REPLY = "You're welcome! I'm glad I could help. Is there anything else you'd like to discuss?"


class SimulatedResponder(Responder):
    """Stands in for a real assistant."""

    def __init__(self, response_delay: float = 1.5, rng: Optional[random.Random] = None):
        """
        Args:
            response_delay: Seconds to wait before replying
            rng: Random source used to pick canned replies
        """
        super().__init__()
        self.set_response_delay(response_delay)
        self.rng = rng or random.Random()

    def set_response_delay(self, delay: float) -> None:
        """Change how long each reply takes."""
        if isinstance(delay, bool) or not isinstance(delay, (int, float)) or delay < 0:
            raise ValueError("Invalid delay value provided")
        self.response_delay = float(delay)

    def compose_reply(self, text: str) -> str:
        """Pick a reply based on simple keyword matching."""
        lowered = text.lower()
        if "help" in lowered:
            return HELP_REPLY
        if "thank" in lowered:
            return THANKS_REPLY
        return self.rng.choice(CANNED_REPLIES)

    async def generate_reply(self, text: str) -> str:
        await asyncio.sleep(self.response_delay)
        reply = self.compose_reply(text)
        logger.debug(f"Simulated reply after {self.response_delay:.2f}s")
        return reply
