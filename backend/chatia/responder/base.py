"""
Responder Base - Abstract base for assistant reply generators.
"""

from abc import ABC, abstractmethod


class ResponderError(Exception):
    """Raised when a responder cannot produce a reply."""


class Responder(ABC):
    """
    Abstract base class for responders.
    Given a user message, asynchronously produce the assistant's reply text.
    """

    def __init__(self):
        self._in_flight = 0

    @property
    def is_processing(self) -> bool:
        """True while at least one reply is being produced."""
        return self._in_flight > 0

    async def process_message(self, text: str) -> str:
        """
        Produce a reply for a user message.

        Args:
            text: Non-empty user message

        Returns:
            str: Reply text

        Raises:
            ResponderError: If no reply could be produced
        """
        if not isinstance(text, str) or not text.strip():
            raise ResponderError("Invalid user message provided")

        self._in_flight += 1
        try:
            return await self.generate_reply(text)
        finally:
            self._in_flight -= 1

    @abstractmethod
    async def generate_reply(self, text: str) -> str:
        """
        Generate the reply text. Subclasses implement this.

        Args:
            text: Validated user message

        Returns:
            str: Reply text
        """
        pass
