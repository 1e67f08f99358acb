"""
Interaction Service - Confirmation prompts and clipboard access.
These sit at the edge of the system; the session manager only asks
questions and hands over text.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class InteractionService(ABC):
    """
    Boundary for user confirmations and clipboard writes.
    """

    @abstractmethod
    def confirm(self, prompt: str) -> bool:
        """
        Ask the user to confirm an action.

        Args:
            prompt: Question shown to the user

        Returns:
            bool: True if the user agreed
        """
        pass

    @abstractmethod
    def copy_to_clipboard(self, text: str) -> bool:
        """
        Copy text to the user's clipboard.

        Args:
            text: Text to copy

        Returns:
            bool: True if the text was copied
        """
        pass


class AutoInteraction(InteractionService):
    """
    Non-interactive implementation used by the API and in tests.

    Every confirmation gets the same answer. Only the latest prompt and the
    latest copied text are kept.
    """

    def __init__(self, auto_confirm: bool = True):
        self.auto_confirm = auto_confirm
        self.last_prompt: Optional[str] = None
        self.clipboard: Optional[str] = None

    def confirm(self, prompt: str) -> bool:
        self.last_prompt = prompt
        logger.debug(f"Confirmation {prompt!r} answered {self.auto_confirm}")
        return self.auto_confirm

    def copy_to_clipboard(self, text: str) -> bool:
        self.clipboard = text
        return True
